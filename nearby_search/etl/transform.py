"""Utilities for turning database rows into records and records into API payloads."""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional

from nearby_search.models import (
    DishRecord,
    GeoPoint,
    MenuRecord,
    NearbySearchResult,
    RankedResult,
    RestaurantRecord,
)

logger = logging.getLogger(__name__)


def _safe_float(value: Any, default: Optional[float] = None) -> Optional[float]:
    try:
        if value is None:
            return default
        return float(value)
    except (TypeError, ValueError):
        return default


def _string_list(value: Any) -> List[str]:
    if not value:
        return []
    return [str(item) for item in value]


def parse_location(raw: Any) -> GeoPoint:
    """Read the ``{lat, lng}`` JSONB location column."""
    if isinstance(raw, str):
        raw = json.loads(raw)
    if not isinstance(raw, dict):
        logger.error("Unsupported location value: %r", raw)
        raise ValueError("unsupported location value")
    return GeoPoint(latitude=float(raw["lat"]), longitude=float(raw["lng"]))


def to_dish_record(row: Dict[str, Any]) -> DishRecord:
    spice_level = row.get("spice_level")
    return DishRecord(
        id=str(row.get("id")),
        name=row.get("name") or "",
        price=_safe_float(row.get("price"), 0.0),
        dietary_tags=_string_list(row.get("dietary_tags")),
        allergens=_string_list(row.get("allergens")),
        is_available=bool(row.get("is_available", True)),
        spice_level=int(spice_level) if spice_level is not None else None,
    )


def to_menu_record(row: Dict[str, Any]) -> MenuRecord:
    return MenuRecord(
        id=str(row.get("id")),
        name=row.get("name") or "",
        is_active=bool(row.get("is_active", True)),
        dishes=[to_dish_record(dish) for dish in row.get("dishes") or []],
    )


def to_restaurant_record(row: Dict[str, Any]) -> RestaurantRecord:
    return RestaurantRecord(
        id=str(row.get("id")),
        name=row.get("name") or "",
        location=parse_location(row.get("location")),
        address=row.get("address") or "",
        cuisine_types=_string_list(row.get("cuisine_types")),
        rating=_safe_float(row.get("rating"), 0.0),
        delivery_available=bool(row.get("delivery_available")),
        takeout_available=bool(row.get("takeout_available")),
        dine_in_available=bool(row.get("dine_in_available")),
        menus=[to_menu_record(menu) for menu in row.get("menus") or []],
        city=row.get("city"),
        country_code=row.get("country_code"),
        restaurant_type=row.get("restaurant_type"),
        phone=row.get("phone"),
        website=row.get("website"),
        service_speed=row.get("service_speed"),
    )


def to_restaurant_records(rows: Iterable[Dict[str, Any]]) -> List[RestaurantRecord]:
    records: List[RestaurantRecord] = []
    for row in rows:
        try:
            records.append(to_restaurant_record(row))
        except (KeyError, TypeError, ValueError) as exc:
            logger.error("Unusable restaurant row id=%s: %r", row.get("id"), exc)
            raise ValueError("unusable restaurant row") from exc
    return records


def dish_payload(dish: DishRecord) -> Dict[str, Any]:
    return {
        "id": dish.id,
        "name": dish.name,
        "price": dish.price,
        "dietary_tags": list(dish.dietary_tags),
        "allergens": list(dish.allergens),
        "spice_level": dish.spice_level,
        "is_available": dish.is_available,
    }


def ranked_payload(result: RankedResult) -> Dict[str, Any]:
    """Serialise a ranked restaurant in the row shape clients already consume."""
    restaurant = result.restaurant
    return {
        "id": restaurant.id,
        "name": restaurant.name,
        "location": {"lat": restaurant.location.latitude, "lng": restaurant.location.longitude},
        "address": restaurant.address,
        "city": restaurant.city,
        "country_code": restaurant.country_code,
        "cuisine_types": list(restaurant.cuisine_types),
        "restaurant_type": restaurant.restaurant_type,
        "rating": restaurant.rating,
        "phone": restaurant.phone,
        "website": restaurant.website,
        "delivery_available": restaurant.delivery_available,
        "takeout_available": restaurant.takeout_available,
        "dine_in_available": restaurant.dine_in_available,
        "service_speed": restaurant.service_speed,
        "distance": result.distance,
        "menus": [
            {
                "id": menu.id,
                "name": menu.name,
                "is_active": menu.is_active,
                "dishes": [dish_payload(dish) for dish in menu.dishes],
            }
            for menu in restaurant.menus
        ],
    }


def to_response_payload(result: NearbySearchResult) -> Dict[str, Any]:
    return {
        "restaurants": [ranked_payload(item) for item in result.restaurants],
        "totalCount": result.total_count,
        "searchRadius": result.search_radius,
        "centerPoint": {
            "latitude": result.center_point.latitude,
            "longitude": result.center_point.longitude,
        },
        "appliedFilters": result.applied_filters,
    }
