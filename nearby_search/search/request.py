"""Validation of inbound nearby search payloads."""

import logging
import math
import sys
from typing import Any, Dict, Mapping, Optional

from nearby_search.core.config import get_settings
from nearby_search.models import GeoPoint, SearchFilters, SearchRequest

logger = logging.getLogger(__name__)

COORDINATES_REQUIRED = "Invalid request: latitude and longitude are required"

_LIST_FILTERS = {
    "cuisines": "cuisines",
    "dietaryTags": "dietary_tags",
    "excludeAllergens": "exclude_allergens",
    "serviceTypes": "service_types",
}
_NUMBER_FILTERS = {
    "priceMin": "price_min",
    "priceMax": "price_max",
    "minRating": "min_rating",
}


class InvalidRequestError(ValueError):
    """Raised when a search payload cannot be processed."""


def _is_number(value: Any) -> bool:
    # JSON booleans decode to bool, which is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # ints are exact; only floats carry nan and inf
    return isinstance(value, int) or math.isfinite(value)


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except OverflowError:
        # integers beyond float range saturate at the largest float
        return sys.float_info.max if value > 0 else -sys.float_info.max


def _parse_filters(raw: Mapping[str, Any]) -> SearchFilters:
    values: Dict[str, Any] = {}

    for key, attr in _LIST_FILTERS.items():
        items = raw.get(key)
        if items is None:
            continue
        if not isinstance(items, list) or not all(isinstance(item, str) for item in items):
            raise InvalidRequestError(f"filters.{key} must be a list of strings")
        values[attr] = list(items)

    for key, attr in _NUMBER_FILTERS.items():
        number = raw.get(key)
        if number is None:
            continue
        if not _is_number(number):
            raise InvalidRequestError(f"filters.{key} must be numeric")
        values[attr] = _as_float(number)

    return SearchFilters(**values)


def parse_search_request(payload: Optional[Mapping[str, Any]]) -> SearchRequest:
    """Turn a decoded JSON body into a SearchRequest, applying configured defaults."""
    payload = payload or {}
    settings = get_settings()

    latitude = payload.get("latitude")
    longitude = payload.get("longitude")
    if not _is_number(latitude) or not _is_number(longitude):
        raise InvalidRequestError(COORDINATES_REQUIRED)
    try:
        center = GeoPoint(latitude=float(latitude), longitude=float(longitude))
    except OverflowError:
        raise InvalidRequestError(COORDINATES_REQUIRED) from None

    radius_raw = payload.get("radiusKm")
    if radius_raw is None:
        radius_km = settings.default_radius_km
    elif _is_number(radius_raw) and radius_raw >= 0:
        radius_km = _as_float(radius_raw)
    else:
        raise InvalidRequestError("radiusKm must be a non-negative number")

    limit_raw = payload.get("limit")
    if limit_raw is None:
        limit = settings.default_limit
    elif _is_number(limit_raw) and limit_raw >= 1:
        limit = min(int(limit_raw), sys.maxsize)
    else:
        raise InvalidRequestError("limit must be a positive number")

    raw_filters = payload.get("filters")
    if raw_filters is None:
        raw_filters = {}
    elif not isinstance(raw_filters, dict):
        raise InvalidRequestError("filters must be an object")

    filters = _parse_filters(raw_filters)
    logger.debug("Parsed search request lat=%s lng=%s radius=%s limit=%s", latitude, longitude, radius_km, limit)

    return SearchRequest(
        center=center,
        radius_km=radius_km,
        limit=limit,
        filters=filters,
        raw_filters=raw_filters,
    )


def build_payload(
    latitude: float,
    longitude: float,
    radius_km: Optional[float] = None,
    limit: Optional[int] = None,
    filters: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Assemble a request body in the wire format accepted by parse_search_request."""
    payload: Dict[str, Any] = {"latitude": latitude, "longitude": longitude}
    if radius_km is not None:
        payload["radiusKm"] = radius_km
    if limit is not None:
        payload["limit"] = limit
    cleaned: Dict[str, Any] = {k: v for k, v in (filters or {}).items() if v not in (None, [])}
    if cleaned:
        payload["filters"] = cleaned
    return payload
