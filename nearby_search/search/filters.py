"""Predicates used to narrow nearby search candidates."""

from typing import Iterable, List, Optional, Sequence

from nearby_search.models import DishRecord, RestaurantRecord

SERVICE_TYPE_FLAGS = {
    "delivery": "delivery_available",
    "takeout": "takeout_available",
    "dine_in": "dine_in_available",
}


def filter_dishes(
    dishes: Optional[Iterable[DishRecord]],
    dietary_tags: Optional[Sequence[str]] = None,
    exclude_allergens: Optional[Sequence[str]] = None,
) -> List[DishRecord]:
    """Keep available dishes carrying every dietary tag and none of the excluded allergens."""
    if not dishes:
        return []

    kept: List[DishRecord] = []
    for dish in dishes:
        if not dish.is_available:
            continue
        if dietary_tags and not set(dietary_tags).issubset(dish.dietary_tags or ()):
            continue
        if exclude_allergens and not set(exclude_allergens).isdisjoint(dish.allergens or ()):
            continue
        kept.append(dish)
    return kept


def matches_service_types(restaurant: RestaurantRecord, service_types: Optional[Sequence[str]] = None) -> bool:
    """True if nothing was requested or the restaurant offers at least one requested service."""
    if not service_types:
        return True

    for service_type in service_types:
        flag = SERVICE_TYPE_FLAGS.get(service_type)
        if flag and getattr(restaurant, flag):
            return True
    return False


def matches_cuisines(restaurant: RestaurantRecord, cuisines: Optional[Sequence[str]] = None) -> bool:
    if not cuisines:
        return True
    return not set(cuisines).isdisjoint(restaurant.cuisine_types or ())


def meets_min_rating(restaurant: RestaurantRecord, min_rating: Optional[float] = None) -> bool:
    # a zero minimum is treated as "no minimum", matching the store pre-filter
    if not min_rating:
        return True
    return (restaurant.rating or 0.0) >= min_rating
