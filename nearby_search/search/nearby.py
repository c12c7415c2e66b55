"""Nearby restaurant search: distance, layered filtering and ranking."""

import logging
from dataclasses import replace
from typing import Callable, List, Sequence

from nearby_search.models import (
    NearbySearchResult,
    RankedResult,
    RestaurantRecord,
    SearchFilters,
    SearchRequest,
)
from nearby_search.search.filters import (
    filter_dishes,
    matches_cuisines,
    matches_service_types,
    meets_min_rating,
)
from nearby_search.search.geo import haversine_km

logger = logging.getLogger(__name__)

RestaurantFetcher = Callable[..., Sequence[RestaurantRecord]]


def rank_restaurant(restaurant: RestaurantRecord, request: SearchRequest) -> RankedResult:
    """Attach the caller distance and narrow every menu to its qualifying dishes.

    Menus are kept even when their dish list ends up empty.
    """
    filters = request.filters
    distance = haversine_km(request.center, restaurant.location)
    menus = [
        replace(menu, dishes=filter_dishes(menu.dishes, filters.dietary_tags, filters.exclude_allergens))
        for menu in restaurant.menus
    ]
    return RankedResult(restaurant=replace(restaurant, menus=menus), distance=distance)


def keep_candidate(candidate: RankedResult, radius_km: float, filters: SearchFilters) -> bool:
    restaurant = candidate.restaurant
    if candidate.distance > radius_km:
        return False
    if not matches_service_types(restaurant, filters.service_types):
        return False
    if not matches_cuisines(restaurant, filters.cuisines):
        return False
    if not meets_min_rating(restaurant, filters.min_rating):
        return False
    if filters.filters_dishes and candidate.dish_count == 0:
        return False
    return True


def find_nearby(request: SearchRequest, fetch: RestaurantFetcher) -> NearbySearchResult:
    """Run one nearby search against ``fetch`` and return the ranked, truncated result.

    ``fetch`` receives the cuisine and rating criteria so the store can
    pre-filter; the same criteria are re-checked here so a store that ignores
    them still yields a correct result.
    """
    filters = request.filters
    restaurants = fetch(
        cuisines=filters.cuisines or None,
        min_rating=filters.min_rating,
    )
    logger.info(
        "Fetched %d restaurants for center=(%s, %s) radius=%skm",
        len(restaurants),
        request.center.latitude,
        request.center.longitude,
        request.radius_km,
    )

    candidates = [rank_restaurant(restaurant, request) for restaurant in restaurants]
    survivors: List[RankedResult] = [
        candidate for candidate in candidates if keep_candidate(candidate, request.radius_km, filters)
    ]
    # sorted() is stable, so ties keep retrieval order
    ranked = sorted(survivors, key=lambda candidate: candidate.distance)[: request.limit]

    logger.info("Nearby search kept %d of %d candidates (limit=%d)", len(ranked), len(survivors), request.limit)
    return NearbySearchResult(
        restaurants=ranked,
        search_radius=request.radius_km,
        center_point=request.center,
        applied_filters=dict(request.raw_filters),
    )
