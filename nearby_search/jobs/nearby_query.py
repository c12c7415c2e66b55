"""CLI job to run a single nearby restaurant search against the database."""

import argparse
import json
import logging
from typing import Any, Dict, List, Optional

from nearby_search.core.config import get_settings
from nearby_search.core.db import fetch_restaurants, init_pool
from nearby_search.etl.transform import to_response_payload
from nearby_search.models import NearbySearchResult
from nearby_search.search.geo import format_distance
from nearby_search.search.nearby import find_nearby
from nearby_search.search.request import build_payload, parse_search_request

logger = logging.getLogger(__name__)


def run_nearby_job(
    *,
    latitude: float,
    longitude: float,
    radius_km: Optional[float],
    limit: Optional[int],
    filters: Optional[Dict[str, Any]] = None,
) -> NearbySearchResult:
    init_pool()

    payload = build_payload(latitude, longitude, radius_km=radius_km, limit=limit, filters=filters)
    search_request = parse_search_request(payload)
    logger.info("Running nearby search payload=%s", payload)

    result = find_nearby(search_request, fetch_restaurants)
    logger.info("Completed search: restaurants=%d", result.total_count)
    return result


def summarize(result: NearbySearchResult) -> List[str]:
    """One line per restaurant, nearest first."""
    lines = [f"{result.total_count} restaurants within {format_distance(result.search_radius)}"]
    for item in result.restaurants:
        restaurant = item.restaurant
        lines.append(
            f"{format_distance(item.distance):>8}  {restaurant.name}"
            f"  ({', '.join(restaurant.cuisine_types) or 'n/a'}; {item.dish_count} dishes)"
        )
    return lines


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Run a nearby restaurant search")
    parser.add_argument("--lat", dest="latitude", type=float, required=True, help="Caller latitude")
    parser.add_argument("--lng", dest="longitude", type=float, required=True, help="Caller longitude")
    parser.add_argument(
        "--radius",
        dest="radius_km",
        type=float,
        default=settings.default_radius_km,
        help="Search radius in kilometers",
    )
    parser.add_argument(
        "--limit",
        dest="limit",
        type=int,
        default=settings.default_limit,
        help="Maximum number of restaurants to return",
    )
    parser.add_argument("--cuisine", dest="cuisines", action="append", default=[], help="Cuisine to allow (repeatable)")
    parser.add_argument("--min-rating", dest="min_rating", type=float, help="Minimum restaurant rating")
    parser.add_argument(
        "--dietary-tag", dest="dietary_tags", action="append", default=[], help="Tag every dish must carry (repeatable)"
    )
    parser.add_argument(
        "--exclude-allergen",
        dest="exclude_allergens",
        action="append",
        default=[],
        help="Allergen no dish may contain (repeatable)",
    )
    parser.add_argument(
        "--service-type",
        dest="service_types",
        action="append",
        default=[],
        choices=["delivery", "takeout", "dine_in"],
        help="Accepted service type (repeatable)",
    )
    parser.add_argument("--summary", action="store_true", help="Print a short listing instead of JSON")
    return parser


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args()

    result = run_nearby_job(
        latitude=args.latitude,
        longitude=args.longitude,
        radius_km=args.radius_km,
        limit=args.limit,
        filters={
            "cuisines": args.cuisines,
            "minRating": args.min_rating,
            "dietaryTags": args.dietary_tags,
            "excludeAllergens": args.exclude_allergens,
            "serviceTypes": args.service_types,
        },
    )

    if args.summary:
        print("\n".join(summarize(result)))
    else:
        print(json.dumps(to_response_payload(result), indent=2))


if __name__ == "__main__":
    main()
