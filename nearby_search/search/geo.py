"""Great-circle distance helpers."""

import math

from nearby_search.models import GeoPoint

EARTH_RADIUS_KM = 6371.0


def haversine_km(origin: GeoPoint, target: GeoPoint) -> float:
    """Return the Haversine distance between two points in kilometers.

    Coordinates are not range-checked; out-of-range values simply flow
    through the trigonometry.
    """
    lat1 = math.radians(origin.latitude)
    lat2 = math.radians(target.latitude)
    d_lat = math.radians(target.latitude - origin.latitude)
    d_lng = math.radians(target.longitude - origin.longitude)

    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    # float rounding can push the sum just outside [0, 1] near antipodes
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def format_distance(distance_km: float) -> str:
    """Render a distance for humans: meters below 1 km, one decimal above."""
    if distance_km < 1:
        return f"{round(distance_km * 1000)}m"
    return f"{distance_km:.1f}km"
