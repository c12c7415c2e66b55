"""Core data models shared by the nearby search pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """Latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class DishRecord:
    id: str
    name: str
    price: float = 0.0
    dietary_tags: List[str] = field(default_factory=list)
    allergens: List[str] = field(default_factory=list)
    is_available: bool = True
    spice_level: Optional[int] = None


@dataclass(frozen=True, slots=True)
class MenuRecord:
    id: str
    name: str
    is_active: bool = True
    dishes: List[DishRecord] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class RestaurantRecord:
    """Snapshot of a restaurant row joined with its menus and dishes."""

    id: str
    name: str
    location: GeoPoint
    address: str = ""
    cuisine_types: List[str] = field(default_factory=list)
    rating: float = 0.0
    delivery_available: bool = False
    takeout_available: bool = False
    dine_in_available: bool = False
    menus: List[MenuRecord] = field(default_factory=list)
    city: Optional[str] = None
    country_code: Optional[str] = None
    restaurant_type: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    service_speed: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SearchFilters:
    """Optional criteria narrowing a nearby search. Empty lists mean "no restriction"."""

    cuisines: List[str] = field(default_factory=list)
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    min_rating: Optional[float] = None
    dietary_tags: List[str] = field(default_factory=list)
    exclude_allergens: List[str] = field(default_factory=list)
    service_types: List[str] = field(default_factory=list)

    @property
    def filters_dishes(self) -> bool:
        return bool(self.dietary_tags or self.exclude_allergens)


@dataclass(frozen=True, slots=True)
class RankedResult:
    """A restaurant with its computed distance and filtered menus."""

    restaurant: RestaurantRecord
    distance: float

    @property
    def dish_count(self) -> int:
        return sum(len(menu.dishes) for menu in self.restaurant.menus)


@dataclass(frozen=True, slots=True)
class SearchRequest:
    center: GeoPoint
    radius_km: float
    limit: int
    filters: SearchFilters = field(default_factory=SearchFilters)
    raw_filters: Dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass(frozen=True, slots=True)
class NearbySearchResult:
    restaurants: List[RankedResult]
    search_radius: float
    center_point: GeoPoint
    applied_filters: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_count(self) -> int:
        return len(self.restaurants)
