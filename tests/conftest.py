import sys
from pathlib import Path

import pytest

# Ensure the `nearby_search` package is importable when running pytest from the repo root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from nearby_search.core import config  # noqa: E402
from nearby_search.models import DishRecord, GeoPoint, MenuRecord, RestaurantRecord  # noqa: E402

NYC = GeoPoint(latitude=40.7128, longitude=-74.0060)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for name in ("NEARBY_DEFAULT_RADIUS_KM", "NEARBY_DEFAULT_LIMIT", "PORT", "DB_POOL_MAX"):
        monkeypatch.delenv(name, raising=False)
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


@pytest.fixture
def make_dish():
    def _make(dish_id="d1", name="Dish", price=10.0, dietary_tags=None, allergens=None, is_available=True):
        return DishRecord(
            id=dish_id,
            name=name,
            price=price,
            dietary_tags=list(dietary_tags or []),
            allergens=list(allergens or []),
            is_available=is_available,
        )

    return _make


@pytest.fixture
def make_restaurant(make_dish):
    def _make(
        restaurant_id="r1",
        location=NYC,
        dishes=None,
        cuisine_types=("Italian",),
        rating=4.0,
        delivery=True,
        takeout=True,
        dine_in=True,
        menus=None,
    ):
        if menus is None:
            menus = [MenuRecord(id=f"{restaurant_id}-m1", name="Main", dishes=list(dishes or [make_dish()]))]
        return RestaurantRecord(
            id=restaurant_id,
            name=f"Restaurant {restaurant_id}",
            location=location,
            address="Main St",
            cuisine_types=list(cuisine_types),
            rating=rating,
            delivery_available=delivery,
            takeout_available=takeout,
            dine_in_available=dine_in,
            menus=menus,
        )

    return _make
