from decimal import Decimal

import pytest

from nearby_search.etl import transform
from nearby_search.models import GeoPoint, NearbySearchResult, RankedResult


def _row(**overrides):
    row = {
        "id": "r1",
        "name": "Green Bowl",
        "location": {"lat": 40.7128, "lng": -74.006},
        "address": "1 Broadway",
        "city": "New York",
        "country_code": "US",
        "cuisine_types": ["Vegan", "Asian"],
        "restaurant_type": "restaurant",
        "rating": Decimal("4.30"),
        "phone": "123",
        "website": "https://example.com",
        "delivery_available": True,
        "takeout_available": False,
        "dine_in_available": None,
        "service_speed": "regular",
        "menus": [
            {
                "id": "m1",
                "name": "Lunch",
                "is_active": False,
                "dishes": [
                    {
                        "id": "d1",
                        "name": "Tofu Bowl",
                        "price": 11.5,
                        "dietary_tags": ["vegan"],
                        "allergens": None,
                        "spice_level": 2,
                        "is_available": True,
                    }
                ],
            }
        ],
    }
    row.update(overrides)
    return row


def test_parse_location_accepts_dict_and_json_string():
    assert transform.parse_location({"lat": 1, "lng": 2}) == GeoPoint(1.0, 2.0)
    assert transform.parse_location('{"lat": -7.79, "lng": 110.36}') == GeoPoint(-7.79, 110.36)

    with pytest.raises(ValueError):
        transform.parse_location(None)


def test_to_restaurant_record_normalises_columns():
    record = transform.to_restaurant_record(_row())

    assert record.location == GeoPoint(40.7128, -74.006)
    assert record.rating == 4.3
    assert record.cuisine_types == ["Vegan", "Asian"]
    assert record.dine_in_available is False
    assert record.city == "New York"

    menu = record.menus[0]
    assert menu.is_active is False
    dish = menu.dishes[0]
    assert dish.price == 11.5
    assert dish.allergens == []
    assert dish.spice_level == 2


def test_to_restaurant_record_defaults_missing_values():
    record = transform.to_restaurant_record(_row(rating=None, cuisine_types=None, menus=None))

    assert record.rating == 0.0
    assert record.cuisine_types == []
    assert record.menus == []


def test_to_restaurant_records_raises_on_missing_location(caplog):
    with caplog.at_level("ERROR"):
        with pytest.raises(ValueError):
            transform.to_restaurant_records([_row(), _row(id="broken", location=None)])

    assert "broken" in " ".join(caplog.messages)


@pytest.mark.parametrize(
    "overrides",
    [
        {"location": ["secret-lat", "secret-lng"]},
        {"location": {"lat": "secret-lat", "lng": 1}},
        {"location": {"lng": 1}},
    ],
)
def test_unusable_row_error_carries_no_row_values(caplog, overrides):
    with caplog.at_level("ERROR"):
        with pytest.raises(ValueError) as exc_info:
            transform.to_restaurant_records([_row(id="broken", **overrides)])

    assert str(exc_info.value) == "unusable restaurant row"
    assert "secret" not in str(exc_info.value)
    assert "broken" in " ".join(caplog.messages)


def test_to_response_payload_matches_wire_format():
    record = transform.to_restaurant_record(_row())
    result = NearbySearchResult(
        restaurants=[RankedResult(restaurant=record, distance=0.25)],
        search_radius=5,
        center_point=GeoPoint(40.7128, -74.006),
        applied_filters={"dietaryTags": ["vegan"]},
    )

    payload = transform.to_response_payload(result)

    assert payload["totalCount"] == 1
    assert payload["searchRadius"] == 5
    assert payload["centerPoint"] == {"latitude": 40.7128, "longitude": -74.006}
    assert payload["appliedFilters"] == {"dietaryTags": ["vegan"]}

    restaurant = payload["restaurants"][0]
    assert restaurant["distance"] == 0.25
    assert restaurant["location"] == {"lat": 40.7128, "lng": -74.006}
    assert restaurant["takeout_available"] is False
    assert restaurant["menus"][0]["dishes"][0]["dietary_tags"] == ["vegan"]
