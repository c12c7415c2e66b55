"""Post a handful of sample searches to a running nearby-restaurants server."""

import json
import os
import sys

import requests

URL = os.getenv("NEARBY_URL", "http://localhost:8080/nearby-restaurants")
NYC = {"latitude": 40.7128, "longitude": -74.0060}

SCENARIOS = [
    ("Basic search near NYC", {**NYC, "radiusKm": 10, "limit": 5}),
    ("Italian restaurants near NYC", {**NYC, "radiusKm": 10, "limit": 5, "filters": {"cuisines": ["Italian"]}}),
    ("Vegan-friendly restaurants", {**NYC, "radiusKm": 10, "limit": 5, "filters": {"dietaryTags": ["vegan"]}}),
    ("Exclude peanut allergens", {**NYC, "radiusKm": 10, "limit": 5, "filters": {"excludeAllergens": ["peanuts"]}}),
    ("Full response sample", {**NYC, "radiusKm": 5, "limit": 2}),
]

failures = 0
for title, payload in SCENARIOS:
    print(f"--- {title}")
    try:
        r = requests.post(URL, json=payload, timeout=10)
        r.raise_for_status()
        body = r.json()
    except Exception as e:
        print("Request failed:", e)
        failures += 1
        continue

    restaurants = body.get("restaurants", [])
    first = restaurants[0]["name"] if restaurants else "No restaurants found"
    print("totalCount:", body.get("totalCount"), "| nearest:", first)
    if payload.get("limit") == 2:
        print(json.dumps(body, indent=2))

sys.exit(1 if failures else 0)
