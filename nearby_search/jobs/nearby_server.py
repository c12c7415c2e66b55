"""HTTP entrypoint serving nearby restaurant searches (Cloud Run friendly)."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict

from flask import Flask, jsonify, request

from nearby_search.core.config import get_settings
from nearby_search.core.db import RestaurantQueryError, fetch_restaurants
from nearby_search.etl.transform import to_response_payload
from nearby_search.search.nearby import find_nearby
from nearby_search.search.request import InvalidRequestError, parse_search_request

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

# ---------- App ----------
app = Flask(__name__)


@app.after_request
def add_cors_headers(response):
    response.headers.update(CORS_HEADERS)
    return response


# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; reads settings only, never touches the database."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "default_radius_km": settings.default_radius_km,
                "default_limit": settings.default_limit,
                "database_configured": bool(settings.database_url),
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.route("/nearby-restaurants", methods=["POST", "OPTIONS"])
def nearby_restaurants() -> Any:
    """
    Find restaurants near a point.
    Required JSON fields: latitude, longitude
    Optional: radiusKm (default 5), limit (default 50), filters (object)
    OPTIONS is the CORS pre-flight and only acknowledges.
    """
    if request.method == "OPTIONS":
        return "ok", 200

    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        payload = {}

    try:
        search_request = parse_search_request(payload)
        result = find_nearby(search_request, fetch_restaurants)
        body = to_response_payload(result)
    except InvalidRequestError as exc:
        logger.info("Rejected nearby search: %s", exc)
        return jsonify({"error": str(exc)}), 400
    except RestaurantQueryError as exc:
        logger.error("Nearby search retrieval failed: %s", exc.__cause__ or exc)
        return jsonify({"error": "Failed to fetch restaurants"}), 500
    except Exception as exc:  # noqa: BLE001
        logger.exception(
            "Nearby search failed for lat=%s lng=%s: %s",
            payload.get("latitude"),
            payload.get("longitude"),
            exc,
        )
        return jsonify({"error": "Internal server error", "details": str(exc)}), 500

    return jsonify(body), 200


def main() -> None:
    """Bind on 0.0.0.0 using PORT (Cloud Run injects it), falling back to the configured port."""
    settings = get_settings()
    port = int(os.getenv("PORT") or settings.server_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
