"""Database helpers for the nearby search service."""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

import psycopg2
from psycopg2 import extras, pool

from nearby_search.core.config import get_settings
from nearby_search.etl.transform import to_restaurant_records
from nearby_search.models import RestaurantRecord

logger = logging.getLogger(__name__)

_connection_pool: Optional[pool.ThreadedConnectionPool] = None
_pool_lock = threading.Lock()


class RestaurantQueryError(RuntimeError):
    """Raised when restaurants cannot be read from the database."""


def init_pool(minconn: int = 1, maxconn: Optional[int] = None) -> pool.ThreadedConnectionPool:
    """Initialise and return the connection pool shared by request threads."""
    global _connection_pool
    with _pool_lock:
        if _connection_pool is None:
            settings = get_settings()
            if not settings.database_url:
                raise RuntimeError("DATABASE_URL is required for database connections")
            _connection_pool = pool.ThreadedConnectionPool(
                minconn,
                maxconn or settings.db_pool_max,
                dsn=settings.database_url,
                connect_timeout=10,
            )
            logger.info("Database connection pool initialised")
    return _connection_pool


@contextmanager
def get_connection():
    """Context manager yielding a pooled connection."""
    pg_pool = init_pool()
    conn = pg_pool.getconn()
    try:
        yield conn
    finally:
        pg_pool.putconn(conn)


_SELECT_RESTAURANTS_WITH_MENUS = """
SELECT
    r.*,
    COALESCE(
        (
            SELECT json_agg(
                json_build_object(
                    'id', m.id,
                    'name', m.name,
                    'is_active', m.is_active,
                    'dishes', COALESCE(
                        (
                            SELECT json_agg(
                                json_build_object(
                                    'id', d.id,
                                    'name', d.name,
                                    'price', d.price,
                                    'dietary_tags', d.dietary_tags,
                                    'allergens', d.allergens,
                                    'spice_level', d.spice_level,
                                    'is_available', d.is_available
                                )
                                ORDER BY mc.display_order, d.display_order, d.created_at
                            )
                            FROM menu_categories mc
                            JOIN dishes d ON d.menu_category_id = mc.id
                            WHERE mc.menu_id = m.id
                        ),
                        '[]'::json
                    )
                )
                ORDER BY m.display_order, m.created_at
            )
            FROM menus m
            WHERE m.restaurant_id = r.id
        ),
        '[]'::json
    ) AS menus
FROM restaurants r
WHERE (%(cuisines)s::text[] IS NULL OR r.cuisine_types && %(cuisines)s::text[])
  AND (%(min_rating)s::numeric IS NULL OR r.rating >= %(min_rating)s::numeric)
ORDER BY r.created_at DESC;
"""


def _prepare_params(cuisines: Optional[Sequence[str]], min_rating: Optional[float]) -> Dict[str, Any]:
    return {
        "cuisines": list(cuisines) if cuisines else None,
        # a zero minimum is not a filter
        "min_rating": min_rating if min_rating else None,
    }


def fetch_restaurants(
    cuisines: Optional[Sequence[str]] = None,
    min_rating: Optional[float] = None,
) -> List[RestaurantRecord]:
    """Load restaurants with nested menus and dishes, newest first.

    ``cuisines`` and ``min_rating`` are applied in SQL as a pre-filter.
    """
    params = _prepare_params(cuisines, min_rating)

    try:
        with get_connection() as conn:
            with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
                cur.execute(_SELECT_RESTAURANTS_WITH_MENUS, params)
                rows = cur.fetchall()
    except (psycopg2.Error, RuntimeError) as exc:
        logger.error("Restaurant query failed (cuisines=%s min_rating=%s): %s", params["cuisines"], params["min_rating"], exc)
        raise RestaurantQueryError("Failed to fetch restaurants") from exc

    logger.debug("Fetched %d restaurant rows", len(rows))
    return to_restaurant_records(rows)
