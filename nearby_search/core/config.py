"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    database_url: str
    server_port: int = 8080
    default_radius_km: float = 5.0
    default_limit: int = 50
    db_pool_max: int = 5


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    database_url = os.getenv("DATABASE_URL", "")
    server_port = int(os.getenv("PORT", "8080"))
    default_radius_km = float(os.getenv("NEARBY_DEFAULT_RADIUS_KM", "5"))
    default_limit = int(os.getenv("NEARBY_DEFAULT_LIMIT", "50"))
    db_pool_max = int(os.getenv("DB_POOL_MAX", "5"))

    if not database_url:
        logger.warning("DATABASE_URL is not set; restaurant lookups will fail.")
    if default_limit <= 0:
        logger.warning("NEARBY_DEFAULT_LIMIT=%s is not positive; falling back to 50.", default_limit)
        default_limit = 50

    return Settings(
        database_url=database_url,
        server_port=server_port,
        default_radius_km=default_radius_km,
        default_limit=default_limit,
        db_pool_max=db_pool_max,
    )
