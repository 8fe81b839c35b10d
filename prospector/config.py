"""Settings loaded from the environment (and .env when present)."""

import os
import logging
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = os.path.join("data", "prospector.db")


@dataclass(frozen=True)
class Settings:
    google_places_api_key: str
    db_path: str = DEFAULT_DB_PATH
    request_timeout: int = 15
    max_batch_size: int = 10
    cohort_size: int = 10
    nearby_radius_m: int = 2000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process. Call get_settings.cache_clear() to reload."""
    load_dotenv()

    api_key = (os.getenv("GOOGLE_PLACES_API_KEY") or os.getenv("GOOGLE_API_KEY") or "").strip()
    if not api_key:
        logger.warning("GOOGLE_PLACES_API_KEY is not configured; Places requests will fail.")

    return Settings(
        google_places_api_key=api_key,
        db_path=os.getenv("PROSPECTOR_DB_PATH") or DEFAULT_DB_PATH,
        request_timeout=int(os.getenv("PLACES_TIMEOUT_SECONDS", "15")),
        max_batch_size=int(os.getenv("PROSPECTOR_MAX_BATCH", "10")),
        cohort_size=int(os.getenv("PROSPECTOR_COHORT_SIZE", "10")),
        nearby_radius_m=int(os.getenv("PROSPECTOR_NEARBY_RADIUS_M", "2000")),
    )
