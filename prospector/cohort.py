"""
Competitor cohort building.

Three sources, all returning CompetitorRecords in provider order:
- build_cohort: text search for "<category> <city> <state>", the local "10-pack"
- build_nearby_cohort: Nearby Search around the business, distance-aware
- build_cohort_from_queries: competitors the user named explicitly

Provider order is kept as-is; the entry threshold in market.py depends on it.
Lookup failures are logged and yield an empty cohort, never an exception.
"""

import math
import logging
from typing import Iterable, List, Optional, Tuple

from .errors import PlaceLookupError
from .lexicon import (
    GENERIC_PLACE_TYPES,
    PRIORITY_PLACE_TYPES,
    SEARCH_CATEGORY_BY_NAME,
    SEARCH_CATEGORY_BY_TYPE,
)
from .models import CandidateRecord, CompetitorRecord
from .resolver import resolve_business

logger = logging.getLogger(__name__)

TEN_PACK_SIZE = 10
NEARBY_LIMIT = 5
MIN_NEARBY_REVIEWS = 2
DEFAULT_CITY = "local area"
COUNTRY_SUFFIXES = {"usa", "us", "united states"}


def _haversine_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points in meters."""
    R_M = 6371000.0
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round(R_M * c)


def _to_competitor(record: CandidateRecord, lead_id: str, distance_m: float = 0) -> CompetitorRecord:
    return CompetitorRecord(
        name=record.name,
        rating=float(record.rating or 0),
        review_count=int(record.review_count or 0),
        place_id=record.place_id,
        distance_m=distance_m,
        lead_id=lead_id,
    )


def _is_excluded(record: CandidateRecord, place_id: Optional[str], name: Optional[str]) -> bool:
    if place_id and record.place_id == place_id:
        return True
    return bool(name) and record.name == name


def infer_business_type(types: Optional[Iterable[str]]) -> str:
    """Most specific Google place type by priority, else first non-generic type."""
    types = list(types or [])
    for business_type in PRIORITY_PLACE_TYPES:
        if business_type in types:
            return business_type
    for t in types:
        if t not in GENERIC_PLACE_TYPES:
            return t
    return "establishment"


def infer_search_category(types: Optional[Iterable[str]], name: str = "") -> str:
    """
    Plural search term for a "10-pack" search ("plumbers", "restaurants").

    Listings typed only as "establishment" fall back to keywords in the name.
    """
    business_type = infer_business_type(types)
    if business_type != "establishment":
        return SEARCH_CATEGORY_BY_TYPE.get(business_type, business_type.replace("_", " "))

    lowered = (name or "").lower()
    for keywords, category in SEARCH_CATEGORY_BY_NAME:
        if any(k in lowered for k in keywords):
            return category
    return SEARCH_CATEGORY_BY_TYPE["establishment"]


def split_city_state(address: str) -> Tuple[str, str]:
    """
    City and state from a formatted address.

    "1 Main St, Waco, TX 76701, USA" -> ("Waco", "TX"). A trailing country
    part is ignored.
    """
    parts = [p.strip() for p in (address or "").split(",") if p.strip()]
    if parts and parts[-1].lower() in COUNTRY_SUFFIXES:
        parts = parts[:-1]
    city = parts[-2] if len(parts) >= 2 else DEFAULT_CITY
    state = parts[-1].split()[0] if parts else ""
    return city, state


def cohort_hint(category: str, address: str) -> str:
    city, state = split_city_state(address)
    return " ".join(p for p in (category, city, state) if p)


def build_cohort(
    lookup,
    hint: str,
    lead_id: str = "",
    exclude_place_id: Optional[str] = None,
    exclude_name: Optional[str] = None,
    limit: int = TEN_PACK_SIZE,
) -> List[CompetitorRecord]:
    """
    Top text-search results for a category hint, as competitors.

    The first `limit` results are considered; only those with both rating and
    review count are kept, and the business itself is dropped.
    """
    try:
        results = lookup.search_by_text(hint)
    except PlaceLookupError as e:
        logger.warning(f"Cohort search failed for '{hint}': {e}")
        return []

    cohort = [
        _to_competitor(r, lead_id)
        for r in results[:limit]
        if r.has_metrics and not _is_excluded(r, exclude_place_id, exclude_name)
    ]
    logger.info(f"Cohort for '{hint}': {len(cohort)} competitors")
    return cohort


def build_nearby_cohort(
    lookup,
    lat: float,
    lng: float,
    category_hint: Optional[str] = None,
    lead_id: str = "",
    radius_m: int = 2000,
    limit: int = NEARBY_LIMIT,
    exclude_place_id: Optional[str] = None,
) -> List[CompetitorRecord]:
    """
    Rated businesses around a point, nearest-first as the provider ranks them.

    When a typed search returns nothing usable, retries once as "establishment".
    """
    place_type = category_hint or "establishment"
    try:
        results = lookup.search_nearby(lat, lng, place_type, radius_m)
    except PlaceLookupError as e:
        logger.warning(f"Nearby search failed at ({lat}, {lng}): {e}")
        return []

    valid = [
        r for r in results
        if (r.rating or 0) > 0
        and (r.review_count or 0) >= MIN_NEARBY_REVIEWS
        and not _is_excluded(r, exclude_place_id, None)
    ]
    if not valid and place_type != "establishment":
        logger.debug(f"No rated '{place_type}' nearby; widening to establishment")
        return build_nearby_cohort(
            lookup, lat, lng, "establishment", lead_id, radius_m, limit, exclude_place_id,
        )

    cohort = []
    for r in valid[:limit]:
        distance = 0
        if r.lat is not None and r.lng is not None:
            distance = _haversine_meters(lat, lng, r.lat, r.lng)
        cohort.append(_to_competitor(r, lead_id, distance))
    return cohort


def build_cohort_from_queries(lookup, queries: Iterable[str], lead_id: str = "") -> List[CompetitorRecord]:
    """Resolve each named competitor; keep the ones found with rating and reviews."""
    cohort = []
    for query in queries:
        if not query or not query.strip():
            continue
        resolution = resolve_business(lookup, query)
        if resolution.found and resolution.record.has_metrics:
            cohort.append(_to_competitor(resolution.record, lead_id))
        else:
            logger.info(f"Skipping competitor '{query}' ({resolution.status})")
    return cohort
