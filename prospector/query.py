"""
Query normalization and search-variant generation.

Turns a raw lead input (free text or a Google Maps URL) into a SearchPlan:
an optional place_id pulled from the URL, the text the returned names are
validated against, and the ordered list of search variants to try.

Variants stay conservative. Users usually paste names straight
from Google Maps, so the verbatim input always comes first.
"""

import re
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple
from urllib.parse import unquote, unquote_plus

from .lexicon import CATEGORY_SEARCH_TEMPLATES

logger = logging.getLogger(__name__)

# Ordered: first match wins
PLACE_ID_PATTERNS: Tuple[re.Pattern, ...] = tuple(re.compile(p) for p in (
    r"[?&]place_id=([a-zA-Z0-9_-]+)",
    r"place_id[:|=]([a-zA-Z0-9_-]+)",
    r"data=[^&]*!1s([a-zA-Z0-9_-]+)",
    r"data=[^&]*!4m[^&]*!3m[^&]*!1s([a-zA-Z0-9_-]+)",
    r"[?&]ftid=([a-zA-Z0-9_-]+)",
    r"place/[^/]+/@[^/]+/data=[^&]*!1s([a-zA-Z0-9_-]+)",
    r"!1s([a-zA-Z0-9_-]{27,})",
    r"[?&]cid=([0-9]+)",
    r"16s%2Fg%2F([a-zA-Z0-9_-]+)",
    r"16s/g/([a-zA-Z0-9_-]+)",
))

BUSINESS_NAME_PATTERNS: Tuple[re.Pattern, ...] = tuple(re.compile(p) for p in (
    r"/place/([^/]+)/@",
    r"/place/([^/]+)/",
    r"[?&]q=([^&]+)",
    r"place/([^?&#/]+)",
))

MIN_URL_NAME_LENGTH = 3


@dataclass(frozen=True)
class SearchPlan:
    """What to search for, derived from one raw lead input."""
    raw: str
    business_query: str
    variants: Tuple[str, ...]
    is_url: bool = False
    place_id: Optional[str] = None


def is_url(text: str) -> bool:
    return (text or "").strip().startswith("http")


def business_name_segment(query: str) -> str:
    """Business-name part of a query: everything before the first comma."""
    return (query or "").strip().split(",")[0].strip()


def extract_place_id_from_url(url: str) -> Optional[str]:
    """Pull a place identifier out of a Google Maps URL, trying raw then decoded form."""
    for candidate in (url, unquote(url)):
        for pattern in PLACE_ID_PATTERNS:
            match = pattern.search(candidate)
            if match and match.group(1):
                return match.group(1)
    return None


def extract_business_name_from_url(url: str) -> Optional[str]:
    """Pull a human-readable business name from a Maps URL path or q= parameter."""
    for pattern in BUSINESS_NAME_PATTERNS:
        match = pattern.search(url)
        if not match or not match.group(1):
            continue
        name = unquote_plus(match.group(1))
        name = re.sub(r"@.*$", "", name).strip()
        if len(name) >= MIN_URL_NAME_LENGTH:
            return name
    return None


def generate_search_variations(text: str) -> List[str]:
    """
    Build the ordered, duplicate-free list of search strings for a query.

    Order:
        1. verbatim input
        2. quoted exact phrase
        3. "business, location" when the comma is missing (3+ words)
        4. category + location fallbacks for known trades when a comma is present
    """
    if not text or not text.strip():
        return []

    cleaned = text.strip()
    variations = [text]

    if not cleaned.startswith('"'):
        variations.append(f'"{cleaned}"')

    words = cleaned.split()
    if "," not in cleaned and len(words) >= 3:
        business_part = " ".join(words[:-2])
        location_part = " ".join(words[-2:])
        variations.append(f"{business_part}, {location_part}")

    if "," in cleaned:
        parts = [p.strip() for p in cleaned.split(",")]
        business_name = parts[0].lower()
        location = " ".join(p for p in parts[1:] if p)
        for triggers, templates in CATEGORY_SEARCH_TEMPLATES:
            if any(t in business_name for t in triggers):
                variations.extend(t.format(location=location).strip() for t in templates)

    # dict preserves first-seen order
    return list(dict.fromkeys(variations))


def build_search_plan(query: str) -> SearchPlan:
    """
    Classify the input and derive what the resolver should search for.

    URL inputs: place_id when one is embedded; otherwise variants of the
    business name in the URL path; otherwise the URL itself as search text.
    """
    if not query or not query.strip():
        raise ValueError("Query must not be empty")

    raw = query.strip()
    if not is_url(raw):
        return SearchPlan(
            raw=raw,
            business_query=raw,
            variants=tuple(generate_search_variations(raw)),
        )

    place_id = extract_place_id_from_url(raw)
    name = extract_business_name_from_url(raw)
    search_text = name or raw
    if place_id:
        logger.debug(f"Extracted place_id {place_id} from URL")
    elif name:
        logger.debug(f"Extracted business name '{name}' from URL")
    else:
        logger.debug("No place_id or name in URL; searching the URL text")

    return SearchPlan(
        raw=raw,
        business_query=search_text,
        variants=tuple(generate_search_variations(search_text)),
        is_url=True,
        place_id=place_id,
    )
