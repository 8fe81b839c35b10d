"""
Business-name match validation.

Decides whether a name returned by the Places API is the business the user
asked for. A false positive here generates a report and an outreach email for
the wrong business, so every fallback is stricter than the one before it.

Strategy (first success wins):
    1. clean both names (case, legal suffixes, punctuation)
    2. strip location terms (states, city names)
    3. exact match on location-filtered or cleaned names
    4. keyword match: exact token hits against a required ratio
    5. fuzzy fallback: normalized Levenshtein similarity >= 0.95
"""

import re
import math
import logging
from dataclasses import dataclass
from typing import List, Tuple

from rapidfuzz.distance import Levenshtein

from .lexicon import (
    EQUIVALENT_TYPES,
    ESTABLISHMENT_TYPES,
    LEGAL_SUFFIXES,
    LOCATION_TERMS,
    MAX_LOCATION_PHRASE_WORDS,
)
from .query import business_name_segment

logger = logging.getLogger(__name__)

# =============================================================================
# THRESHOLDS
# =============================================================================

MIN_KEYWORD_LENGTH = 3          # tokens of length <= 2 are ignored
PARTIAL_MIN_LENGTH = 5          # partial (substring) hits need tokens longer than 4
PARTIAL_SIMILARITY = 0.8
RATIO_WITH_LOCATION = 0.6       # query still had location text in it
RATIO_WITHOUT_LOCATION = 0.75
FUZZY_THRESHOLD = 0.95

_SUFFIX_RE = re.compile(r"\b(?:" + "|".join(LEGAL_SUFFIXES) + r")\b\.?")
_PUNCT_RE = re.compile(r"[^\w\s]")
_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class MatchVerdict:
    """Outcome of validating one candidate name against a query."""
    matched: bool
    evidence: str   # exact | keyword | fuzzy | category | type_conflict | none
    ratio: float
    reason: str = ""

    def __bool__(self) -> bool:
        return self.matched


def clean_business_name(name: str) -> str:
    """Lower-case, drop legal/type suffixes and punctuation, collapse whitespace."""
    text = (name or "").lower()
    text = _SUFFIX_RE.sub("", text)
    text = _PUNCT_RE.sub("", text)
    return _WS_RE.sub(" ", text).strip()


def remove_location_terms(name: str) -> str:
    """
    Remove state names/abbreviations and known city names.

    Multi-word terms ("san antonio", "new york") are matched as phrases,
    longest first.
    """
    words = (name or "").lower().split()
    kept: List[str] = []
    i = 0
    while i < len(words):
        for size in range(min(MAX_LOCATION_PHRASE_WORDS, len(words) - i), 0, -1):
            if " ".join(words[i:i + size]) in LOCATION_TERMS:
                i += size
                break
        else:
            kept.append(words[i])
            i += 1
    return " ".join(kept)


def string_similarity(a: str, b: str) -> float:
    """1 - Levenshtein distance / longer length. Two empty strings are identical."""
    if not a and not b:
        return 1.0
    return Levenshtein.normalized_similarity(a, b)


def _keywords(text: str) -> List[str]:
    return [w for w in text.split() if len(w) >= MIN_KEYWORD_LENGTH]


def _count_hits(query_words: List[str], found_words: List[str]) -> Tuple[int, int]:
    """Return (exact_hits, keyword_hits) where keyword hits include partial ones."""
    exact_hits = 0
    keyword_hits = 0
    for q in query_words:
        for f in found_words:
            if q == f:
                exact_hits += 1
                keyword_hits += 1
                break
            if len(q) >= PARTIAL_MIN_LENGTH and len(f) >= PARTIAL_MIN_LENGTH:
                if (q in f or f in q) and string_similarity(q, f) >= PARTIAL_SIMILARITY:
                    keyword_hits += 1
                    break
    return exact_hits, keyword_hits


def _types_compatible(a: str, b: str) -> bool:
    if a == b:
        return True
    return any(a in group and b in group for group in EQUIVALENT_TYPES)


def _type_conflict(query_words: List[str], found_words: List[str]) -> bool:
    """True when both names carry establishment types and none of them agree."""
    query_types = [w for w in query_words if w in ESTABLISHMENT_TYPES]
    found_types = [w for w in found_words if w in ESTABLISHMENT_TYPES]
    if not query_types or not found_types:
        return False
    return not any(_types_compatible(q, f) for q in query_types for f in found_types)


def evaluate_name_match(search_query: str, found_name: str) -> MatchVerdict:
    """
    Validate one candidate name against the user's query.

    Only the business-name segment of the query (before the first comma) is
    compared; "Joe's Pizza, Austin TX" is checked as "Joe's Pizza".
    """
    clean_search = clean_business_name(business_name_segment(search_query))
    clean_found = clean_business_name(found_name)

    search_no_loc = remove_location_terms(clean_search)
    found_no_loc = remove_location_terms(clean_found)

    logger.debug(
        f"Name match: '{clean_search}' vs '{clean_found}' "
        f"(location-filtered '{search_no_loc}' vs '{found_no_loc}')"
    )

    # --- Exact ---
    if search_no_loc and found_no_loc == search_no_loc:
        return MatchVerdict(True, "exact", 1.0, "location-filtered names equal")
    if clean_search and clean_found == clean_search:
        return MatchVerdict(True, "exact", 1.0, "cleaned names equal")

    # --- Keyword ---
    query_words = _keywords(search_no_loc or clean_search)
    found_words = _keywords(found_no_loc or clean_found)
    total = max(len(query_words), 1)
    exact_hits, keyword_hits = _count_hits(query_words, found_words)
    exact_ratio = exact_hits / total

    logger.debug(
        f"Keywords {query_words} vs {found_words}: "
        f"exact {exact_hits}/{total}, keyword {keyword_hits}/{total}"
    )

    if total == 1:
        if exact_hits == 1:
            return MatchVerdict(True, "keyword", exact_ratio, "single keyword matched exactly")
    else:
        if _type_conflict(query_words, found_words):
            return MatchVerdict(
                False, "type_conflict", exact_ratio,
                "different establishment types",
            )
        has_location_terms = len(search_no_loc) < len(clean_search)
        required_ratio = RATIO_WITH_LOCATION if has_location_terms else RATIO_WITHOUT_LOCATION
        required = math.ceil(total * required_ratio)
        if exact_hits >= required:
            return MatchVerdict(
                True, "keyword", exact_ratio,
                f"{exact_hits}/{total} exact keywords (required {required})",
            )

    # --- Fuzzy ---
    similarity = string_similarity(clean_search, clean_found)
    if similarity >= FUZZY_THRESHOLD:
        return MatchVerdict(True, "fuzzy", similarity, f"similarity {similarity:.2f}")

    return MatchVerdict(
        False, "none", exact_ratio,
        f"exact {exact_hits}/{total}, keyword {keyword_hits}/{total}, similarity {similarity:.2f}",
    )


def is_business_name_match(search_query: str, found_name: str) -> bool:
    return evaluate_name_match(search_query, found_name).matched
