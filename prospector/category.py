"""
Category-search fallback matcher.

Category variants ("pest control Waco TX") trade name precision for recall:
the provider returns the best business in the category, not necessarily the
one asked for. A candidate is accepted when both names belong to the same
category family and share at least one distinctive business-name word. The
result is a probable match for the caller to review.
"""

import re
import logging
from typing import List, Optional

from .lexicon import CATEGORY_KEYWORDS, CATEGORY_STOP_WORDS, CATEGORY_TRIGGERS
from .matching import MatchVerdict
from .query import business_name_segment

logger = logging.getLogger(__name__)

SUBSTRING_MIN_LENGTH = 5
_NON_ALPHA_RE = re.compile(r"[^a-z]")


def detect_category(variant: str) -> Optional[str]:
    """Return the category family a search variant targets, if any."""
    text = (variant or "").lower()
    for category, triggers in CATEGORY_TRIGGERS.items():
        if any(t in text for t in triggers):
            return category
    return None


def belongs_to_category(name: str, category: str) -> bool:
    text = (name or "").lower()
    return any(k in text for k in CATEGORY_KEYWORDS.get(category, ()))


def extract_business_words(name: str) -> List[str]:
    """Distinctive name words: len > 2, category stop words and non-letters removed."""
    words = []
    for word in (name or "").lower().split():
        word = _NON_ALPHA_RE.sub("", word)
        if len(word) > 2 and word not in CATEGORY_STOP_WORDS:
            words.append(word)
    return words


def _words_overlap(a: str, b: str) -> bool:
    if a == b:
        return True
    if len(a) >= SUBSTRING_MIN_LENGTH and a in b:
        return True
    return len(b) >= SUBSTRING_MIN_LENGTH and b in a


def evaluate_category_match(search_query: str, found_name: str, category: str) -> MatchVerdict:
    query_name = business_name_segment(search_query)
    if not (belongs_to_category(query_name, category) and belongs_to_category(found_name, category)):
        return MatchVerdict(False, "none", 0.0, f"not both in category '{category}'")

    search_words = extract_business_words(query_name)
    found_words = extract_business_words(found_name)
    if not search_words:
        return MatchVerdict(False, "none", 0.0, "no distinctive words in query")

    matches = sum(
        1 for s in search_words
        if any(_words_overlap(s, f) for f in found_words)
    )
    ratio = matches / len(search_words)
    if matches > 0:
        logger.info(
            f"Probable category match: '{found_name}' could be '{query_name}' ({matches} word matches)"
        )
        return MatchVerdict(True, "category", ratio, f"{matches} shared name words in '{category}'")
    return MatchVerdict(False, "none", ratio, f"no shared name words in '{category}'")


def is_business_type_match(search_query: str, found_name: str, category: str) -> bool:
    return evaluate_category_match(search_query, found_name, category).matched
