"""
Prospector - Business Identity Resolution & Competitive Scoring

Resolves a free-text business query or Google Maps URL to one validated
Google Places listing, gathers its local competitors, and classifies it as
an A/B/C prospect for review-acquisition outreach.

Architecture:
    lexicon: Static dictionaries (states, cities, suffixes, category families)
    query: Query normalization and search-variant generation
    matching: Layered business-name match validation (exact, keyword, fuzzy)
    category: Category-search fallback matcher
    fetch: Google Places API client (Find Place, Text Search, Details, Nearby)
    resolver: Query -> validated Lead, with near misses and provider errors
    cohort: Competitor cohorts (text "10-pack", nearby, manually named)
    market: Market statistics and entry threshold over a cohort
    score: Deterministic A/B/C tiering, gap analysis, recommendations
    db: SQLite persistence (runs, leads, competitors)
"""

from .errors import ProspectorError, PlaceLookupError, BusinessNotFoundError
from .models import (
    CandidateRecord,
    CompetitorRecord,
    EntryThreshold,
    Lead,
    MarketComparison,
    MarketStatistics,
)
from .query import SearchPlan, build_search_plan, generate_search_variations
from .matching import MatchVerdict, evaluate_name_match, is_business_name_match, string_similarity
from .category import evaluate_category_match, is_business_type_match
from .fetch import PlacesClient
from .resolver import BusinessResolver, Resolution, resolve_business
from .cohort import (
    build_cohort,
    build_cohort_from_queries,
    build_nearby_cohort,
    cohort_hint,
    infer_search_category,
)
from .market import calculate_market_stats, compare_to_market, median, summarize_market_position
from .score import ScoredLead, ScoringResult, get_scoring_summary, score, score_lead

__all__ = [
    # errors
    "ProspectorError",
    "PlaceLookupError",
    "BusinessNotFoundError",
    # models
    "CandidateRecord",
    "CompetitorRecord",
    "EntryThreshold",
    "Lead",
    "MarketComparison",
    "MarketStatistics",
    # query
    "SearchPlan",
    "build_search_plan",
    "generate_search_variations",
    # matching
    "MatchVerdict",
    "evaluate_name_match",
    "is_business_name_match",
    "string_similarity",
    # category
    "evaluate_category_match",
    "is_business_type_match",
    # fetch
    "PlacesClient",
    # resolver
    "BusinessResolver",
    "Resolution",
    "resolve_business",
    # cohort
    "build_cohort",
    "build_cohort_from_queries",
    "build_nearby_cohort",
    "cohort_hint",
    "infer_search_category",
    # market
    "calculate_market_stats",
    "compare_to_market",
    "median",
    "summarize_market_position",
    # score
    "ScoredLead",
    "ScoringResult",
    "get_scoring_summary",
    "score",
    "score_lead",
]
