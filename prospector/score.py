"""
Lead scoring for review-acquisition prospects.

Core rule: a business with a good rating and few reviews is the best
prospect. It already satisfies customers and only needs review volume.

Tiers (first matching rule wins):
    C / High   rating < 4.0          service quality problem, not ready
    C / Low    reviews >= 100        established, little to gain
    A / High   rating >= 4.0, < 50   ideal target
    B / Medium everything else       4.0+ rating, 50-99 reviews

Scoring is total and deterministic: missing rating or review count counts
as 0, and the cohort only feeds the gap text and market narrative.
"""

import math
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence, Tuple

from .market import calculate_market_stats, compare_to_market, summarize_market_position
from .models import CompetitorRecord, Lead, MarketComparison, MarketStatistics

logger = logging.getLogger(__name__)


# =============================================================================
# THRESHOLDS
# =============================================================================

MIN_GOOD_RATING = 4.0
ESTABLISHED_REVIEWS = 100
LOW_REVIEWS = 50
LARGE_REVIEW_GAP = -50


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class ScoringResult:
    """Tier and supporting narrative for one business."""
    tier: str                     # "A", "B", "C"
    urgency: str                  # "High", "Medium", "Low"
    gap_analysis: str
    recommendations: List[str]
    competitive_position: str
    market_opportunity: str
    market: MarketStatistics = field(default_factory=MarketStatistics)
    comparison: Optional[MarketComparison] = None
    benchmarks: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "tier": self.tier,
            "urgency": self.urgency,
            "gap_analysis": self.gap_analysis,
            "recommendations": list(self.recommendations),
            "competitive_position": self.competitive_position,
            "market_opportunity": self.market_opportunity,
            "market": self.market.to_dict(),
            "comparison": self.comparison.to_dict() if self.comparison else None,
            "benchmarks": list(self.benchmarks),
        }


@dataclass(frozen=True)
class ScoredLead:
    lead: Lead
    result: ScoringResult
    competitors: Tuple[CompetitorRecord, ...] = ()

    def to_dict(self) -> Dict:
        data = self.lead.to_dict()
        data["scoring"] = self.result.to_dict()
        return data


# =============================================================================
# FORMATTING
# =============================================================================

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _fmt(value: float) -> str:
    """4.0 -> "4", 4.6 -> "4.6"."""
    return f"{value:g}"


def _gap_analysis(rating: float, reviews: int, cohort: Sequence[CompetitorRecord]) -> str:
    text = f"Lead Quality Assessment: {_fmt(rating)}/5.0 rating, {reviews} reviews. "
    if not cohort:
        return text + "No competitor data for comparison."
    average = sum(c.review_count or 0 for c in cohort) / len(cohort)
    gap = reviews - average
    sign = "+" if gap > 0 else ""
    return text + f"Competitor average: {_round_half_up(average)} reviews ({sign}{_round_half_up(gap)} gap)."


def _market_opportunity(rating: float, reviews: int, stats: MarketStatistics) -> str:
    if not stats.total_competitors:
        return (
            f"Market analysis shows this business has a {_fmt(rating)}/5.0 rating with {reviews} reviews. "
            "To establish strong market presence and attract more customers, implementing a systematic "
            "review acquisition strategy would significantly improve visibility and credibility in "
            "search results."
        )

    average_rating = round(stats.average_rating, 1)
    average_reviews = _round_half_up(stats.average_reviews)
    gap = reviews - average_reviews
    position = "above" if rating >= average_rating else "below"

    text = (
        f"Local market analysis reveals {stats.total_competitors} active competitors with an average "
        f"rating of {_fmt(average_rating)}/5.0 and {average_reviews} reviews. "
    )
    if gap < LARGE_REVIEW_GAP:
        text += (
            f"Your business currently has {abs(gap)} fewer reviews than the market average, representing "
            "a significant opportunity to gain competitive advantage. By increasing review velocity to reach "
            "market parity, you can expect improved search rankings and increased customer trust. The review "
            "gap indicates strong potential for rapid market share growth through strategic reputation management."
        )
    elif gap < 0:
        text += (
            f"With {abs(gap)} fewer reviews than competitors, there's clear opportunity to strengthen market "
            "position. Closing this review gap would improve local search visibility and customer confidence, "
            "directly impacting lead generation."
        )
    else:
        strength = "strong" if gap > 0 else "stable"
        text += (
            f"Your review count {position} market average indicates {strength} market positioning. Focus on "
            "maintaining review momentum while competitors work to catch up to your established market presence."
        )
    return text


# =============================================================================
# SCORING
# =============================================================================

def score_lead(
    rating: Optional[float],
    review_count: Optional[int],
    cohort: Optional[Sequence[CompetitorRecord]] = None,
) -> ScoringResult:
    """Classify one business by rating and review count against its cohort."""
    rating = float(rating or 0)
    reviews = int(review_count or 0)
    cohort = list(cohort or [])

    if rating < MIN_GOOD_RATING:
        tier, urgency = "C", "High"
        position = f"Service quality issues with {_fmt(rating)}/5.0 rating"
        recommendations = [
            "Focus on improving service quality before review acquisition",
            "Address customer satisfaction issues",
            "Not ready for aggressive review campaigns",
        ]
    elif reviews >= ESTABLISHED_REVIEWS:
        tier, urgency = "C", "Low"
        position = f"Well-established with {reviews} reviews - limited growth opportunity"
        recommendations = [
            "Focus on review quality maintenance",
            "Consider other marketing services",
            "Limited need for review acquisition",
        ]
    elif reviews < LOW_REVIEWS:
        tier, urgency = "A", "High"
        position = f"Perfect target: {_fmt(rating)}/5.0 rating with only {reviews} reviews"
        recommendations = [
            "Implement aggressive review acquisition campaign",
            "Target 50-100 reviews within 6 months",
            "Leverage existing customer satisfaction for rapid growth",
        ]
    else:
        tier, urgency = "B", "Medium"
        position = f"Solid target: {_fmt(rating)}/5.0 rating with {reviews} reviews"
        recommendations = [
            "Boost review count to reach 100+ threshold",
            "Maintain rating quality during growth",
            "Focus on review velocity improvement",
        ]

    stats = calculate_market_stats(cohort)
    return ScoringResult(
        tier=tier,
        urgency=urgency,
        gap_analysis=_gap_analysis(rating, reviews, cohort),
        recommendations=recommendations,
        competitive_position=position,
        market_opportunity=_market_opportunity(rating, reviews, stats),
        market=stats,
        comparison=compare_to_market(rating, reviews, stats) if cohort else None,
    )


def score(lead: Lead, cohort: Optional[Sequence[CompetitorRecord]] = None) -> ScoredLead:
    """
    Score a resolved Lead. Returns a new Lead; the input is not modified.

    The result also carries the lead's benchmark lines against its cohort.
    """
    result = score_lead(lead.rating, lead.review_count, cohort)
    result = replace(
        result,
        benchmarks=summarize_market_position(lead.name, lead.rating, lead.review_count, result.market),
    )
    logger.debug(f"Scored '{lead.name}': tier {result.tier} ({result.urgency} urgency)")
    return ScoredLead(
        lead=lead.with_score(result.tier, result.gap_analysis),
        result=result,
        competitors=tuple(cohort or ()),
    )


def get_scoring_summary(scored_leads: Sequence[ScoredLead]) -> Dict:
    """Tier/urgency distribution and averages for a batch."""
    if not scored_leads:
        return {"total_leads": 0}

    total = len(scored_leads)
    tiers = [s.result.tier for s in scored_leads]
    urgencies = [s.result.urgency for s in scored_leads]
    ratings = [s.lead.rating or 0 for s in scored_leads]
    reviews = [s.lead.review_count or 0 for s in scored_leads]

    return {
        "total_leads": total,
        "tier": {
            t: {"count": tiers.count(t), "pct": round(tiers.count(t) / total * 100, 1)}
            for t in ("A", "B", "C")
        },
        "urgency": {u.lower(): urgencies.count(u) for u in ("High", "Medium", "Low")},
        "rating": {"avg": round(sum(ratings) / total, 2), "min": min(ratings), "max": max(ratings)},
        "reviews": {"avg": round(sum(reviews) / total, 1), "min": min(reviews), "max": max(reviews)},
        "incomplete": sum(1 for s in scored_leads if s.lead.incomplete_data),
    }
