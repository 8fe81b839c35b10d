"""
Market statistics over a competitor cohort.

Pure functions; nothing here calls the provider or raises on empty input.
"""

import math
import logging
from typing import List, Optional, Sequence

from .models import CompetitorRecord, EntryThreshold, MarketComparison, MarketStatistics

logger = logging.getLogger(__name__)

MIN_ENTRY_RATING = 4.0
ENTRY_FALLBACK_RATIO = 0.7
HIGH_PERFORMER_RATING = 4.5
HIGH_PERFORMER_REVIEWS = 100


def median(values: Sequence[float]) -> float:
    """Median; mean of the two middle values for even-sized input; 0 for empty."""
    if not values:
        return 0.0
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return float(ordered[mid])


def _top_performer(cohort: Sequence[CompetitorRecord]) -> CompetitorRecord:
    # Highest rating, then most reviews; first occurrence wins a full tie
    top = cohort[0]
    for current in cohort[1:]:
        if current.rating > top.rating:
            top = current
        elif current.rating == top.rating and current.review_count > top.review_count:
            top = current
    return top


def calculate_market_stats(cohort: Optional[Sequence[CompetitorRecord]]) -> MarketStatistics:
    """
    Statistics for a cohort in provider order.

    entry_threshold.reviews_needed is one more than the last-ranked member's
    review count, so the cohort must not be re-sorted before calling this.
    """
    if not cohort:
        return MarketStatistics()

    ratings = [c.rating or 0.0 for c in cohort]
    reviews = [c.review_count or 0 for c in cohort]
    average_rating = sum(ratings) / len(ratings)
    average_reviews = sum(reviews) / len(reviews)

    last = cohort[-1]
    if last.review_count is not None:
        reviews_needed = last.review_count + 1
    else:
        reviews_needed = math.ceil(average_reviews * ENTRY_FALLBACK_RATIO)

    return MarketStatistics(
        total_competitors=len(cohort),
        average_rating=average_rating,
        average_reviews=average_reviews,
        median_reviews=median(reviews),
        review_range=(min(reviews), max(reviews)),
        rating_range=(min(ratings), max(ratings)),
        top_performer=_top_performer(cohort),
        high_performers=sum(
            1 for c in cohort
            if (c.rating or 0) >= HIGH_PERFORMER_RATING and (c.review_count or 0) >= HIGH_PERFORMER_REVIEWS
        ),
        entry_threshold=EntryThreshold(
            reviews_needed=reviews_needed,
            rating_needed=max(MIN_ENTRY_RATING, min(ratings)),
        ),
    )


def compare_to_market(rating: Optional[float], reviews: Optional[int], stats: MarketStatistics) -> MarketComparison:
    rating = rating or 0.0
    reviews = reviews or 0
    threshold = stats.entry_threshold
    reviews_vs_entry = reviews - threshold.reviews_needed
    return MarketComparison(
        rating_vs_average=rating - stats.average_rating,
        reviews_vs_average=reviews - stats.average_reviews,
        reviews_vs_median=reviews - stats.median_reviews,
        reviews_vs_entry=reviews_vs_entry,
        reviews_to_entry=max(0, -reviews_vs_entry),
        rating_to_entry=round(max(0.0, threshold.rating_needed - rating), 1),
        meets_entry_threshold=reviews_vs_entry >= 0 and rating >= threshold.rating_needed,
    )


def summarize_market_position(
    name: str,
    rating: Optional[float],
    reviews: Optional[int],
    stats: MarketStatistics,
) -> List[str]:
    """Human-readable benchmark lines for one business against its cohort."""
    if not stats.total_competitors:
        return [f"{name}: no competitor data for comparison"]

    rating = rating or 0.0
    reviews = reviews or 0
    cmp = compare_to_market(rating, reviews, stats)
    threshold = stats.entry_threshold
    lines = []

    if cmp.meets_entry_threshold:
        lines.append(f"Competitive position: {name} meets top-{stats.total_competitors} entry criteria")
    else:
        lines.append(
            f"Opportunity: {name} needs {cmp.reviews_to_entry} more reviews and "
            f"{cmp.rating_to_entry:.1f} rating points to enter the top results"
        )

    if cmp.rating_vs_average > 0:
        lines.append(
            f"Rating advantage: {cmp.rating_vs_average:.1f} points above average ({stats.average_rating:.1f})"
        )
    else:
        lines.append(
            f"Rating gap: {abs(cmp.rating_vs_average):.1f} points below average ({stats.average_rating:.1f})"
        )

    if cmp.reviews_vs_median > 0:
        lines.append(
            f"Review strength: {round(cmp.reviews_vs_median)} reviews above median ({round(stats.median_reviews)})"
        )
    else:
        lines.append(
            f"Review opportunity: {round(abs(cmp.reviews_vs_median))} reviews behind median "
            f"competitor ({round(stats.median_reviews)})"
        )

    leader = stats.top_performer
    lines.append(f"Market average: {stats.average_rating:.1f} rating, {round(stats.average_reviews)} reviews")
    if leader:
        lines.append(f"Market leader: {leader.name} ({leader.rating} rating, {leader.review_count} reviews)")
    lines.append(f"Entry threshold: {threshold.rating_needed} rating, {threshold.reviews_needed}+ reviews")
    lines.append(f"Review range: {stats.review_range[0]} - {stats.review_range[1]} reviews")

    if rating < threshold.rating_needed:
        lines.append(f"Priority: reach a {threshold.rating_needed} rating minimum")
    if reviews < threshold.reviews_needed:
        lines.append(f"Growth target: gain {threshold.reviews_needed - reviews} reviews to reach the entry threshold")
    if reviews < stats.average_reviews:
        lines.append(f"Competitive goal: reach {round(stats.average_reviews)} reviews to match the market average")
    return lines
