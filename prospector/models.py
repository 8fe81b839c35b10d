"""
Records passed between the resolver, cohort builder, statistics and scoring.

Raw Google Places payloads are converted to CandidateRecord at the edge;
everything downstream works on these immutable records.
"""

import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple


def _to_float(v: Any) -> Optional[float]:
    try:
        if v is None:
            return None
        return float(v)
    except (TypeError, ValueError):
        return None


def _to_int(v: Any) -> Optional[int]:
    try:
        if v is None:
            return None
        return int(v)
    except (TypeError, ValueError):
        return None


def new_lead_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class CandidateRecord:
    """One place returned by the Places API for a query."""
    place_id: str
    name: str
    formatted_address: str = ""
    rating: Optional[float] = None
    review_count: Optional[int] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    types: Tuple[str, ...] = ()

    @classmethod
    def from_place(cls, place: Dict) -> "CandidateRecord":
        """Convert a raw Places API result (any endpoint) to a CandidateRecord."""
        geometry = place.get("geometry") or {}
        location = geometry.get("location") or {}
        return cls(
            place_id=place.get("place_id") or "",
            name=place.get("name") or "",
            formatted_address=place.get("formatted_address") or place.get("vicinity") or "",
            rating=_to_float(place.get("rating")),
            review_count=_to_int(place.get("user_ratings_total")),
            lat=_to_float(location.get("lat")),
            lng=_to_float(location.get("lng")),
            types=tuple(place.get("types") or ()),
        )

    @property
    def has_metrics(self) -> bool:
        """True when both rating and review count are present."""
        return bool(self.rating) and bool(self.review_count)

    def to_dict(self) -> Dict:
        return {
            "place_id": self.place_id,
            "name": self.name,
            "formatted_address": self.formatted_address,
            "rating": self.rating,
            "review_count": self.review_count,
            "lat": self.lat,
            "lng": self.lng,
            "types": list(self.types),
        }


@dataclass(frozen=True)
class CompetitorRecord:
    """A cohort member gathered for one lead."""
    name: str
    rating: float
    review_count: int
    place_id: str = ""
    distance_m: float = 0
    lead_id: str = ""

    def to_dict(self) -> Dict:
        return {
            "lead_id": self.lead_id,
            "name": self.name,
            "rating": self.rating,
            "review_count": self.review_count,
            "distance_m": self.distance_m,
            "place_id": self.place_id,
        }


@dataclass(frozen=True)
class EntryThreshold:
    reviews_needed: int = 0
    rating_needed: float = 0.0


@dataclass(frozen=True)
class MarketStatistics:
    """Descriptive statistics over one competitor cohort."""
    total_competitors: int = 0
    average_rating: float = 0.0
    average_reviews: float = 0.0
    median_reviews: float = 0.0
    review_range: Tuple[int, int] = (0, 0)
    rating_range: Tuple[float, float] = (0.0, 0.0)
    top_performer: Optional[CompetitorRecord] = None
    high_performers: int = 0
    entry_threshold: EntryThreshold = field(default_factory=EntryThreshold)

    def to_dict(self) -> Dict:
        return {
            "total_competitors": self.total_competitors,
            "average_rating": self.average_rating,
            "average_reviews": self.average_reviews,
            "median_reviews": self.median_reviews,
            "review_range": {"min": self.review_range[0], "max": self.review_range[1]},
            "rating_range": {"min": self.rating_range[0], "max": self.rating_range[1]},
            "top_performer": self.top_performer.to_dict() if self.top_performer else None,
            "high_performers": self.high_performers,
            "entry_threshold": {
                "reviews_needed": self.entry_threshold.reviews_needed,
                "rating_needed": self.entry_threshold.rating_needed,
            },
        }


@dataclass(frozen=True)
class MarketComparison:
    """A business's rating/reviews measured against its cohort."""
    rating_vs_average: float
    reviews_vs_average: float
    reviews_vs_median: float
    reviews_vs_entry: int
    reviews_to_entry: int
    rating_to_entry: float
    meets_entry_threshold: bool

    def to_dict(self) -> Dict:
        return {
            "rating_vs_average": self.rating_vs_average,
            "reviews_vs_average": self.reviews_vs_average,
            "reviews_vs_median": self.reviews_vs_median,
            "reviews_vs_entry": self.reviews_vs_entry,
            "reviews_to_entry": self.reviews_to_entry,
            "rating_to_entry": self.rating_to_entry,
            "meets_entry_threshold": self.meets_entry_threshold,
        }


@dataclass(frozen=True)
class Lead:
    """
    A resolved business.

    tier and gap_analysis are empty until scoring; scoring returns a new Lead
    (see score.score) instead of mutating this one.
    """
    id: str
    name: str
    address: str
    rating: Optional[float]
    review_count: Optional[int]
    place_id: str = ""
    tier: Optional[str] = None
    gap_analysis: str = ""
    lat: Optional[float] = None
    lng: Optional[float] = None
    incomplete_data: bool = False
    source: str = "places"
    types: Tuple[str, ...] = ()

    @classmethod
    def from_candidate(
        cls,
        record: CandidateRecord,
        incomplete_data: bool = False,
        source: str = "places",
    ) -> "Lead":
        return cls(
            id=new_lead_id(),
            name=record.name,
            address=record.formatted_address,
            rating=record.rating,
            review_count=record.review_count,
            place_id=record.place_id,
            lat=record.lat,
            lng=record.lng,
            incomplete_data=incomplete_data,
            source=source,
            types=record.types,
        )

    @classmethod
    def manual(
        cls,
        name: str,
        rating: float,
        review_count: int,
        address: Optional[str] = None,
    ) -> "Lead":
        """Lead from manually entered data for a business the API could not find."""
        lead_id = new_lead_id()
        return cls(
            id=lead_id,
            name=name,
            address=address or "Manual Entry",
            rating=rating,
            review_count=review_count,
            place_id=f"manual_{lead_id}",
            source="manual",
        )

    def with_score(self, tier: str, gap_analysis: str) -> "Lead":
        return replace(self, tier=tier, gap_analysis=gap_analysis)

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "place_id": self.place_id,
            "rating": self.rating,
            "review_count": self.review_count,
            "tier": self.tier,
            "gap_analysis": self.gap_analysis,
            "lat": self.lat,
            "lng": self.lng,
            "incomplete_data": self.incomplete_data,
            "source": self.source,
        }
