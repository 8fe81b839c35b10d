"""
Pydantic schemas for the analysis API.
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, model_validator


# ---------------------------------------------------------------------------
# Analyze input
# ---------------------------------------------------------------------------

class ManualBusinessData(BaseModel):
    """A business entered by hand when the Places API cannot find it."""

    name: str = Field(min_length=1)
    address: Optional[str] = None
    rating: float = Field(ge=0, le=5)
    review_count: int = Field(ge=0)


class AnalyzeRequest(BaseModel):
    """Request body for POST /analyze."""

    leads: List[str] = Field(default_factory=list, max_length=10)
    competitors: List[str] = Field(default_factory=list)
    business_category: Optional[str] = None
    manual_business_data: List[ManualBusinessData] = Field(default_factory=list)
    max_workers: int = Field(default=1, ge=1, le=10)

    @model_validator(mode="after")
    def _require_input(self):
        if not any(q.strip() for q in self.leads) and not self.manual_business_data:
            raise ValueError("Provide at least one lead or manual business entry")
        return self


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

class CompetitorOut(BaseModel):
    lead_id: str
    name: str
    rating: Optional[float] = None
    review_count: Optional[int] = None
    distance_m: float = 0
    place_id: Optional[str] = None


class LeadOut(BaseModel):
    id: str
    name: str
    address: Optional[str] = None
    place_id: Optional[str] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    tier: Optional[str] = None
    gap_analysis: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    incomplete_data: bool = False
    source: Optional[str] = None
    run_id: Optional[str] = None
    created_at: Optional[str] = None
    scoring: Optional[Dict[str, Any]] = None


class AnalyzeResponse(BaseModel):
    """Response body for POST /analyze."""

    run_id: Optional[str] = None
    leads: List[LeadOut]
    competitors: Dict[str, List[CompetitorOut]]
    not_found: List[str] = []
    unavailable: List[str] = []
    incomplete: List[str] = []
    failed: List[str] = []
    summary: Dict[str, Any] = {}


class LeadListResponse(BaseModel):
    run_id: Optional[str] = None
    leads: List[LeadOut]
