"""
POST /analyze route.
"""

import logging
from fastapi import APIRouter, HTTPException

from backend.models.schemas import AnalyzeRequest, AnalyzeResponse
from backend.services.analysis_service import analyze_batch

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyze", tags=["analyze"])


@router.post("", response_model=AnalyzeResponse)
def post_analyze(body: AnalyzeRequest):
    """
    Resolve, benchmark and score up to 10 businesses.

    Optional: competitors (named competitor queries used for every lead),
    business_category (cohort search term), manual_business_data.
    """
    try:
        return analyze_batch(
            queries=body.leads,
            competitors=[c for c in body.competitors if c.strip()],
            business_category=body.business_category.strip() if body.business_category else None,
            manual_business_data=[m.model_dump() for m in body.manual_business_data],
            max_workers=body.max_workers,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Analysis failed: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
