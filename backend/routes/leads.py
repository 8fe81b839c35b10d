"""
Read-only routes over stored leads and their competitors.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException

from backend.models.schemas import CompetitorOut, LeadListResponse, LeadOut
from prospector.db import get_competitors_for_lead, get_latest_run_id, get_lead, get_run, list_leads

router = APIRouter(prefix="/leads", tags=["leads"])


@router.get("", response_model=LeadListResponse)
def get_leads(run_id: Optional[str] = None):
    """Leads of the given run, or of the latest completed run."""
    if run_id:
        if not get_run(run_id):
            raise HTTPException(status_code=404, detail="Run not found")
    else:
        run_id = get_latest_run_id()
        if not run_id:
            return {"run_id": None, "leads": []}
    return {"run_id": run_id, "leads": list_leads(run_id)}


@router.get("/{lead_id}", response_model=LeadOut)
def get_lead_endpoint(lead_id: str):
    lead = get_lead(lead_id)
    if not lead:
        raise HTTPException(status_code=404, detail="Lead not found")
    return lead


@router.get("/{lead_id}/competitors", response_model=List[CompetitorOut])
def get_lead_competitors(lead_id: str):
    if not get_lead(lead_id):
        raise HTTPException(status_code=404, detail="Lead not found")
    return get_competitors_for_lead(lead_id)
