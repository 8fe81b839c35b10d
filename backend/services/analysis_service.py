"""
Analysis service: resolve -> cohort -> score -> persist for a batch of queries.

Each query is independent. A query that cannot be resolved is reported in
not_found / unavailable; an unexpected error in one query is logged and
reported in failed without touching its siblings.
"""

import os
import sys
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence

# Ensure project root on path when running from backend
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from prospector import db
from prospector.cohort import (
    build_cohort,
    build_cohort_from_queries,
    build_nearby_cohort,
    cohort_hint,
    infer_business_type,
    infer_search_category,
)
from prospector.config import get_settings
from prospector.errors import BusinessNotFoundError
from prospector.fetch import PlacesClient
from prospector.models import CompetitorRecord, Lead
from prospector.resolver import STATUS_UNAVAILABLE, Resolution, resolve_business
from prospector.score import ScoredLead, get_scoring_summary, score

logger = logging.getLogger(__name__)


def get_lookup():
    """Default place lookup (Google Places)."""
    return PlacesClient()


def _gather_cohort(
    lookup,
    lead: Lead,
    competitors: Optional[Sequence[str]] = None,
    business_category: Optional[str] = None,
) -> List[CompetitorRecord]:
    """
    Competitors for one lead.

    Named competitors win. Otherwise a text "10-pack" search for the
    category in the lead's city; if that comes back empty and the lead has
    coordinates, a nearby search around it.
    """
    settings = get_settings()
    if competitors:
        return build_cohort_from_queries(lookup, competitors, lead_id=lead.id)

    category = business_category or infer_search_category(lead.types, lead.name)
    cohort = build_cohort(
        lookup,
        cohort_hint(category, lead.address),
        lead_id=lead.id,
        exclude_place_id=lead.place_id,
        exclude_name=lead.name,
        limit=settings.cohort_size,
    )
    if cohort or lead.lat is None or lead.lng is None:
        return cohort

    logger.info(f"No text-search cohort for '{lead.name}'; trying nearby search")
    return build_nearby_cohort(
        lookup,
        lead.lat,
        lead.lng,
        infer_business_type(lead.types),
        lead_id=lead.id,
        radius_m=settings.nearby_radius_m,
        exclude_place_id=lead.place_id,
    )


def analyze_business(
    query: str,
    lookup=None,
    competitors: Optional[Sequence[str]] = None,
    business_category: Optional[str] = None,
) -> ScoredLead:
    """
    Resolve and score one query.

    Raises:
        ValueError: blank query
        BusinessNotFoundError: no accepted match (or the provider was unavailable)
    """
    lookup = lookup or get_lookup()
    resolution = resolve_business(lookup, query)
    if not resolution.found:
        raise BusinessNotFoundError(query, resolution)

    lead = resolution.lead
    cohort = _gather_cohort(lookup, lead, competitors, business_category)
    scored = score(lead, cohort)
    logger.info(
        f"Analyzed '{query}' -> {lead.name} (tier {scored.result.tier}, {len(cohort)} competitors)"
    )
    return scored


def analyze_manual_business(
    entry: Dict,
    lookup=None,
    competitors: Optional[Sequence[str]] = None,
    business_category: Optional[str] = None,
) -> ScoredLead:
    """
    Score a business from manually entered name/rating/review_count.

    Competitors come from named queries, or from a category search around
    the entered address when business_category is given.
    """
    lead = Lead.manual(
        name=entry["name"],
        rating=entry["rating"],
        review_count=entry["review_count"],
        address=entry.get("address"),
    )
    cohort: List[CompetitorRecord] = []
    if competitors or business_category:
        lookup = lookup or get_lookup()
        if competitors:
            cohort = build_cohort_from_queries(lookup, competitors, lead_id=lead.id)
        else:
            cohort = build_cohort(
                lookup,
                cohort_hint(business_category, entry.get("address") or ""),
                lead_id=lead.id,
                exclude_name=lead.name,
                limit=get_settings().cohort_size,
            )
    return score(lead, cohort)


def _analyze_query_safely(query: str, lookup, competitors, business_category) -> Dict:
    """lookup None: a fresh client for this query, so worker threads never share one."""
    try:
        lookup = lookup or get_lookup()
        return {"query": query, "scored": analyze_business(query, lookup, competitors, business_category)}
    except BusinessNotFoundError as e:
        return {"query": query, "resolution": e.resolution}
    except Exception:
        logger.exception(f"Analysis failed for '{query}'")
        return {"query": query, "error": True}


def analyze_batch(
    queries: Sequence[str],
    competitors: Optional[Sequence[str]] = None,
    business_category: Optional[str] = None,
    manual_business_data: Optional[Sequence[Dict]] = None,
    max_workers: int = 1,
    lookup=None,
    save: bool = True,
) -> Dict:
    """
    Analyze up to PROSPECTOR_MAX_BATCH queries plus any manual entries.

    Results keep input order regardless of max_workers. Without an injected
    lookup each query (and each manual entry needing competitors) gets its own
    client from get_lookup().

    Returns:
        {run_id, leads, competitors (by lead id), not_found, unavailable,
         incomplete (lead ids), failed, summary}
    """
    settings = get_settings()
    queries = [q.strip() for q in queries or [] if q and q.strip()]
    manual_business_data = list(manual_business_data or [])
    if len(queries) > settings.max_batch_size:
        raise ValueError(f"At most {settings.max_batch_size} leads per batch (got {len(queries)})")
    if not queries and not manual_business_data:
        raise ValueError("Provide at least one lead query or manual business entry")
    if lookup is None and queries and not settings.google_places_api_key:
        raise ValueError("GOOGLE_PLACES_API_KEY is not configured")

    run_id = None
    if save:
        run_id = db.create_run({
            "leads": queries,
            "competitors": list(competitors or []),
            "business_category": business_category,
            "manual_entries": len(manual_business_data),
        })

    try:
        if max_workers > 1 and len(queries) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                outcomes = list(pool.map(
                    lambda q: _analyze_query_safely(q, lookup, competitors, business_category),
                    queries,
                ))
        else:
            outcomes = [_analyze_query_safely(q, lookup, competitors, business_category) for q in queries]

        scored_leads: List[ScoredLead] = []
        not_found: List[str] = []
        unavailable: List[str] = []
        failed: List[str] = []
        for outcome in outcomes:
            if "scored" in outcome:
                scored_leads.append(outcome["scored"])
            elif "resolution" in outcome:
                resolution: Optional[Resolution] = outcome["resolution"]
                if resolution is not None and resolution.status == STATUS_UNAVAILABLE:
                    unavailable.append(outcome["query"])
                else:
                    not_found.append(outcome["query"])
            else:
                failed.append(outcome["query"])

        for entry in manual_business_data:
            try:
                scored_leads.append(analyze_manual_business(entry, lookup, competitors, business_category))
            except Exception:
                logger.exception(f"Manual entry failed for '{entry.get('name')}'")
                failed.append(entry.get("name") or "")

        if save:
            for s in scored_leads:
                db.insert_lead(run_id, s.lead)
                db.insert_competitors(s.lead.id, s.competitors)
    except Exception:
        if save:
            db.update_run_failed(run_id)
        raise

    summary = get_scoring_summary(scored_leads)
    if save:
        db.update_run_completed(run_id, len(scored_leads), summary)

    logger.info(
        f"Batch done: {len(scored_leads)} scored, {len(not_found)} not found, "
        f"{len(unavailable)} unavailable, {len(failed)} failed"
    )
    return {
        "run_id": run_id,
        "leads": [s.to_dict() for s in scored_leads],
        "competitors": {s.lead.id: [c.to_dict() for c in s.competitors] for s in scored_leads},
        "not_found": not_found,
        "unavailable": unavailable,
        "incomplete": [s.lead.id for s in scored_leads if s.lead.incomplete_data],
        "failed": failed,
        "summary": summary,
    }
