"""
Resolve one free-text query or Maps URL to a single validated business.

Flow per query:
    1. build_search_plan (URL place_id, business text, ordered variants)
    2. URL place_id -> get_details, accepted without name validation
    3. per variant: find_place, then search_by_text if nothing was accepted;
       every candidate validated in provider order (name match, then the
       category matcher for category variants)
    4. first accepted candidate -> details enrichment when metrics are missing
    5. Lead, or not_found / unavailable

Provider failures never escape: each is logged and recorded on the Resolution.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .category import detect_category, evaluate_category_match
from .errors import PlaceLookupError
from .matching import MatchVerdict, evaluate_name_match
from .models import CandidateRecord, Lead
from .query import SearchPlan, build_search_plan

logger = logging.getLogger(__name__)

# Resolver states
PENDING = "pending"
TRYING = "trying"
RESOLVED = "resolved"
EXHAUSTED = "exhausted"

# Resolution statuses
STATUS_RESOLVED = "resolved"
STATUS_NOT_FOUND = "not_found"
STATUS_UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class NearMiss:
    """A candidate the provider returned that failed validation."""
    variant: str
    candidate_name: str
    verdict: MatchVerdict


@dataclass
class Resolution:
    query: str
    status: str
    record: Optional[CandidateRecord] = None
    lead: Optional[Lead] = None
    incomplete_data: bool = False
    variants_tried: List[str] = field(default_factory=list)
    near_misses: List[NearMiss] = field(default_factory=list)
    provider_errors: List[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.status == STATUS_RESOLVED

    def to_dict(self) -> dict:
        return {
            "query": self.query,
            "status": self.status,
            "lead": self.lead.to_dict() if self.lead else None,
            "incomplete_data": self.incomplete_data,
            "variants_tried": list(self.variants_tried),
            "near_misses": [
                {"variant": m.variant, "candidate": m.candidate_name, "reason": m.verdict.reason}
                for m in self.near_misses
            ],
            "provider_errors": list(self.provider_errors),
        }


class BusinessResolver:
    """
    Single-use resolver for one query.

    lookup is any object with find_place, search_by_text and get_details
    (PlacesClient in production, in-memory fakes in tests).
    """

    def __init__(self, lookup, query: str):
        self.lookup = lookup
        self.plan: SearchPlan = build_search_plan(query)
        self.state = PENDING
        self._calls = 0
        self._failures = 0
        self._variants_tried: List[str] = []
        self._near_misses: List[NearMiss] = []
        self._errors: List[str] = []

    def _call(self, operation: str, fn, arg):
        """Invoke one provider operation; None when it raised PlaceLookupError."""
        self._calls += 1
        try:
            return fn(arg)
        except PlaceLookupError as e:
            self._failures += 1
            message = f"{operation}({arg!r}): {e}"
            self._errors.append(message)
            logger.warning(f"Place lookup failed during {message}")
            return None

    def _validate(self, variant: str, candidate: CandidateRecord) -> bool:
        verdict = evaluate_name_match(self.plan.business_query, candidate.name)
        if verdict.matched:
            logger.info(
                f"Accepted '{candidate.name}' for '{self.plan.business_query}' "
                f"({verdict.evidence}: {verdict.reason})"
            )
            return True

        category = detect_category(variant)
        if category:
            category_verdict = evaluate_category_match(self.plan.business_query, candidate.name, category)
            if category_verdict.matched:
                return True

        self._near_misses.append(NearMiss(variant, candidate.name, verdict))
        logger.info(
            f"Rejected '{candidate.name}' for '{self.plan.business_query}' "
            f"via variant '{variant}': {verdict.reason}"
        )
        return False

    def _first_accepted(self, variant: str, candidates: Optional[List[CandidateRecord]]) -> Optional[CandidateRecord]:
        for candidate in candidates or []:
            if self._validate(variant, candidate):
                return candidate
        return None

    def _enrich(self, record: CandidateRecord) -> CandidateRecord:
        if record.has_metrics or not record.place_id:
            return record
        details = self._call("get_details", self.lookup.get_details, record.place_id)
        if details is None:
            return record
        logger.debug(f"Enriched '{record.name}' with place details")
        return details

    def _try_place_id(self) -> Optional[CandidateRecord]:
        if not self.plan.place_id:
            return None
        return self._call("get_details", self.lookup.get_details, self.plan.place_id)

    def _try_variants(self) -> Optional[CandidateRecord]:
        for variant in self.plan.variants:
            self._variants_tried.append(variant)
            logger.debug(f"Trying variant '{variant}'")

            found = self._call("find_place", self.lookup.find_place, variant)
            accepted = self._first_accepted(variant, found)
            if accepted is None:
                broader = self._call("search_by_text", self.lookup.search_by_text, variant)
                accepted = self._first_accepted(variant, broader)
            if accepted is not None:
                return accepted
        return None

    def run(self) -> Resolution:
        if self.state != PENDING:
            raise RuntimeError("BusinessResolver.run() may only be called once")
        self.state = TRYING

        source = "url" if self.plan.is_url else "places"
        record = self._try_place_id()
        if record is None:
            record = self._try_variants()
            if record is not None:
                record = self._enrich(record)

        if record is None:
            self.state = EXHAUSTED
            status = STATUS_NOT_FOUND
            if self._calls and self._failures == self._calls:
                status = STATUS_UNAVAILABLE
            logger.info(
                f"No match for '{self.plan.raw}' after {len(self._variants_tried)} variants ({status})"
            )
            return self._resolution(status)

        self.state = RESOLVED
        incomplete = not record.has_metrics
        if incomplete:
            logger.warning(
                f"Resolved '{record.name}' with incomplete data "
                f"(rating={record.rating}, reviews={record.review_count})"
            )
        lead = Lead.from_candidate(record, incomplete_data=incomplete, source=source)
        return self._resolution(STATUS_RESOLVED, record=record, lead=lead, incomplete=incomplete)

    def _resolution(self, status: str, record=None, lead=None, incomplete=False) -> Resolution:
        return Resolution(
            query=self.plan.raw,
            status=status,
            record=record,
            lead=lead,
            incomplete_data=incomplete,
            variants_tried=list(self._variants_tried),
            near_misses=list(self._near_misses),
            provider_errors=list(self._errors),
        )


def resolve_business(lookup, query: str) -> Resolution:
    """Resolve one query. Raises ValueError on a blank query."""
    return BusinessResolver(lookup, query).run()
