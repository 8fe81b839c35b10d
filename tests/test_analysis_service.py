"""
Tests for the analysis service (resolve -> cohort -> score -> persist).

Scenarios:
  a) Single query: resolved, "10-pack" cohort excludes the business itself, tier A
  b) Named competitors replace the category search
  c) Empty text cohort falls back to a nearby search
  d) Unresolvable query raises BusinessNotFoundError carrying the resolution
  e) Batch: input order kept (also with workers), one lookup per query, not_found / unavailable / failed reported
  f) Manual business entries
  g) Batch limits and persistence
"""

import threading

import pytest

from fakes import FakeLookup, place
from backend.services import analysis_service
from backend.services.analysis_service import analyze_batch, analyze_business, analyze_manual_business
from prospector import db
from prospector.errors import BusinessNotFoundError
from prospector.resolver import STATUS_NOT_FOUND

ACE = place(
    "Ace Pest Control", 4.6, 18, place_id="ace1",
    address="123 Main St, Waco, TX 76701, USA", lat=31.55, lng=-97.14,
)
ORKIN = place("Orkin Pest Control", 4.8, 120, place_id="ork")
BUGS = place("Bugs Away", 4.2, 40, place_id="ba")


def _ace_lookup(**kwargs):
    params = {
        "find": {"Ace Pest Control, Waco, TX": [ACE]},
        "text": {"pest control Waco TX": [ACE, ORKIN, BUGS]},
    }
    params.update(kwargs)
    return FakeLookup(**params)


class ExplodingLookup(FakeLookup):
    def find_place(self, text):
        if text.startswith("Boom"):
            raise KeyError("unexpected payload")
        return super().find_place(text)


def test_analyze_business_with_ten_pack_cohort():
    scored = analyze_business("Ace Pest Control, Waco, TX", lookup=_ace_lookup())

    assert scored.lead.name == "Ace Pest Control"
    assert scored.lead.tier == "A"
    assert [c.place_id for c in scored.competitors] == ["ork", "ba"]
    assert all(c.lead_id == scored.lead.id for c in scored.competitors)
    assert "Competitor average: 80 reviews (-62 gap)." in scored.lead.gap_analysis
    assert scored.result.benchmarks[0].startswith("Opportunity: Ace Pest Control needs 23 more reviews")


def test_business_category_overrides_inferred_search():
    lookup = _ace_lookup(text={"exterminators Waco TX": [ORKIN]})
    scored = analyze_business("Ace Pest Control, Waco, TX", lookup=lookup, business_category="exterminators")
    assert [c.place_id for c in scored.competitors] == ["ork"]


def test_named_competitors_replace_category_search():
    lookup = _ace_lookup()
    lookup.find["Bugs Away, Waco TX"] = [BUGS]
    scored = analyze_business("Ace Pest Control, Waco, TX", lookup=lookup, competitors=["Bugs Away, Waco TX"])

    assert [c.place_id for c in scored.competitors] == ["ba"]
    assert "pest control Waco TX" not in [arg for _, arg in lookup.calls]


def test_nearby_fallback_when_text_cohort_empty():
    lookup = _ace_lookup(
        text={},
        nearby={"establishment": [place("Neighbor Pest Co", 4.4, 25, lat=31.551, lng=-97.141)]},
    )
    scored = analyze_business("Ace Pest Control, Waco, TX", lookup=lookup)

    assert [c.name for c in scored.competitors] == ["Neighbor Pest Co"]
    assert scored.competitors[0].distance_m > 0


def test_not_found_raises_with_resolution():
    bistro = place("Tony's Bistro", 4.1, 5)
    with pytest.raises(BusinessNotFoundError) as exc:
        analyze_business("Tony's Pizza", lookup=FakeLookup(find=[bistro], text=[bistro]))
    assert exc.value.resolution.status == STATUS_NOT_FOUND
    assert "Tony's Pizza" in str(exc.value)


def test_batch_reports_each_outcome_without_aborting():
    bistro = place("Tony's Bistro", 4.1, 5)
    lookup = ExplodingLookup(
        find={"Ace Pest Control, Waco, TX": [ACE], "Tony's Pizza": [bistro]},
        text={"pest control Waco TX": [ACE, ORKIN, BUGS]},
    )
    result = analyze_batch(
        ["Boom Widgets", "Tony's Pizza", "Ace Pest Control, Waco, TX"], lookup=lookup, save=False,
    )

    assert result["run_id"] is None
    assert [l["name"] for l in result["leads"]] == ["Ace Pest Control"]
    assert result["not_found"] == ["Tony's Pizza"]
    assert result["failed"] == ["Boom Widgets"]
    lead_id = result["leads"][0]["id"]
    assert [c["name"] for c in result["competitors"][lead_id]] == ["Orkin Pest Control", "Bugs Away"]
    assert result["summary"]["total_leads"] == 1


def test_batch_unavailable_when_provider_down():
    lookup = FakeLookup(fail={"find_place", "search_by_text"})
    result = analyze_batch(["Ace Pest Control, Waco, TX"], lookup=lookup, save=False)
    assert result["unavailable"] == ["Ace Pest Control, Waco, TX"]
    assert result["not_found"] == []
    assert result["leads"] == []


def test_batch_keeps_input_order_with_workers():
    names = ["Alpha Plumbing", "Bravo Plumbing", "Charlie Plumbing", "Delta Plumbing"]
    lookup = FakeLookup(find={n: [place(n, 4.5, 20, place_id=n)] for n in names})
    result = analyze_batch(names, lookup=lookup, max_workers=4, save=False)
    assert [l["name"] for l in result["leads"]] == names


class ThreadRecordingLookup(FakeLookup):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.threads = set()

    def _check(self, operation, arg):
        self.threads.add(threading.get_ident())
        super()._check(operation, arg)


def test_batch_gives_each_query_its_own_lookup(monkeypatch):
    names = [f"Shop {i} Plumbing" for i in range(6)]
    created = []

    def make_lookup():
        lookup = ThreadRecordingLookup(find={n: [place(n, 4.5, 20, place_id=n)] for n in names})
        created.append(lookup)
        return lookup

    monkeypatch.setattr(analysis_service, "get_lookup", make_lookup)
    result = analyze_batch(names, max_workers=4, save=False)

    assert [l["name"] for l in result["leads"]] == names
    assert len(created) == len(names)
    assert len({id(lookup) for lookup in created}) == len(names)
    assert all(len(lookup.threads) == 1 for lookup in created)


def test_batch_without_api_key_rejected_before_lookup(monkeypatch):
    from prospector.config import get_settings

    monkeypatch.delenv("GOOGLE_PLACES_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    get_settings.cache_clear()
    monkeypatch.setattr(analysis_service, "get_lookup", lambda: pytest.fail("lookup not needed"))

    with pytest.raises(ValueError, match="GOOGLE_PLACES_API_KEY"):
        analyze_batch(["Ace Pest Control, Waco, TX"], save=False)


def test_batch_lists_incomplete_leads():
    partial = place("Joe's Pizza", 4.5, None, place_id="jp1")
    result = analyze_batch(["Joe's Pizza"], lookup=FakeLookup(find=[partial]), save=False)
    assert result["incomplete"] == [result["leads"][0]["id"]]
    assert result["leads"][0]["tier"] == "A"


def test_manual_business_without_lookup():
    scored = analyze_manual_business({"name": "Bob's Plumbing", "rating": 4.7, "review_count": 12})
    assert scored.lead.source == "manual"
    assert scored.lead.address == "Manual Entry"
    assert scored.lead.place_id.startswith("manual_")
    assert scored.lead.tier == "A"
    assert scored.competitors == ()


def test_manual_business_with_category_uses_entered_address():
    lookup = FakeLookup(text={"plumbers Austin TX": [place("Rival Plumbing", 4.6, 80, place_id="rp")]})
    scored = analyze_manual_business(
        {"name": "Bob's Plumbing", "rating": 4.7, "review_count": 12, "address": "9 Elm St, Austin, TX 78701"},
        lookup=lookup,
        business_category="plumbers",
    )
    assert [c.place_id for c in scored.competitors] == ["rp"]


def test_batch_with_only_manual_entries(monkeypatch):
    monkeypatch.setattr(analysis_service, "get_lookup", lambda: pytest.fail("lookup not needed"))
    result = analyze_batch([], manual_business_data=[{"name": "Bob's Plumbing", "rating": 3.8, "review_count": 7}], save=False)
    assert result["leads"][0]["tier"] == "C"
    assert result["leads"][0]["source"] == "manual"


def test_batch_limits():
    with pytest.raises(ValueError):
        analyze_batch([f"Business {i}" for i in range(11)], lookup=FakeLookup(), save=False)
    with pytest.raises(ValueError):
        analyze_batch(["  "], lookup=FakeLookup(), save=False)


def test_batch_persists_run_leads_and_competitors():
    result = analyze_batch(["Ace Pest Control, Waco, TX"], lookup=_ace_lookup())

    run = db.get_run(result["run_id"])
    assert run["status"] == "completed"
    assert run["leads_count"] == 1
    assert run["config"]["leads"] == ["Ace Pest Control, Waco, TX"]

    stored = db.list_leads(result["run_id"])
    assert [l["name"] for l in stored] == ["Ace Pest Control"]
    assert stored[0]["tier"] == "A"
    assert [c["name"] for c in db.get_competitors_for_lead(stored[0]["id"])] == ["Orkin Pest Control", "Bugs Away"]
    assert db.get_latest_run_id() == result["run_id"]
