"""
Tests for competitor cohort building.

Scenarios:
  a) City/state extraction and the "10-pack" search hint
  b) Business type and search category inference from place types and names
  c) Text-search cohort: top N only, metrics required, business itself excluded, order kept
  d) Nearby cohort: rating/review filter, distances, widening to establishment
  e) Named competitors resolved one by one
  f) Lookup failures yield an empty cohort
"""

from fakes import FakeLookup, place
from prospector.cohort import (
    build_cohort,
    build_cohort_from_queries,
    build_nearby_cohort,
    cohort_hint,
    infer_business_type,
    infer_search_category,
    split_city_state,
)


def test_split_city_state():
    assert split_city_state("123 Main St, Waco, TX 76701, USA") == ("Waco", "TX")
    assert split_city_state("500 Congress Ave, Austin, TX 78701") == ("Austin", "TX")
    assert split_city_state("") == ("local area", "")


def test_cohort_hint():
    assert cohort_hint("plumbers", "1 Main St, Austin, TX 78701, USA") == "plumbers Austin TX"
    assert cohort_hint("pest control", "") == "pest control local area"


def test_infer_business_type():
    assert infer_business_type(["point_of_interest", "plumber", "establishment"]) == "plumber"
    assert infer_business_type(["restaurant", "bar", "food"]) == "restaurant"
    assert infer_business_type(["roofing_contractor", "point_of_interest"]) == "roofing_contractor"
    assert infer_business_type(["point_of_interest", "establishment"]) == "establishment"
    assert infer_business_type(None) == "establishment"


def test_infer_search_category():
    assert infer_search_category(["plumber"]) == "plumbers"
    assert infer_search_category(["roofing_contractor"]) == "roofing contractors"
    assert infer_search_category(["hair_care"]) == "hair care"
    assert infer_search_category(["establishment"], "Waco Pest Pros") == "pest control"
    assert infer_search_category(["point_of_interest"], "Central Texas HVAC") == "hvac contractors"
    assert infer_search_category([], "Acme Holdings") == "businesses"


def test_text_cohort_filters_and_keeps_order():
    results = [place(f"Comp {i}", 4.0 + i / 100, 10 * (i + 1), place_id=f"c{i}") for i in range(12)]
    results[3] = place("Ace Pest Control", 4.6, 18, place_id="ace1")
    results[5] = place("No Reviews Yet", 4.9, None, place_id="nr")
    lookup = FakeLookup(text={"pest control Waco TX": results})

    cohort = build_cohort(
        lookup, "pest control Waco TX", lead_id="lead1",
        exclude_place_id="ace1", exclude_name="Ace Pest Control",
    )

    assert [c.place_id for c in cohort] == ["c0", "c1", "c2", "c4", "c6", "c7", "c8", "c9"]
    assert all(c.lead_id == "lead1" for c in cohort)
    assert all(c.distance_m == 0 for c in cohort)
    assert cohort[0].review_count == 10


def test_text_cohort_limit():
    results = [place(f"Comp {i}", 4.5, 20, place_id=f"c{i}") for i in range(8)]
    cohort = build_cohort(FakeLookup(text=results), "plumbers Austin TX", limit=3)
    assert len(cohort) == 3


def test_text_cohort_lookup_failure():
    assert build_cohort(FakeLookup(fail={"search_by_text"}), "plumbers Austin TX") == []


def test_nearby_cohort_filters_and_measures_distance():
    nearby = [
        place("Close Plumbing", 4.5, 30, lat=31.5501, lng=-97.1401),
        place("Unrated Plumbing", None, None, lat=31.551, lng=-97.141),
        place("One Review Plumbing", 5.0, 1, lat=31.552, lng=-97.142),
        place("Far Plumbing", 4.1, 12, lat=31.56, lng=-97.15),
    ]
    lookup = FakeLookup(nearby={"plumber": nearby})
    cohort = build_nearby_cohort(lookup, 31.55, -97.14, "plumber", lead_id="lead1")

    assert [c.name for c in cohort] == ["Close Plumbing", "Far Plumbing"]
    assert 0 < cohort[0].distance_m < cohort[1].distance_m
    assert cohort[1].distance_m < 2000


def test_nearby_cohort_widens_to_establishment():
    lookup = FakeLookup(nearby={"establishment": [place("Corner Store", 4.2, 50, lat=31.55, lng=-97.14)]})
    cohort = build_nearby_cohort(lookup, 31.55, -97.14, "plumber")

    assert [c.name for c in cohort] == ["Corner Store"]
    assert [arg for _, arg in lookup.calls] == ["plumber", "establishment"]


def test_nearby_cohort_top_five():
    nearby = [place(f"Shop {i}", 4.5, 10, lat=31.55, lng=-97.14) for i in range(8)]
    assert len(build_nearby_cohort(FakeLookup(nearby={"establishment": nearby}), 31.55, -97.14)) == 5


def test_named_competitors():
    lookup = FakeLookup(find={
        "Bugs Away, Waco TX": [place("Bugs Away", 4.3, 64, place_id="ba")],
        "Ghost Pest, Waco TX": [place("Ghost Pest", 4.8, None, place_id="gp")],
    })
    cohort = build_cohort_from_queries(
        lookup, ["Bugs Away, Waco TX", "Ghost Pest, Waco TX", "Nobody, Waco TX", " "], lead_id="lead1",
    )

    assert [c.place_id for c in cohort] == ["ba"]
    assert cohort[0].lead_id == "lead1"
