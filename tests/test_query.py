"""
Tests for query normalization and search-variant generation.

Scenarios:
  a) Plain "name, location" query -> verbatim then quoted
  b) Missing comma with 3+ words -> comma inserted before the last two words
  c) Trade names with a location -> category fallback variants
  d) Maps URLs -> place_id, or business name from the path
  e) Blank input -> no variants / ValueError
"""

import pytest

from prospector.query import (
    build_search_plan,
    business_name_segment,
    extract_business_name_from_url,
    extract_place_id_from_url,
    generate_search_variations,
    is_url,
)


def test_verbatim_then_quoted():
    assert generate_search_variations("Joe's Pizza, Austin TX") == [
        "Joe's Pizza, Austin TX",
        '"Joe\'s Pizza, Austin TX"',
    ]


def test_comma_inserted_when_missing():
    variants = generate_search_variations("Joe's Pizza Austin TX")
    assert variants == [
        "Joe's Pizza Austin TX",
        '"Joe\'s Pizza Austin TX"',
        "Joe's Pizza, Austin TX",
    ]


def test_two_words_without_comma_get_no_split():
    assert generate_search_variations("Joe's Pizza") == ["Joe's Pizza", '"Joe\'s Pizza"']


def test_already_quoted_input_not_requoted():
    assert generate_search_variations('"Joe\'s Pizza"') == ['"Joe\'s Pizza"']


def test_pest_control_category_variants():
    variants = generate_search_variations("Ace Pest Control, Waco, TX")
    assert variants[0] == "Ace Pest Control, Waco, TX"
    assert variants[2:] == [
        "pest control Waco TX",
        "pest control service Waco TX",
        "exterminator Waco TX",
    ]


def test_plumbing_and_electrical_variants():
    assert "plumber Austin TX" in generate_search_variations("Bob's Plumbing, Austin TX")
    assert "plumbing service Austin TX" in generate_search_variations("Bob's Plumbing, Austin TX")
    assert "electrician Dallas" in generate_search_variations("Sparky Electric, Dallas")


def test_variants_have_no_duplicates():
    variants = generate_search_variations("Ace Pest Control Exterminator, Waco")
    assert len(variants) == len(set(variants))


def test_blank_input_yields_no_variants():
    assert generate_search_variations("") == []
    assert generate_search_variations("   ") == []


def test_business_name_segment():
    assert business_name_segment("Joe's Pizza, Austin, TX") == "Joe's Pizza"
    assert business_name_segment("  Joe's Pizza  ") == "Joe's Pizza"


def test_is_url():
    assert is_url("https://maps.google.com/?cid=123")
    assert is_url("  http://goo.gl/maps/x")
    assert not is_url("Joe's Pizza")


def test_place_id_from_data_segment():
    url = "https://www.google.com/maps/place/Ace+Pest+Control/@31.5,-97.1,15z/data=!4m6!3m5!1sChIJabcdefghijklmnopqrstuv!8m2"
    assert extract_place_id_from_url(url) == "ChIJabcdefghijklmnopqrstuv"


def test_place_id_query_parameter_and_cid():
    assert extract_place_id_from_url("https://maps.google.com/?q=x&place_id=ChIJ123_abc") == "ChIJ123_abc"
    assert extract_place_id_from_url("https://maps.google.com/?cid=1234567890") == "1234567890"


def test_place_id_from_encoded_knowledge_graph_id():
    assert extract_place_id_from_url("https://www.google.com/maps?x=16s%2Fg%2F11abc123") == "11abc123"


def test_no_place_id_in_plain_place_url():
    assert extract_place_id_from_url("https://www.google.com/maps/place/Ace+Pest+Control/@31.5,-97.1,15z") is None


def test_business_name_from_url_path():
    url = "https://www.google.com/maps/place/Ace+Pest+Control/@31.5,-97.1,15z"
    assert extract_business_name_from_url(url) == "Ace Pest Control"


def test_business_name_from_q_parameter():
    assert extract_business_name_from_url("https://maps.google.com/?q=Joe%27s+Pizza") == "Joe's Pizza"


def test_search_plan_for_text():
    plan = build_search_plan("  Joe's Pizza, Austin TX ")
    assert not plan.is_url
    assert plan.place_id is None
    assert plan.business_query == "Joe's Pizza, Austin TX"
    assert plan.variants[0] == "Joe's Pizza, Austin TX"


def test_search_plan_for_url_without_place_id():
    plan = build_search_plan("https://www.google.com/maps/place/Ace+Pest+Control/@31.5,-97.1,15z")
    assert plan.is_url
    assert plan.place_id is None
    assert plan.business_query == "Ace Pest Control"
    assert plan.variants[0] == "Ace Pest Control"


def test_search_plan_rejects_blank():
    with pytest.raises(ValueError):
        build_search_plan("  ")
