"""
Tests for the category-search fallback matcher.

Scenarios:
  a) Category detection on search variants
  b) Distinctive-word extraction drops stop words and punctuation
  c) Same category + shared distinctive word -> probable match
  d) Different owners in the same category, or a query outside the category -> no match
"""

from prospector.category import (
    detect_category,
    evaluate_category_match,
    extract_business_words,
    is_business_type_match,
)


def test_detect_category():
    assert detect_category("pest control Waco TX") == "pest control"
    assert detect_category("Exterminator Waco TX") == "pest control"
    assert detect_category("Joe's Pizza, Austin TX") is None


def test_extract_business_words():
    assert extract_business_words("Bug Busters Pest Control Services, LLC") == ["bug", "busters"]
    assert extract_business_words("The A1 Termite & Pest Co") == ["termite"]


def test_shared_name_word_in_same_category():
    verdict = evaluate_category_match(
        "Bug Busters Pest Control, Waco, TX",
        "Bug Busters Termite & Pest Control",
        "pest control",
    )
    assert verdict.matched
    assert verdict.evidence == "category"
    assert verdict.ratio == 1.0


def test_long_word_substring_overlap():
    assert is_business_type_match("Guardian Pest Control", "Guardians Pest Control Services", "pest control")


def test_short_word_substring_not_enough():
    assert not is_business_type_match("Ace Pest Control", "Aces Pest Control", "pest control")


def test_different_business_same_category():
    assert not is_business_type_match(
        "Bug Busters Pest Control, Waco, TX", "Orkin Pest Control", "pest control"
    )


def test_query_outside_category():
    verdict = evaluate_category_match("Bug Busters, Waco", "Bug Busters Pest Control", "pest control")
    assert not verdict.matched


def test_location_in_query_does_not_count_as_shared_word():
    # "waco" only appears after the comma, so it is never compared
    assert not is_business_type_match(
        "Bug Busters Pest Control, Waco, TX", "Waco Termite Pros", "pest control"
    )
