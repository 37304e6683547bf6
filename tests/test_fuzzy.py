import pytest

from shop_search.fuzzy import (
    best_fuzzy_partner,
    edit_distance,
    field_fuzzy_similarity,
    is_fuzzy_match,
    max_edits_for_length,
    query_typo_variations,
    similarity,
    typo_variations,
)


def test_edit_distance_and_similarity():
    assert edit_distance("graece", "grace") == 1
    assert similarity("graece", "grace") == pytest.approx(5 / 6)
    assert similarity("Grace", "grace") == 1.0
    assert similarity("", "") == 1.0
    assert similarity("abc", "") == 0.0


def test_max_edits_is_length_tiered():
    assert max_edits_for_length(2) == 0
    assert max_edits_for_length(3) == 1
    assert max_edits_for_length(4) == 1
    assert max_edits_for_length(5) == 2
    assert max_edits_for_length(12) == 2


def test_fuzzy_match_accepts_close_typo():
    assert is_fuzzy_match("graece", "grace")
    # 1 edit on a 4-char word sits exactly on the 0.75 threshold
    assert is_fuzzy_match("rce", "rice")


def test_fuzzy_match_rejects_distant_or_short_strings():
    assert not is_fuzzy_match("xyz", "grace")
    assert not is_fuzzy_match("ab", "abc")
    assert not is_fuzzy_match("cat", "dog")
    # within the edit cap but below the similarity threshold
    assert not is_fuzzy_match("chikin", "chicken")
    # above the similarity threshold but over the edit cap
    assert not is_fuzzy_match("abcdefghijkl", "abcdefghixyz")


def test_best_fuzzy_partner_prefers_highest_similarity():
    cand, sim = best_fuzzy_partner("makrel", ["mackerel", "makarel", "tuna"])
    assert cand == "makarel"
    assert sim == pytest.approx(6 / 7)
    assert best_fuzzy_partner("xyz", ["grace"]) == ("", 0.0)


def test_field_fuzzy_similarity_single_token():
    fired, ratio = field_fuzzy_similarity("grace corned beef", ["graece"])
    assert fired
    assert ratio == pytest.approx(5 / 6)

    assert field_fuzzy_similarity("grace", ["xyz"]) == (False, 0.0)
    assert field_fuzzy_similarity("", ["graece"]) == (False, 0.0)
    assert field_fuzzy_similarity("grace", ["ab"]) == (False, 0.0)


def test_field_fuzzy_similarity_needs_most_tokens_to_match():
    fired, ratio = field_fuzzy_similarity("grace corned beef", ["graece", "corned"])
    assert fired
    assert ratio == pytest.approx((5 / 6 + 1.0) / 2)

    # 2 of 3 tokens is below the 70% coverage requirement
    assert field_fuzzy_similarity("grace corned beef", ["graece", "corned", "hash"]) == (False, 0.0)


def test_typo_variations():
    variations = typo_variations("rice")
    assert len(variations) == 10
    assert len(set(variations)) == 10
    assert "rice" not in variations
    assert variations[0] == "aice"
    assert typo_variations("ab") == []
    assert typo_variations("rice", max_variations=0) == []


def test_typo_variations_all_within_two_edits():
    for v in typo_variations("plantain", max_variations=50):
        assert edit_distance(v, "plantain") <= 2


def test_query_typo_variations_per_token():
    out = query_typo_variations(["rice", "ab", "rice"], max_per_token=3)
    assert out == typo_variations("rice", 3)
    assert "rice" not in out
    assert query_typo_variations([]) == []

    both = query_typo_variations(["rice", "salt"], max_per_token=2)
    assert both == typo_variations("rice", 2) + typo_variations("salt", 2)
