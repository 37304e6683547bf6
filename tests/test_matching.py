import pytest

from shop_search.matching import classify, classify_field, token_coverage
from shop_search.pipeline_types import CandidateListing, MatchTier


def _listing(title, brand=None, category_name=None, **kw):
    return CandidateListing(
        product_id=kw.pop("product_id", "p1"),
        sku=kw.pop("sku", "SKU1"),
        title=title,
        price_cents=kw.pop("price_cents", 1000),
        brand=brand,
        category_name=category_name,
        **kw,
    )


def test_title_tiers_are_mutually_exclusive():
    q, toks = "corned beef", ["corned", "beef"]
    assert classify(_listing("Corned Beef 340g"), q, toks).title.tier is MatchTier.EXACT
    assert classify(_listing("Corned Beef Hash"), q, toks).title.tier is MatchTier.PREFIX
    assert classify(_listing("Grace Corned Beef"), q, toks).title.tier is MatchTier.CONTAINS
    assert classify(_listing("Mackerel"), q, toks).title.tier is MatchTier.NONE


def test_title_starts_with_query_flag():
    q, toks = "corned beef", ["corned", "beef"]
    assert classify(_listing("Corned Beef"), q, toks).title_starts_with_query
    assert classify(_listing("Corned Beef Hash"), q, toks).title_starts_with_query
    assert not classify(_listing("Grace Corned Beef"), q, toks).title_starts_with_query


def test_fuzzy_is_fallback_only():
    info = classify(_listing("Grace"), "graece", ["graece"])
    assert info.title.tier is MatchTier.FUZZY
    assert info.title.similarity == pytest.approx(5 / 6)

    # a literal match wins even though the fuzzy comparison would also fire
    info = classify(_listing("Grace Mackerel"), "grace", ["grace"])
    assert info.title.tier is MatchTier.PREFIX
    assert info.title.similarity == 0.0


def test_no_tier_fires_for_unrelated_query():
    info = classify(_listing("Grace", brand="Grace"), "xyz", ["xyz"])
    assert info.title.tier is MatchTier.NONE
    assert info.brand.tier is MatchTier.NONE
    assert info.tokens_matched == 0


def test_token_coverage_counts_substrings():
    info = classify(_listing("Grace Corned Beef"), "corned beef hash", ["corned", "beef", "hash"])
    assert info.tokens_matched == 2
    assert info.tokens_total == 3
    assert token_coverage("grace corned beef", ["corn", "eef"]) == 2


def test_brand_and_category_tiers():
    listing = _listing("Long Grain", brand="Lasco Foods", category_name="Rice")
    info = classify(listing, "rice", ["rice"])
    assert info.category.tier is MatchTier.EXACT
    assert info.brand.tier is MatchTier.NONE

    info = classify(listing, "lasco", ["lasco"])
    assert info.brand.tier is MatchTier.PREFIX

    info = classify(_listing("Soup", brand="Grace Kennedy"), "kennedy", ["kennedy"])
    assert info.brand.tier is MatchTier.CONTAINS


def test_missing_brand_and_category_are_empty_strings():
    info = classify(_listing("Corned Beef"), "corned beef", ["corned", "beef"])
    assert info.brand.tier is MatchTier.NONE
    assert info.category.tier is MatchTier.NONE


def test_empty_query_fires_nothing():
    info = classify(_listing("Corned Beef", brand="Grace"), "", [])
    assert info.title.tier is MatchTier.NONE
    assert info.brand.tier is MatchTier.NONE
    assert info.tokens_total == 0


def test_classify_field_ignores_empty_field():
    assert classify_field("", "rice", ["rice"]).tier is MatchTier.NONE
