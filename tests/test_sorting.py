import pytest

from shop_search.pipeline_types import CandidateListing, RankedResult, SortMode
from shop_search.sorting import coerce_sort_mode, sort_results


def _res(sku, score, price=100, in_stock=True, starts=False, title=None):
    title = title or f"item {sku}"
    listing = CandidateListing(product_id=sku, sku=sku, title=title, price_cents=price, in_stock=in_stock)
    return RankedResult(
        listing=listing,
        score=score,
        in_stock=in_stock,
        title_starts_with_query=starts,
        normalized_title=title,
    )


def _skus(results):
    return [r.listing.sku for r in results]


def test_relevance_orders_by_score_desc():
    out = sort_results([_res("a", 1), _res("b", 3), _res("c", 2)])
    assert _skus(out) == ["b", "c", "a"]


def test_relevance_tie_breaks():
    # equal scores: in-stock, then starts-with, then shorter title
    out_of_stock = _res("oos", 10, in_stock=False, starts=True, title="x")
    long_contains = _res("long", 10, title="a much longer title")
    short_contains = _res("short", 10, title="short")
    starts = _res("starts", 10, starts=True, title="a very long starts with title")
    out = sort_results([out_of_stock, long_contains, short_contains, starts])
    assert _skus(out) == ["starts", "short", "long", "oos"]


def test_relevance_ignores_price():
    cheap = _res("cheap", 5, price=1, title="same")
    dear = _res("dear", 5, price=999, title="same")
    assert _skus(sort_results([dear, cheap])) == ["dear", "cheap"]
    assert _skus(sort_results([cheap, dear])) == ["cheap", "dear"]


def test_price_modes_ignore_relevance():
    results = [_res("a", 100, price=300), _res("b", 1, price=100), _res("c", 50, price=200)]
    assert _skus(sort_results(results, SortMode.PRICE_ASC)) == ["b", "c", "a"]
    assert _skus(sort_results(results, "price_desc")) == ["a", "c", "b"]


def test_price_ties_keep_input_order():
    results = [_res("a", 1, price=100), _res("b", 9, price=100)]
    assert _skus(sort_results(results, SortMode.PRICE_ASC)) == ["a", "b"]


def test_sort_is_deterministic():
    results = [_res(str(i), i % 3, price=i * 7 % 5) for i in range(20)]
    for mode in SortMode:
        assert sort_results(results, mode) == sort_results(results, mode)


def test_coerce_sort_mode():
    assert coerce_sort_mode(None) is SortMode.RELEVANCE
    assert coerce_sort_mode(" PRICE_ASC ") is SortMode.PRICE_ASC
    assert coerce_sort_mode(SortMode.PRICE_DESC) is SortMode.PRICE_DESC
    with pytest.raises(ValueError):
        coerce_sort_mode("popularity")
