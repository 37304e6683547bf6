"""
Deterministic result ordering.

Every mode sorts with a total key and Python's stable sort, so the same
input list in the same mode always comes back in the same order.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Sequence, Tuple, Union

from .pipeline_types import RankedResult, SortMode


def _relevance_key(res: RankedResult) -> Tuple[float, bool, bool, int]:
    # score desc, in-stock first, title-starts-with first, shorter title first
    return (
        -res.score,
        not res.in_stock,
        not res.title_starts_with_query,
        len(res.normalized_title),
    )


def _price_asc_key(res: RankedResult) -> int:
    return res.listing.price_cents


def _price_desc_key(res: RankedResult) -> int:
    return -res.listing.price_cents


_SORT_KEYS: Dict[SortMode, Callable[[RankedResult], object]] = {
    SortMode.RELEVANCE: _relevance_key,
    SortMode.PRICE_ASC: _price_asc_key,
    SortMode.PRICE_DESC: _price_desc_key,
}


def coerce_sort_mode(mode: Union[SortMode, str, None]) -> SortMode:
    """Accept enum members or their string values; None means relevance."""
    if mode is None:
        return SortMode.RELEVANCE
    if isinstance(mode, SortMode):
        return mode
    try:
        return SortMode(str(mode).strip().lower())
    except ValueError:
        raise ValueError(
            f"Unknown sort mode {mode!r}; expected one of {[m.value for m in SortMode]}"
        ) from None


def sort_results(
    results: Sequence[RankedResult],
    mode: Union[SortMode, str, None] = SortMode.RELEVANCE,
) -> List[RankedResult]:
    """
    relevance  : score desc, then in-stock, title-starts-with-query,
                 shorter normalised title; no price tie-break.
    price_asc  : price only, relevance ignored.
    price_desc : price only, relevance ignored.
    """
    key = _SORT_KEYS[coerce_sort_mode(mode)]
    return sorted(results, key=key)
