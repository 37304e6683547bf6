from __future__ import annotations

"""
Search-as-you-type suggestions.

The host fetches product titles, category names and brand names that
loosely match the partial query; this module picks a quota of each kind,
orders them (prefix matches first, shorter first) and removes duplicates.
"""

from math import ceil
from typing import Iterable, List, Sequence, Tuple

from . import config
from .pipeline_types import Suggestion, SuggestionKind


def _quota(limit: int, share: float) -> int:
    # round first so 10 * 0.3 gives 3, not 4
    return int(ceil(round(limit * share, 6)))


def _sort_key(text: str, query: str) -> Tuple[int, int, str]:
    lowered = text.lower()
    if lowered.startswith(query):
        return (0, len(lowered), lowered)
    return (1, 0, lowered.casefold())


def rank_suggestions(
    query: str,
    suggestions: Iterable[Suggestion],
    limit: int = config.SUGGESTION_DEFAULT_LIMIT,
) -> List[Suggestion]:
    """
    Order suggestions: texts starting with the query first (shorter first),
    then the rest alphabetically.  De-duplicates by lower-cased text.
    """
    q = (query or "").strip().lower()
    if not q or limit <= 0:
        return []

    ordered = sorted(suggestions, key=lambda s: _sort_key(s.text, q))
    out: List[Suggestion] = []
    seen = set()
    for sug in ordered:
        key = sug.text.lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(sug)
        if len(out) >= limit:
            break
    return out


def build_suggestions(
    query: str,
    product_titles: Sequence[Tuple[str, str]],
    category_names: Sequence[Tuple[str, str]],
    brand_names: Sequence[str],
    limit: int = config.SUGGESTION_DEFAULT_LIMIT,
) -> List[Suggestion]:
    """
    ``product_titles`` / ``category_names`` are (id, text) pairs already
    retrieved for the query; ``brand_names`` are raw brand strings.
    Products are trusted as retrieved, categories and brands must contain
    the query.
    """
    q = (query or "").strip().lower()
    if not q:
        return []

    products = [
        Suggestion(id=pid, text=title, kind=SuggestionKind.PRODUCT)
        for pid, title in product_titles[: _quota(limit, config.SUGGESTION_PRODUCT_SHARE)]
        if title
    ]

    categories = [
        Suggestion(id=cid, text=name, kind=SuggestionKind.CATEGORY)
        for cid, name in category_names
        if name and q in name.lower()
    ][: _quota(limit, config.SUGGESTION_CATEGORY_SHARE)]

    unique_brands: List[str] = []
    for brand in brand_names:
        if brand and q in brand.lower() and brand not in unique_brands:
            unique_brands.append(brand)
    brands = [
        Suggestion(id=f"brand_{i}_{name}", text=name, kind=SuggestionKind.BRAND)
        for i, name in enumerate(unique_brands[: _quota(limit, config.SUGGESTION_BRAND_SHARE)])
    ]

    return rank_suggestions(q, products + categories + brands, limit=limit)
