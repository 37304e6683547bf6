from __future__ import annotations
"""
Mapping utilities between the HTTP schemas in config.py and the internal
pipeline types.

Keeps the pydantic layer out of the ranking code: the API converts request
bodies into CandidateListing / UserPrefs on the way in and Page /
Suggestion objects into response models on the way out.
"""

from typing import Iterable, List, Optional

from .config import (
    ListingIn,
    PageResponse,
    PreferencesIn,
    RankedListingOut,
    SuggestionOut,
    SuggestResponse,
)
from .pipeline_types import CandidateListing, Page, RankedResult, Suggestion, UserPrefs


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def to_candidate_listing(item: ListingIn) -> CandidateListing:
    return CandidateListing(
        product_id=item.product_id,
        sku=item.sku.strip(),
        title=item.title,
        price_cents=int(item.price_cents),
        in_stock=bool(item.in_stock),
        brand=_blank_to_none(item.brand),
        category_id=_blank_to_none(item.category_id),
        category_name=_blank_to_none(item.category_name),
        category_leaf_id=_blank_to_none(item.category_leaf_id),
        category_path_ids=tuple(item.category_path_ids),
        store_id=item.store_id,
    )


def to_candidate_listings(items: Iterable[ListingIn]) -> List[CandidateListing]:
    return [to_candidate_listing(i) for i in items]


def to_user_prefs(prefs: Optional[PreferencesIn]) -> Optional[UserPrefs]:
    if prefs is None:
        return None
    return UserPrefs(
        preferred_categories=tuple(p for p in prefs.preferred_categories if p),
        dietary_preferences=tuple(p for p in prefs.dietary_preferences if p),
    )


def to_ranked_listing_out(res: RankedResult) -> RankedListingOut:
    listing = res.listing
    return RankedListingOut(
        product_id=listing.product_id,
        sku=listing.sku,
        title=listing.title,
        brand=listing.brand or "",
        category_id=listing.category_id,
        category_name=listing.category_name,
        store_id=listing.store_id,
        price_cents=listing.price_cents,
        in_stock=res.in_stock,
        score=res.score,
    )


def to_page_response(page: Page) -> PageResponse:
    return PageResponse(
        results=[to_ranked_listing_out(r) for r in page.results],
        total_results=page.total_results,
        current_page=page.current_page,
        total_pages=page.total_pages,
        page_size=page.page_size,
        has_more=page.has_more,
    )


def to_suggest_response(suggestions: Iterable[Suggestion]) -> SuggestResponse:
    return SuggestResponse(
        suggestions=[SuggestionOut(id=s.id, text=s.text, type=s.kind.value) for s in suggestions]
    )
