"""
Relevance scoring.

Tier weights stack across fields: a listing can collect a title tier, token
coverage, a brand tier and a category tier, then small preference boosts.
Additions always happen in the same order so identical inputs give
bit-identical floats.
"""

from __future__ import annotations

from typing import Optional

from . import config
from .normalize import normalize_text
from .pipeline_types import CandidateListing, MatchInfo, MatchTier, UserPrefs

W = config.RANKING_WEIGHTS


def short_title_bonus(title: str, factor: float, cap: float) -> float:
    """Reward shorter (more specific) titles without overpowering tier weights."""
    return min(cap, max(0, config.SHORT_TITLE_PIVOT - len(title)) * factor)


def _title_score(listing: CandidateListing, info: MatchInfo) -> float:
    tier = info.title.tier
    if tier is MatchTier.EXACT:
        return W["exact_title"] + short_title_bonus(
            listing.title, config.EXACT_TITLE_BONUS_FACTOR, config.EXACT_TITLE_BONUS_CAP
        )
    if tier is MatchTier.PREFIX:
        return W["title_starts_with"] + short_title_bonus(
            listing.title, config.PREFIX_TITLE_BONUS_FACTOR, config.PREFIX_TITLE_BONUS_CAP
        )
    if tier is MatchTier.CONTAINS:
        return W["title_contains"]
    if tier is MatchTier.FUZZY:
        return W["title_fuzzy"] * info.title.similarity
    return 0.0


def _coverage_score(info: MatchInfo) -> float:
    if info.tokens_total <= 0 or info.tokens_matched <= 0:
        return 0.0
    return W["token_coverage_title_max"] * (info.tokens_matched / info.tokens_total)


def _brand_score(info: MatchInfo) -> float:
    tier = info.brand.tier
    if tier is MatchTier.EXACT:
        return W["brand_exact"]
    if tier is MatchTier.PREFIX:
        return W["brand_starts_with"]
    if tier is MatchTier.CONTAINS:
        return W["brand_contains"]
    return 0.0


def _category_score(info: MatchInfo) -> float:
    tier = info.category.tier
    if tier is MatchTier.EXACT:
        return W["category_exact"]
    if tier in (MatchTier.PREFIX, MatchTier.CONTAINS):
        return W["category_contains"]
    return 0.0


def category_preference_boost(listing: CandidateListing, prefs: Optional[UserPrefs]) -> float:
    if prefs is None or not prefs.preferred_categories:
        return 0.0

    ids = {cid for cid in (listing.category_id, listing.category_leaf_id) if cid}
    name_norm = normalize_text(listing.category_name or "")
    for pref in prefs.preferred_categories:
        if pref in ids:
            return W["preference_category_boost"]
        if name_norm and normalize_text(pref) == name_norm:
            return W["preference_category_boost"]
    return 0.0


def dietary_preference_boost(listing: CandidateListing, prefs: Optional[UserPrefs]) -> float:
    """
    Hook for W["preference_dietary_boost"].  Listings carry no dietary
    tags, so there is nothing to compare the preferences against and the
    boost is always 0.
    """
    return 0.0


def frequently_searched_boost(listing: CandidateListing) -> float:
    # W["frequently_searched"] is 0; there is no search analytics input yet.
    return 0.0


def score(listing: CandidateListing, info: MatchInfo, prefs: Optional[UserPrefs] = None) -> float:
    total = 0.0
    total += _title_score(listing, info)
    total += _coverage_score(info)
    total += _brand_score(info)
    total += _category_score(info)
    total += category_preference_boost(listing, prefs)
    total += dietary_preference_boost(listing, prefs)
    total += frequently_searched_boost(listing)
    return total
