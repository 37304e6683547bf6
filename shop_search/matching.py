"""
Match classification for one candidate listing against a query.

Per field (title, brand, category name) exactly one tier fires, in the
priority exact > prefix > contains > fuzzy.  Fuzzy is a fallback: it is
only evaluated when none of the literal tiers matched.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .fuzzy import field_fuzzy_similarity
from .normalize import normalize_text
from .pipeline_types import CandidateListing, FieldMatch, MatchInfo, MatchTier, NO_MATCH


def classify_field(field_norm: str, query_norm: str, query_tokens: Sequence[str]) -> FieldMatch:
    if not query_norm or not field_norm:
        return NO_MATCH

    if field_norm == query_norm:
        return FieldMatch(MatchTier.EXACT)
    if field_norm.startswith(query_norm):
        return FieldMatch(MatchTier.PREFIX)
    if query_norm in field_norm:
        return FieldMatch(MatchTier.CONTAINS)

    fired, ratio = field_fuzzy_similarity(field_norm, query_tokens)
    if fired:
        return FieldMatch(MatchTier.FUZZY, similarity=ratio)
    return NO_MATCH


def token_coverage(title_norm: str, query_tokens: Sequence[str]) -> int:
    """Number of query tokens found as substrings of the normalised title."""
    return sum(1 for tok in query_tokens if tok in title_norm)


def classify(
    listing: CandidateListing,
    normalized_query: str,
    query_tokens: Sequence[str],
    title_norm: Optional[str] = None,
) -> MatchInfo:
    """
    Build the MatchInfo for ``listing``.

    ``normalized_query`` must already be the output of normalize_text;
    ``title_norm`` may be passed when the caller has it cached.
    """
    if title_norm is None:
        title_norm = normalize_text(listing.title)
    brand_norm = normalize_text(listing.brand or "")
    category_norm = normalize_text(listing.category_name or "")

    return MatchInfo(
        title=classify_field(title_norm, normalized_query, query_tokens),
        brand=classify_field(brand_norm, normalized_query, query_tokens),
        category=classify_field(category_norm, normalized_query, query_tokens),
        tokens_matched=token_coverage(title_norm, query_tokens) if normalized_query else 0,
        tokens_total=len(query_tokens),
        normalized_title=title_norm,
    )
