from __future__ import annotations

"""
End-to-end ranking pipeline.

    raw query -> normalize / tokenize
              -> per listing: classify -> score
              -> dedupe by SKU -> sort -> paginate

Everything here is a pure function of its arguments.  The only place that
talks to the outside world is ``search_with_retrieval``, and even there the
retrieval call is a callable supplied by the host.
"""

from typing import Callable, List, Optional, Sequence, Union

from loguru import logger

from . import config
from .dedupe import dedupe
from .matching import classify
from .normalize import build_query, normalize_text
from .paginate import paginate
from .pipeline_types import (
    CandidateListing,
    NormalizedQuery,
    Page,
    RankedResult,
    SortMode,
    UserPrefs,
)
from .scoring import score
from .sorting import coerce_sort_mode, sort_results

RetrievalFn = Callable[[str], Sequence[CandidateListing]]


def _cap_candidates(listings: Sequence[CandidateListing]) -> Sequence[CandidateListing]:
    if len(listings) > config.MAX_CANDIDATES:
        logger.warning(
            "Candidate set of {} exceeds MAX_CANDIDATES={}; scoring the first {} only",
            len(listings),
            config.MAX_CANDIDATES,
            config.MAX_CANDIDATES,
        )
        return listings[: config.MAX_CANDIDATES]
    return listings


def score_listing(
    listing: CandidateListing,
    query: NormalizedQuery,
    prefs: Optional[UserPrefs] = None,
) -> RankedResult:
    title_norm = normalize_text(listing.title)
    info = classify(listing, query.normalized, query.tokens, title_norm=title_norm)
    return RankedResult(
        listing=listing,
        score=score(listing, info, prefs),
        in_stock=bool(listing.in_stock),
        title_starts_with_query=info.title_starts_with_query,
        normalized_title=title_norm,
    )


def rank_results(
    query: str,
    listings: Sequence[CandidateListing],
    prefs: Optional[UserPrefs] = None,
    sort: Union[SortMode, str, None] = SortMode.RELEVANCE,
    limit: Optional[int] = None,
) -> List[RankedResult]:
    """
    Score, de-duplicate and order ``listings`` for ``query``.

    An empty / whitespace-only query yields an empty list.  ``limit`` caps
    the flat result list (None keeps everything).
    """
    mode = coerce_sort_mode(sort)
    nq = build_query(query)
    if nq.is_empty or not listings:
        return []

    candidates = _cap_candidates(listings)
    scored = [score_listing(listing, nq, prefs) for listing in candidates]
    unique = dedupe(scored)
    ordered = sort_results(unique, mode)

    logger.debug(
        "Ranked query {!r} (normalised {!r}): {} candidates -> {} results, sort={}",
        nq.raw,
        nq.normalized,
        len(candidates),
        len(ordered),
        mode.value,
    )

    if limit is not None:
        ordered = ordered[: max(0, int(limit))]
    return ordered


def search(
    query: str,
    listings: Sequence[CandidateListing],
    page: Optional[int] = None,
    page_size: Optional[int] = None,
    offset: Optional[int] = None,
    sort: Union[SortMode, str, None] = SortMode.RELEVANCE,
    prefs: Optional[UserPrefs] = None,
) -> Page:
    ranked = rank_results(query, listings, prefs=prefs, sort=sort)
    return paginate(ranked, page=page, page_size=page_size, offset=offset)


def search_with_retrieval(
    query: str,
    fetch_candidates: RetrievalFn,
    page: Optional[int] = None,
    page_size: Optional[int] = None,
    offset: Optional[int] = None,
    sort: Union[SortMode, str, None] = SortMode.RELEVANCE,
    prefs: Optional[UserPrefs] = None,
) -> Page:
    """
    Run the host's retrieval callable, then rank and paginate.

    Retrieval failures are logged and treated as "no candidates": callers
    see the same empty page for "no results" and "search failed".
    """
    listings: Sequence[CandidateListing] = []
    if query and query.strip():
        try:
            listings = list(fetch_candidates(query))
        except Exception as e:
            logger.warning("Candidate retrieval failed for {!r}; returning empty page: {}", query, e)
            listings = []
    return search(
        query,
        listings,
        page=page,
        page_size=page_size,
        offset=offset,
        sort=sort,
        prefs=prefs,
    )
