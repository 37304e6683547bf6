"""Collapse multiple store listings of the same product into one result."""

from __future__ import annotations

from typing import Dict, List, Sequence

from loguru import logger

from .pipeline_types import RankedResult


def _prefer(candidate: RankedResult, current: RankedResult) -> bool:
    """True when ``candidate`` should replace ``current`` for the same SKU."""
    if candidate.in_stock != current.in_stock:
        return candidate.in_stock
    return candidate.listing.price_cents < current.listing.price_cents


def dedupe(results: Sequence[RankedResult]) -> List[RankedResult]:
    """
    Keep exactly one result per SKU.

    In-stock beats out-of-stock, then the lower price wins, otherwise the
    first one seen stays.  The survivor keeps the position where its SKU
    first appeared.
    """
    slots: Dict[str, int] = {}
    out: List[RankedResult] = []
    for res in results:
        key = res.listing.dedupe_key
        idx = slots.get(key)
        if idx is None:
            slots[key] = len(out)
            out.append(res)
        elif _prefer(res, out[idx]):
            out[idx] = res

    if len(out) != len(results):
        logger.debug("Deduplicated {} listings into {} results", len(results), len(out))
    return out
