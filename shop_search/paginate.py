"""Slice an ordered result list into one page plus pagination metadata."""

from __future__ import annotations

from math import ceil
from typing import Optional, Sequence

from . import config
from .pipeline_types import Page, RankedResult


def _clamp_min(value: Optional[int], default: int, minimum: int) -> int:
    if value is None:
        return default
    return max(minimum, int(value))


def paginate(
    results: Sequence[RankedResult],
    page: Optional[int] = None,
    page_size: Optional[int] = None,
    offset: Optional[int] = None,
) -> Page:
    """
    Page- or offset-addressed window into ``results``.

    * page_size defaults to DEFAULT_PAGE_SIZE, page to 1 (1-based)
    * offset, when given, wins over page
    * page / page_size below 1 clamp to 1, negative offset clamps to 0
    * out-of-range windows give an empty page, never an error
    """
    size = _clamp_min(page_size, config.DEFAULT_PAGE_SIZE, 1)
    if offset is not None:
        start = max(0, int(offset))
        current = start // size + 1
    else:
        current = _clamp_min(page, config.DEFAULT_PAGE, 1)
        start = (current - 1) * size

    total = len(results)
    window = tuple(results[start:start + size])

    return Page(
        results=window,
        total_results=total,
        current_page=current,
        total_pages=ceil(total / size),
        page_size=size,
        has_more=(start + len(window)) < total,
        offset=start,
    )
