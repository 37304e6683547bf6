# shop_search/cli.py
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import List, Optional

from loguru import logger

from . import config
from .catalog_build import build_listing_snapshot, load_listings
from .fuzzy import query_typo_variations
from .normalize import build_query, expand_variants
from .pipeline import search
from .pipeline_types import Page, SortMode, UserPrefs


def _format_price(cents: int) -> str:
    return f"{cents / 100:,.2f}"


def page_to_dict(page: Page) -> dict:
    return {
        "total_results": page.total_results,
        "current_page": page.current_page,
        "total_pages": page.total_pages,
        "page_size": page.page_size,
        "has_more": page.has_more,
        "results": [
            {
                "sku": r.listing.sku,
                "title": r.listing.title,
                "brand": r.listing.brand or "",
                "price_cents": r.listing.price_cents,
                "in_stock": r.in_stock,
                "store_id": r.listing.store_id,
                "score": round(r.score, 4),
            }
            for r in page.results
        ],
    }


def print_page(page: Page) -> None:
    print(
        f"{page.total_results} results | page {page.current_page}/{page.total_pages}"
        f" | has_more={page.has_more}"
    )
    for rank, r in enumerate(page.results, start=page.offset + 1):
        stock = "in stock" if r.in_stock else "out"
        print(
            f"{rank:>4}. {r.score:9.2f}  {r.listing.title[:60]:<60}"
            f"  {_format_price(r.listing.price_cents):>10}  {stock}"
        )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="shop-search",
        description="Rank a listing export for a shopping query.",
    )
    sub = ap.add_subparsers(dest="command", required=True)

    rank = sub.add_parser("rank", help="rank listings for a query and print one page")
    rank.add_argument("--catalog", type=Path, default=None,
                      help="listing export (.csv/.json/.parquet/.xlsx); defaults to the snapshot")
    rank.add_argument("--query", required=True)
    rank.add_argument("--sort", choices=[m.value for m in SortMode], default=SortMode.RELEVANCE.value)
    rank.add_argument("--page", type=int, default=None)
    rank.add_argument("--page-size", type=int, default=None)
    rank.add_argument("--offset", type=int, default=None)
    rank.add_argument("--prefer-category", action="append", default=[],
                      help="preferred category id or name (repeatable)")
    rank.add_argument("--json", action="store_true", help="print the page as JSON")

    variants = sub.add_parser("variants", help="show normalisation and synonym phrasings")
    variants.add_argument("--query", required=True)

    snap = sub.add_parser("snapshot", help="normalise an export into the Parquet snapshot")
    snap.add_argument("--raw", type=Path, required=True)
    snap.add_argument("--out", type=Path, default=config.CATALOG_SNAPSHOT_PATH)

    ap.add_argument("--log-level", default=None)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config.configure_logging(args.log_level)

    if args.command == "variants":
        nq = build_query(args.query)
        print(f"normalized: {nq.normalized}")
        print(f"tokens:     {list(nq.tokens)}")
        for v in sorted(expand_variants(args.query)):
            print(f"  - {v}")
        typos = query_typo_variations(nq.tokens)
        if typos:
            print(f"typos:      {', '.join(typos)}")
        return 0

    if args.command == "snapshot":
        out = build_listing_snapshot(args.raw, args.out)
        print(f"Snapshot written to {out}")
        return 0

    listings = load_listings(args.catalog)
    prefs = UserPrefs(preferred_categories=tuple(args.prefer_category)) if args.prefer_category else None
    page = search(
        args.query,
        listings,
        page=args.page,
        page_size=args.page_size,
        offset=args.offset,
        sort=args.sort,
        prefs=prefs,
    )
    logger.debug("Ranked {} listings for {!r}", len(listings), args.query)

    if args.json:
        print(json.dumps(page_to_dict(page), indent=2))
    else:
        print_page(page)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
