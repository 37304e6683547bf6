from __future__ import annotations

"""
FastAPI host for the ranking engine.

- POST /search   : rank + paginate a pre-fetched candidate set
- POST /variants : normalised form, tokens and synonym phrasings of a query
- POST /suggest  : order typed search-as-you-type suggestions
- GET  /health

The engine itself does no I/O; candidates arrive in the request body.
An empty query is not an error, it simply yields an empty page.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .config import (
    HealthResponse,
    PageResponse,
    SearchRequest,
    SuggestRequest,
    SuggestResponse,
    VariantsRequest,
    VariantsResponse,
    configure_logging,
)
from .fuzzy import query_typo_variations
from .mapping import to_candidate_listings, to_page_response, to_suggest_response, to_user_prefs
from .normalize import build_query, expand_variants
from .paginate import paginate
from .pipeline import search
from .suggest import build_suggestions


def run_search(req: SearchRequest) -> PageResponse:
    page = search(
        req.query,
        to_candidate_listings(req.listings),
        page=req.page,
        page_size=req.page_size,
        offset=req.offset,
        sort=req.sort,
        prefs=to_user_prefs(req.preferences),
    )
    return to_page_response(page)


# -----------------------
# FastAPI app + startup
# -----------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("shop-search API ready")
    yield


app = FastAPI(title="shop-search", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy")


@app.post("/search", response_model=PageResponse)
def search_endpoint(req: SearchRequest) -> PageResponse:
    try:
        response = run_search(req)
    except Exception as e:
        # Fail open: the storefront treats "search failed" like "no results".
        logger.exception("Search failed for query {!r}: {}", req.query, e)
        response = to_page_response(paginate([], page=req.page, page_size=req.page_size, offset=req.offset))
    logger.info(
        "query={!r} candidates={} total={} page={}/{}",
        req.query,
        len(req.listings),
        response.total_results,
        response.current_page,
        response.total_pages,
    )
    return response


@app.post("/variants", response_model=VariantsResponse)
def variants_endpoint(req: VariantsRequest) -> VariantsResponse:
    nq = build_query(req.query)
    return VariantsResponse(
        normalized=nq.normalized,
        tokens=list(nq.tokens),
        variants=sorted(expand_variants(req.query)),
        typo_variations=query_typo_variations(nq.tokens),
    )


@app.post("/suggest", response_model=SuggestResponse)
def suggest_endpoint(req: SuggestRequest) -> SuggestResponse:
    suggestions = build_suggestions(
        req.query,
        product_titles=[(f"product_{i}", t) for i, t in enumerate(req.product_titles)],
        category_names=[(f"category_{i}", n) for i, n in enumerate(req.category_names)],
        brand_names=req.brand_names,
        limit=req.limit,
    )
    return to_suggest_response(suggestions)
