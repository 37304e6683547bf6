from __future__ import annotations

import os
import sys
from pathlib import Path
from types import MappingProxyType
from typing import List, Literal, Optional

from loguru import logger
from pydantic import BaseModel, Field


# ---------------------------
# Paths
# ---------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DATA_DIR = PROJECT_ROOT / "data"
CATALOG_SNAPSHOT_PATH = DATA_DIR / "listings.parquet"


# ---------------------------
# Text processing
# ---------------------------

MAX_INPUT_CHARS = 2_000   # raw query / title cap before normalisation
MIN_TOKEN_LEN = 2


# ---------------------------
# Fuzzy matching
# ---------------------------

FUZZY_SIMILARITY_THRESHOLD = 0.75
FUZZY_MIN_TOKEN_LEN = 3
FUZZY_MAX_EDITS_SHORT = 1     # tokens of length 3-4
FUZZY_MAX_EDITS_LONG = 2      # tokens of length >= 5
FUZZY_LONG_TOKEN_LEN = 5
FUZZY_MIN_TOKEN_COVERAGE = 0.7  # share of query tokens that need a fuzzy partner


# ---------------------------
# Ranking weights
# ---------------------------

RANKING_WEIGHTS = MappingProxyType(
    {
        "exact_title": 1000.0,
        "title_starts_with": 700.0,
        "title_contains": 450.0,
        "title_fuzzy": 200.0,             # multiplied by similarity ratio
        "token_coverage_title_max": 300.0,
        "brand_exact": 350.0,
        "brand_starts_with": 250.0,
        "brand_contains": 150.0,
        "category_exact": 200.0,
        "category_contains": 100.0,
        "frequently_searched": 0.0,       # extension point, no analytics behind it
        "preference_category_boost": 60.0,
        "preference_dietary_boost": 40.0,
    }
)

# Short-title bonus: min(cap, max(0, pivot - len(title)) * factor)
SHORT_TITLE_PIVOT = 50
EXACT_TITLE_BONUS_FACTOR = 0.1
EXACT_TITLE_BONUS_CAP = 15.0
PREFIX_TITLE_BONUS_FACTOR = 0.05
PREFIX_TITLE_BONUS_CAP = 10.0


# ---------------------------
# Result policy
# ---------------------------

DEFAULT_PAGE_SIZE = 50
DEFAULT_PAGE = 1

# Upper bound on listings classified and scored per call.
MAX_CANDIDATES = int(os.getenv("SHOP_SEARCH_MAX_CANDIDATES", "20000"))

# Suggestion quotas (share of the requested limit per kind)
SUGGESTION_DEFAULT_LIMIT = 10
SUGGESTION_PRODUCT_SHARE = 0.6
SUGGESTION_CATEGORY_SHARE = 0.3
SUGGESTION_BRAND_SHARE = 0.1


# ---------------------------
# Logging / observability
# ---------------------------

LOG_LEVEL = os.getenv("SHOP_SEARCH_LOG_LEVEL", "INFO").upper()


def configure_logging(level: Optional[str] = None) -> None:
    """
    Replace loguru's default sink with a stderr sink at LOG_LEVEL.
    Called by the hosts (API startup, CLI), never on import.
    """
    logger.remove()
    logger.add(sys.stderr, level=(level or LOG_LEVEL).upper())


# ---------------------------
# Pydantic models shared around the app
# ---------------------------

SortModeName = Literal["relevance", "price_asc", "price_desc"]


class ListingIn(BaseModel):
    """
    One store's offer of one product, as handed over by the retrieval step.
    """

    product_id: str
    sku: str = ""
    title: str
    brand: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    category_leaf_id: Optional[str] = None
    category_path_ids: List[str] = Field(default_factory=list)
    in_stock: bool = False
    price_cents: int = Field(ge=0)
    store_id: str = ""


class PreferencesIn(BaseModel):
    preferred_categories: List[str] = Field(default_factory=list)
    dietary_preferences: List[str] = Field(default_factory=list)


class SearchRequest(BaseModel):
    """
    Request body for POST /search.

    Pagination values are deliberately unconstrained here: out-of-range
    numbers are clamped by the paginator rather than rejected.
    """

    query: str = ""
    listings: List[ListingIn] = Field(default_factory=list)
    page: Optional[int] = None
    page_size: Optional[int] = None
    offset: Optional[int] = None
    sort: SortModeName = "relevance"
    preferences: Optional[PreferencesIn] = None


class RankedListingOut(BaseModel):
    product_id: str
    sku: str
    title: str
    brand: str
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    store_id: str
    price_cents: int
    in_stock: bool
    score: float = Field(ge=0)


class PageResponse(BaseModel):
    """
    Response body for POST /search.
    """

    results: List[RankedListingOut]
    total_results: int = Field(ge=0)
    current_page: int = Field(ge=1)
    total_pages: int = Field(ge=0)
    page_size: int = Field(ge=1)
    has_more: bool


class VariantsRequest(BaseModel):
    query: str


class VariantsResponse(BaseModel):
    normalized: str
    tokens: List[str]
    variants: List[str]
    # single-typo spellings of the tokens, for retrieval-side recall
    typo_variations: List[str] = Field(default_factory=list)


class SuggestRequest(BaseModel):
    query: str
    product_titles: List[str] = Field(default_factory=list)
    category_names: List[str] = Field(default_factory=list)
    brand_names: List[str] = Field(default_factory=list)
    limit: int = Field(default=SUGGESTION_DEFAULT_LIMIT, ge=1, le=50)


class SuggestionOut(BaseModel):
    id: str
    text: str
    type: Literal["product", "category", "brand"]


class SuggestResponse(BaseModel):
    suggestions: List[SuggestionOut]


class HealthResponse(BaseModel):
    """
    Response body for GET /health.
    """

    status: str
