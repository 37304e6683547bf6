"""Typed containers shared across pipeline modules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class SortMode(str, Enum):
    RELEVANCE = "relevance"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"


class MatchTier(str, Enum):
    """Per-field match tier, highest priority first."""

    EXACT = "exact"
    PREFIX = "prefix"
    CONTAINS = "contains"
    FUZZY = "fuzzy"
    NONE = "none"


class SuggestionKind(str, Enum):
    PRODUCT = "product"
    CATEGORY = "category"
    BRAND = "brand"


@dataclass(frozen=True)
class CandidateListing:
    """One store's priced, stocked offer of one product."""

    product_id: str
    sku: str
    title: str
    price_cents: int
    in_stock: bool = False
    brand: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    category_leaf_id: Optional[str] = None
    category_path_ids: Tuple[str, ...] = ()
    store_id: str = ""

    @property
    def dedupe_key(self) -> str:
        # Listings without a SKU fall back to the product id.
        return self.sku.strip() or self.product_id


@dataclass(frozen=True)
class UserPrefs:
    preferred_categories: Tuple[str, ...] = ()
    # Inert until listings carry dietary tags.
    dietary_preferences: Tuple[str, ...] = ()


@dataclass(frozen=True)
class NormalizedQuery:
    raw: str
    normalized: str
    tokens: Tuple[str, ...]

    @property
    def is_empty(self) -> bool:
        return not self.normalized


@dataclass(frozen=True)
class FieldMatch:
    tier: MatchTier = MatchTier.NONE
    similarity: float = 0.0  # only meaningful for FUZZY


NO_MATCH = FieldMatch()


@dataclass(frozen=True)
class MatchInfo:
    """Tier flags for one (listing, query) pair, consumed by the scorer."""

    title: FieldMatch = NO_MATCH
    brand: FieldMatch = NO_MATCH
    category: FieldMatch = NO_MATCH
    tokens_matched: int = 0
    tokens_total: int = 0
    normalized_title: str = ""

    @property
    def title_starts_with_query(self) -> bool:
        return self.title.tier in (MatchTier.EXACT, MatchTier.PREFIX)


@dataclass(frozen=True)
class RankedResult:
    listing: CandidateListing
    score: float
    in_stock: bool
    title_starts_with_query: bool = False
    normalized_title: str = ""


@dataclass(frozen=True)
class Page:
    results: Tuple[RankedResult, ...]
    total_results: int
    current_page: int
    total_pages: int
    page_size: int
    has_more: bool
    offset: int = 0


@dataclass(frozen=True)
class Suggestion:
    id: str
    text: str
    kind: SuggestionKind = SuggestionKind.PRODUCT
