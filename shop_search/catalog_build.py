from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
from loguru import logger

from .config import CATALOG_SNAPSHOT_PATH
from .normalize import basic_clean
from .pipeline_types import CandidateListing


# ---------------------------
# Column detection / standardization
# ---------------------------

# Store exports name their columns differently, so we accept several variants.
COLUMN_CANDIDATES: Dict[str, List[str]] = {
    "product_id": ["product_id", "productId", "$id", "id"],
    "sku": ["sku", "SKU", "upc"],
    "title": ["title", "Title", "name", "Name", "product_name"],
    "brand": ["brand", "Brand", "brand_name"],
    "category_id": ["category_id", "categoryId"],
    "category_name": ["category_name", "category", "Category"],
    "category_leaf_id": ["category_leaf_id", "leaf_category_id"],
    "category_path_ids": ["category_path_ids", "category_path"],
    "in_stock": ["in_stock", "inStock", "available", "stock"],
    "price_cents": ["price_cents", "price_jmd_cents", "priceJmdCents"],
    "price_major": ["price", "Price", "price_jmd"],
    "store_id": ["store_id", "store_location_id", "store"],
}

REQUIRED_COLUMNS = ["product_id", "title"]

_TRUE_STRINGS = {"1", "true", "yes", "y", "t", "in stock", "instock"}


def _standardize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Rename columns from a raw export to the canonical internal schema.
    """
    col_map: Dict[str, str] = {}
    lower_to_original = {str(c).lower(): c for c in df.columns}

    for canon, candidates in COLUMN_CANDIDATES.items():
        for candidate in candidates:
            if candidate in df.columns:
                col_map[candidate] = canon
                break
            cand_lower = candidate.lower()
            if cand_lower in lower_to_original:
                col_map[lower_to_original[cand_lower]] = canon
                break

    logger.info("Standardizing listing columns with map: {}", col_map)
    df_std = df.rename(columns=col_map)

    missing = [c for c in REQUIRED_COLUMNS if c not in df_std.columns]
    if missing:
        raise KeyError(f"Listing export is missing required columns: {missing}")
    if "price_cents" not in df_std.columns and "price_major" not in df_std.columns:
        raise KeyError("Listing export needs a 'price_cents' or 'price' column.")
    return df_std


# ---------------------------
# Field parsing helpers
# ---------------------------

def _is_missing(value) -> bool:
    if value is None:
        return True
    if pd.api.types.is_list_like(value):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def parse_bool(value) -> bool:
    if _is_missing(value):
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in _TRUE_STRINGS


def parse_price_cents(cents, major=None) -> int:
    """
    Integer minor-currency units.  A 'price' column in major units
    (e.g. 150.50) is converted; unparseable values become 0.
    """
    if not _is_missing(cents):
        try:
            return max(0, int(round(float(cents))))
        except (TypeError, ValueError):
            pass
    if not _is_missing(major):
        try:
            text = str(major).replace(",", "").replace("$", "").strip()
            return max(0, int(round(float(text) * 100)))
        except (TypeError, ValueError):
            pass
    return 0


def parse_id_list(value) -> List[str]:
    """'a|b', 'a, b', ['a', 'b'] -> ['a', 'b']"""
    if _is_missing(value):
        return []
    if pd.api.types.is_list_like(value):
        items = list(value)
        return [str(v).strip() for v in items if str(v).strip()]
    text = str(value).strip().strip("[]")
    sep = "|" if "|" in text else ","
    return [p.strip().strip("'\"") for p in text.split(sep) if p.strip().strip("'\"")]


def _optional_text(value) -> Optional[str]:
    if _is_missing(value):
        return None
    text = basic_clean(str(value))
    return text or None


def normalize_listings_df(df_raw: pd.DataFrame) -> pd.DataFrame:
    """
    Standardize a raw listing export into the canonical frame:

    product_id, sku, title, brand, category_id, category_name,
    category_leaf_id, category_path_ids, in_stock, price_cents, store_id
    """
    df = _standardize_columns(df_raw.copy())

    out = pd.DataFrame()
    out["product_id"] = df["product_id"].apply(lambda v: "" if _is_missing(v) else str(v).strip())
    out["sku"] = df["sku"].fillna("").astype(str).str.strip() if "sku" in df.columns else ""
    out["title"] = df["title"].apply(lambda v: "" if _is_missing(v) else basic_clean(v))
    for col in ("brand", "category_id", "category_name", "category_leaf_id", "store_id"):
        # object dtype keeps None; string dtypes would turn it into NaN
        values = [_optional_text(v) for v in df[col]] if col in df.columns else [None] * len(df)
        out[col] = pd.Series(values, index=df.index, dtype=object)
    out["category_path_ids"] = (
        df["category_path_ids"].apply(parse_id_list)
        if "category_path_ids" in df.columns
        else pd.Series([[] for _ in range(len(df))], index=df.index, dtype=object)
    )
    out["in_stock"] = df["in_stock"].apply(parse_bool) if "in_stock" in df.columns else False

    cents = df["price_cents"] if "price_cents" in df.columns else pd.Series([None] * len(df), index=df.index)
    major = df["price_major"] if "price_major" in df.columns else pd.Series([None] * len(df), index=df.index)
    out["price_cents"] = [parse_price_cents(c, m) for c, m in zip(cents, major)]

    before = len(out)
    out = out[out["title"].astype(bool) & out["product_id"].astype(bool)].reset_index(drop=True)
    if len(out) < before:
        logger.warning("Dropped {} listings without a title or product id", before - len(out))

    logger.info("Listing normalization complete. Final rows: {}", len(out))
    return out


def listings_from_df(df: pd.DataFrame) -> List[CandidateListing]:
    listings: List[CandidateListing] = []
    for row in df.to_dict(orient="records"):
        listings.append(
            CandidateListing(
                product_id=str(row["product_id"]),
                sku=_optional_text(row.get("sku")) or "",
                title=str(row["title"]),
                price_cents=int(row["price_cents"]),
                in_stock=bool(row["in_stock"]),
                brand=_optional_text(row.get("brand")),
                category_id=_optional_text(row.get("category_id")),
                category_name=_optional_text(row.get("category_name")),
                category_leaf_id=_optional_text(row.get("category_leaf_id")),
                category_path_ids=tuple(parse_id_list(row.get("category_path_ids"))),
                store_id=_optional_text(row.get("store_id")) or "",
            )
        )
    return listings


# ---------------------------
# IO helpers
# ---------------------------

def load_raw_listings(path: Path) -> pd.DataFrame:
    """
    Load a raw listing export (.csv, .json, .parquet, .xlsx).
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Listing export not found: {path}")

    ext = path.suffix.lower()
    logger.info("Loading raw listings from {}", path)
    if ext == ".parquet":
        df = pd.read_parquet(path)
    elif ext == ".json":
        df = pd.read_json(path)
    elif ext == ".xlsx":
        df = pd.read_excel(path)
    else:
        df = pd.read_csv(path, encoding="utf-8")
    logger.info("Loaded {} rows from raw listings", len(df))
    return df


def build_listing_snapshot(raw_path: Path, output_path: Path = CATALOG_SNAPSHOT_PATH) -> Path:
    """
    End-to-end: load raw export -> normalize -> write Parquet snapshot.
    """
    df_norm = normalize_listings_df(load_raw_listings(raw_path))
    logger.info("Writing listing snapshot to {}", output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df_norm.to_parquet(output_path, index=False)
    return output_path


def load_listings(path: Optional[Path] = None) -> List[CandidateListing]:
    """
    Load listings from a snapshot or raw export and convert them to
    CandidateListing objects ready for ranking.
    """
    path = Path(path) if path is not None else CATALOG_SNAPSHOT_PATH
    df = normalize_listings_df(load_raw_listings(path))
    return listings_from_df(df)
