import pandas as pd
import pytest

from shop_search.catalog_build import (
    build_listing_snapshot,
    listings_from_df,
    load_listings,
    load_raw_listings,
    normalize_listings_df,
    parse_bool,
    parse_id_list,
    parse_price_cents,
)


def _raw_df():
    return pd.DataFrame(
        {
            "productId": ["p1", "p2", "p3", None],
            "SKU": ["A1", "", "C3", "D4"],
            "Name": ["<b>Grace</b> Corned Beef 340g", "Lasco Food Drink", "", "Orphan"],
            "Brand": ["Grace", None, "Lasco", "X"],
            "category": ["Canned Meat", "Beverages", "Dry Goods", "Misc"],
            "inStock": ["yes", "no", "true", "1"],
            "price": ["1,250.50", "300", "99", "1"],
            "category_path": ["root|meat", "root, drinks", None, ""],
            "store": ["s1", "s1", "s2", "s2"],
        }
    )


def test_parse_bool():
    assert parse_bool("Yes") is True
    assert parse_bool("in stock") is True
    assert parse_bool(1) is True
    assert parse_bool("no") is False
    assert parse_bool(None) is False
    assert parse_bool(float("nan")) is False


def test_parse_price_cents():
    assert parse_price_cents(1999) == 1999
    assert parse_price_cents(None, "$12.50") == 1250
    assert parse_price_cents(float("nan"), "1,000") == 100000
    assert parse_price_cents("abc", "n/a") == 0
    assert parse_price_cents(-5) == 0


def test_parse_id_list():
    assert parse_id_list("a|b") == ["a", "b"]
    assert parse_id_list("['a', 'b']") == ["a", "b"]
    assert parse_id_list(["a", " ", "b"]) == ["a", "b"]
    assert parse_id_list(None) == []


def test_normalize_listings_df_standardizes_and_drops_bad_rows():
    out = normalize_listings_df(_raw_df())
    # row without title and row without product id are dropped
    assert list(out["product_id"]) == ["p1", "p2"]
    first = out.iloc[0]
    assert first["title"] == "Grace Corned Beef 340g"
    assert first["brand"] == "Grace"
    assert first["category_name"] == "Canned Meat"
    assert first["price_cents"] == 125050
    assert bool(first["in_stock"]) is True
    assert list(first["category_path_ids"]) == ["root", "meat"]
    assert out.iloc[1]["brand"] is None
    assert out.iloc[1]["sku"] == ""


def test_missing_required_columns_raise():
    with pytest.raises(KeyError):
        normalize_listings_df(pd.DataFrame({"title": ["x"], "price": [1]}))
    with pytest.raises(KeyError):
        normalize_listings_df(pd.DataFrame({"product_id": ["p"], "title": ["x"]}))


def test_listings_from_df():
    listings = listings_from_df(normalize_listings_df(_raw_df()))
    assert len(listings) == 2
    beef, drink = listings
    assert beef.sku == "A1"
    assert beef.category_path_ids == ("root", "meat")
    assert beef.store_id == "s1"
    assert drink.dedupe_key == "p2"
    assert drink.brand is None
    assert drink.in_stock is False


def test_load_raw_listings_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_raw_listings(tmp_path / "nope.csv")


def test_snapshot_roundtrip(tmp_path):
    raw = tmp_path / "export.csv"
    _raw_df().to_csv(raw, index=False)
    out = build_listing_snapshot(raw, tmp_path / "snap" / "listings.parquet")
    assert out.exists()

    listings = load_listings(out)
    assert [l.product_id for l in listings] == ["p1", "p2"]
    assert listings[0].price_cents == 125050
    assert listings[0].category_path_ids == ("root", "meat")


def test_blank_optional_cells_do_not_become_nan_strings(tmp_path):
    raw = tmp_path / "export.csv"
    raw.write_text(
        "product_id,sku,title,brand,store_id,price_cents\n"
        "p1,A1,Grace Corned Beef,Grace,st1,500\n"
        "p2,,Lasco Food Drink,,,300\n",
        encoding="utf-8",
    )
    listings = load_listings(raw)
    assert [(l.store_id, l.brand) for l in listings] == [("st1", "Grace"), ("", None)]
    assert listings[1].sku == ""
    assert listings[1].dedupe_key == "p2"

    out = normalize_listings_df(load_raw_listings(raw))
    assert out["store_id"].iloc[1] is None
    assert out["brand"].iloc[1] is None


def test_load_xlsx_export(tmp_path):
    raw = tmp_path / "export.xlsx"
    _raw_df().to_excel(raw, index=False)
    listings = load_listings(raw)
    assert [l.product_id for l in listings] == ["p1", "p2"]
    assert listings[0].price_cents == 125050
