import json

import pandas as pd

from shop_search.cli import main


def _write_export(path):
    pd.DataFrame(
        {
            "product_id": ["p1", "p2", "p3"],
            "sku": ["A", "B", "C"],
            "title": ["Brown Rice", "Rice", "Mackerel"],
            "price_cents": [400, 250, 300],
            "in_stock": [True, True, False],
        }
    ).to_csv(path, index=False)


def test_rank_json_output(tmp_path, capsys):
    export = tmp_path / "export.csv"
    _write_export(export)

    rc = main(["rank", "--catalog", str(export), "--query", "raice", "--json", "--page-size", "2"])
    assert rc == 0
    data = json.loads(capsys.readouterr().out)
    assert data["total_results"] == 3
    assert data["has_more"] is True
    assert [r["sku"] for r in data["results"]] == ["B", "A"]


def test_rank_table_output(tmp_path, capsys):
    export = tmp_path / "export.csv"
    _write_export(export)

    assert main(["rank", "--catalog", str(export), "--query", "rice", "--sort", "price_asc"]) == 0
    out = capsys.readouterr().out
    assert "3 results" in out
    assert out.index("Rice") < out.index("Mackerel")


def test_variants_command(capsys):
    assert main(["variants", "--query", "raice"]) == 0
    out = capsys.readouterr().out
    assert "normalized: rice" in out
    assert "- rice" in out


def test_variants_command_lists_typos(capsys):
    assert main(["variants", "--query", "salt"]) == 0
    out = capsys.readouterr().out
    assert "typos:" in out
    assert "aalt" in out
