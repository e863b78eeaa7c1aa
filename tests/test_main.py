"""Tests for the command-line entry point."""

import json

import pytest

from shop_tracker.main import main


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.setenv("SHOP_TRACKER_DB_PATH", str(tmp_path / "cli.db"))
    monkeypatch.setenv("RAW_HTML_CACHE_DIR", str(tmp_path / "raw_html"))
    monkeypatch.setenv("MONTHLY_ANALYSIS_LIMIT", "1")
    monkeypatch.delenv("EXTRACTION_PROFILES_PATH", raising=False)
    # Log lines go to stdout; keep it clean for the JSON assertions.
    monkeypatch.setattr("shop_tracker.main.setup_logging", lambda *args, **kwargs: None)


@pytest.fixture
def product_html(tmp_path, product_page):
    path = tmp_path / "product.html"
    path.write_text(str(product_page._soup), encoding="utf-8")
    return path


class TestMain:
    def test_extract_from_file_and_track(self, product_html, capsys):
        code = main([
            "extract", "https://shop.example.com/product/1729",
            "--html", str(product_html), "--track",
        ])
        assert code == 0
        assert json.loads(capsys.readouterr().out)["name"] == "Mini Portable Blender"

        assert main(["products", "--sort", "sales"]) == 0
        products = json.loads(capsys.readouterr().out)
        assert [p["name"] for p in products] == ["Mini Portable Blender"]

    def test_extract_nothing(self, tmp_path):
        page = tmp_path / "empty.html"
        page.write_text("<p>nothing</p>", encoding="utf-8")
        assert main(["extract", "https://shop.example.com/product/1", "--html", str(page)]) == 1

    def test_usage_consume_until_denied(self, capsys):
        assert main(["usage", "--consume"]) == 0
        assert json.loads(capsys.readouterr().out)["remaining"] == 0
        assert main(["usage", "--consume"]) == 2

    def test_stats_and_clear(self, product_html, capsys):
        main(["extract", "https://shop.example.com/product/1729", "--html", str(product_html), "--track"])
        capsys.readouterr()

        assert main(["stats"]) == 0
        assert json.loads(capsys.readouterr().out)["tracked_products"] == 1

        assert main(["clear"]) == 0
        main(["stats"])
        assert json.loads(capsys.readouterr().out)["tracked_products"] == 0

    def test_alerts_single_sweep(self, capsys):
        assert main(["alerts"]) == 0
        assert json.loads(capsys.readouterr().out) == []
