"""End-to-end tests for the click CLI against a temporary catalog file."""

import json
import shutil
from pathlib import Path

import pytest
from click.testing import CliRunner

from pricing_engine.infrastructure.cli.main import cli

SEED = Path(__file__).resolve().parents[2] / "data" / "catalog.json"


@pytest.fixture
def catalog(tmp_path, monkeypatch):
    path = tmp_path / "catalog.json"
    shutil.copy(SEED, path)
    monkeypatch.setenv("PRICING_CATALOG_FILE", str(path))
    monkeypatch.setenv("PRICING_LOG_LEVEL", "ERROR")
    return path


def _run(*args):
    return CliRunner().invoke(cli, list(args))


def _prices(path):
    return {item["id"]: item["price"] for item in json.loads(path.read_text(encoding="utf-8"))}


class TestProductCommands:

    def test_list_hides_margin_from_customers(self, catalog):
        result = _run("product", "list")
        assert result.exit_code == 0
        assert "Basmati Rice 5kg" in result.output
        assert "Margin %" not in result.output

    def test_list_admin(self, catalog):
        result = _run("product", "list", "--role", "admin", "--search", "tea")
        assert result.exit_code == 0
        assert "Green Tea" in result.output
        assert "Basmati" not in result.output
        assert "Margin %" in result.output

    def test_add(self, catalog):
        result = _run(
            "product", "add", "--name", "Lentils", "--price", "180",
            "--stock", "12", "--category", "Groceries", "--purchase-price", "150",
        )
        assert result.exit_code == 0, result.output
        assert "Product #4 'Lentils' added at 180.00" in result.output

    def test_add_rejected_by_profit_rules(self, catalog):
        result = _run("product", "add", "--name", "X", "--price", "50", "--stock", "1", "--purchase-price", "48")
        assert result.exit_code == 1
        assert "at least 5%" in result.output

    def test_show_by_barcode(self, catalog):
        result = _run("product", "show", "--barcode", "8901234567892", "--role", "admin")
        assert result.exit_code == 0
        assert "Green Tea 100 bags" in result.output
        assert "purchase_price" in result.output

    def test_show_needs_one_key(self, catalog):
        assert _run("product", "show").exit_code == 2

    def test_update_then_history(self, catalog):
        result = _run("product", "update", "--id", "1", "--price", "700")
        assert result.exit_code == 0, result.output
        assert "Product #1 updated: price 700.00" in result.output

        history = _run("product", "history", "--id", "1")
        assert history.exit_code == 0
        assert "650.00" in history.output
        assert "700.00" in history.output

    def test_history_empty(self, catalog):
        result = _run("product", "history", "--id", "3")
        assert "No price changes recorded." in result.output

    def test_delete_missing(self, catalog):
        result = _run("product", "delete", "--id", "99")
        assert result.exit_code == 1
        assert "Product #99 not found" in result.output


class TestPriceCommands:

    def test_check(self, catalog):
        assert "Pricing is valid." in _run("price", "check", "--price", "120", "--purchase-price", "100").output
        bad = _run("price", "check", "--price", "50", "--purchase-price", "48")
        assert bad.exit_code == 1

    def test_bulk_percentage_on_category(self, catalog):
        result = _run("price", "bulk", "--strategy", "percentage", "--value", "10", "--category", "Beverages")
        assert result.exit_code == 0, result.output
        assert "1 of 1 products updated" in result.output
        assert _prices(catalog)[3] == "352.00"
        assert _prices(catalog)[1] == "650.00"

    def test_bulk_invalid_request(self, catalog):
        result = _run("price", "bulk", "--strategy", "percentage")
        assert result.exit_code == 1
        assert "Update value is required" in result.output

    def test_discount_skips_existing(self, catalog):
        result = _run("price", "discount", "--value", "5", "--category", "Groceries")
        assert result.exit_code == 0, result.output
        assert "1 skipped with an existing discount" in result.output
        assert _prices(catalog)[1] == "617.50"

    def test_preview_does_not_write(self, catalog):
        before = catalog.read_text(encoding="utf-8")
        result = _run("price", "preview", "--strategy", "range", "--min-price", "300", "--max-price", "400")
        assert result.exit_code == 0
        assert "Basmati Rice 5kg" in result.output
        assert catalog.read_text(encoding="utf-8") == before

    def test_partial(self, catalog):
        result = _run("price", "partial", "--item", "1:-5", "--item", "3:330:")
        assert result.exit_code == 0, result.output
        assert "1 of 2 updates applied." in result.output
        assert "#1: Base price must be greater than 0" in result.output

    def test_partial_bad_format(self, catalog):
        assert _run("price", "partial", "--item", "oops").exit_code == 2

    def test_margins(self, catalog):
        result = _run("price", "margins")
        assert result.exit_code == 0
        assert "excellent" in result.output

    def test_offers(self, catalog):
        result = _run("price", "offers", "--id", "2")
        assert result.exit_code == 0, result.output
        assert "No blocking conflicts." in result.output
