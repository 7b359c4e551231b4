"""Integration tests for the CreateProduct use case.

Uses the in-memory fake store, no file I/O.
"""

from decimal import Decimal

import pytest

from pricing_engine.application.create_product import CreateProductHandler
from pricing_engine.application.dto import ProductDraft
from pricing_engine.domain.exceptions import FieldError, RuleError
from tests.fakes import FakeCatalogStore, make_product


def _setup(products=None) -> tuple[CreateProductHandler, FakeCatalogStore]:
    store = FakeCatalogStore(products)
    return CreateProductHandler(store), store


class TestCreateProductHappyPath:

    def test_creates_product(self):
        handler, store = _setup()
        dto = handler.handle(
            ProductDraft(name=" Rice 5kg ", price="650", stock=40, category="Groceries", purchase_price="520")
        )
        assert dto.id == 1
        assert dto.name == "Rice 5kg"
        assert dto.profit_margin == Decimal("25.00")
        assert dto.min_selling_price == Decimal("572.00")
        assert store.get(1).price == Decimal("650")

    def test_next_id_is_max_plus_one(self):
        handler, _ = _setup([make_product(7)])
        assert handler.handle(ProductDraft(name="Tea", price="10", stock=1)).id == 8

    def test_with_discount(self):
        handler, store = _setup()
        handler.handle(
            ProductDraft(
                name="Tea",
                price="100",
                stock=1,
                purchase_price="50",
                discount_type="percentage",
                discount_value="10",
                discount_start_date="2026-01-01",
                discount_end_date="2026-01-31",
            )
        )
        assert store.get(1).discount.value == Decimal("10")

    def test_no_history_on_create(self):
        handler, store = _setup()
        handler.handle(ProductDraft(name="Tea", price="10", stock=1))
        assert store.get(1).price_history == ()


class TestCreateProductValidation:

    def test_missing_fields(self):
        handler, store = _setup()
        with pytest.raises(FieldError, match="Name, price, and stock are required fields"):
            handler.handle(ProductDraft(name="Tea", price=None, stock=1))
        assert store.writes == 0

    def test_non_positive_price(self):
        handler, _ = _setup()
        with pytest.raises(FieldError, match="Price must be greater than 0"):
            handler.handle(ProductDraft(name="Tea", price="0", stock=1))

    def test_negative_stock(self):
        handler, _ = _setup()
        with pytest.raises(FieldError, match="Stock cannot be negative"):
            handler.handle(ProductDraft(name="Tea", price="10", stock=-1))

    def test_profit_rule_rejects(self):
        handler, store = _setup()
        with pytest.raises(RuleError, match="at least 5%"):
            handler.handle(ProductDraft(name="Tea", price="50", stock=1, purchase_price="48"))
        assert store.writes == 0
