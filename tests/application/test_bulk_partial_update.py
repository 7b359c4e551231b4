"""Tests for the BulkPartialUpdate use case."""

from decimal import Decimal

from pricing_engine.application.bulk_partial_update import BulkPartialUpdateHandler
from pricing_engine.application.dto import PartialPriceUpdate
from pricing_engine.domain.service.price_history import PriceHistoryRecorder
from tests.fakes import FakeCatalogStore, FixedClock, make_product


def _setup(products=None) -> tuple[BulkPartialUpdateHandler, FakeCatalogStore]:
    store = FakeCatalogStore(
        products
        or [
            make_product(1, price="100", purchase_price="60"),
            make_product(2, price="200", purchase_price="150"),
        ]
    )
    handler = BulkPartialUpdateHandler(store, PriceHistoryRecorder(clock=FixedClock()), actor="Admin")
    return handler, store


class TestBulkPartialUpdate:

    def test_negative_base_price(self):
        handler, store = _setup()

        report = handler.handle([PartialPriceUpdate(product_id=1, base_price=-5)])

        assert report.success_count == 0
        assert report.total_updates == 1
        assert [(e.product_id, e.error) for e in report.errors] == [
            (1, "Base price must be greater than 0")
        ]
        assert store.writes == 0

    def test_base_not_above_cost(self):
        handler, _ = _setup()
        report = handler.handle([PartialPriceUpdate(product_id=1, base_price="50", cost_price="50")])
        assert report.errors[0].error == "Base price must be greater than cost price"

    def test_fields_applied_independently(self):
        handler, store = _setup()

        report = handler.handle(
            [
                PartialPriceUpdate(product_id=1, base_price="120"),
                PartialPriceUpdate(product_id=2, cost_price="140"),
            ]
        )

        assert report.success_count == 2
        assert report.errors == []
        assert store.get(1).price == Decimal("120")
        assert store.get(1).purchase_price == Decimal("60")
        assert store.get(1).price_history[0].reason == "Partial price update"
        assert store.get(2).price == Decimal("200")
        assert store.get(2).purchase_price == Decimal("140")
        assert store.get(2).price_history == ()

    def test_failure_does_not_abort_batch(self):
        handler, store = _setup()

        report = handler.handle(
            [
                PartialPriceUpdate(product_id=1, base_price="110"),
                PartialPriceUpdate(product_id=99, base_price="10"),
                PartialPriceUpdate(product_id=2, base_price="151"),
                PartialPriceUpdate(product_id=2, base_price="210"),
            ]
        )

        assert report.success_count == 2
        assert report.total_updates == 4
        assert [e.product_id for e in report.errors] == [99, 2]
        assert report.errors[0].error == "Product #99 not found"
        assert "at least 5%" in report.errors[1].error
        assert store.get(1).price == Decimal("110")
        assert store.get(2).price == Decimal("210")

    def test_unparseable_price_reported(self):
        handler, _ = _setup()
        report = handler.handle([PartialPriceUpdate(product_id=1, base_price="cheap")])
        assert report.success_count == 0
        assert "Invalid base price" in report.errors[0].error
