"""Tests for the DeleteProduct and ShowPriceHistory use cases."""

from decimal import Decimal

import pytest

from pricing_engine.application.delete_product import DeleteProductHandler
from pricing_engine.application.dto import ProductPatch
from pricing_engine.application.show_price_history import ShowPriceHistoryHandler
from pricing_engine.application.update_product import UpdateProductHandler
from pricing_engine.domain.exceptions import EntityNotFoundError
from pricing_engine.domain.service.price_history import PriceHistoryRecorder
from tests.fakes import FakeCatalogStore, FixedClock, make_product


class TestDeleteProduct:

    def test_deletes(self):
        store = FakeCatalogStore([make_product(1), make_product(2)])
        assert DeleteProductHandler(store).handle(1) is True
        assert store.get(1) is None
        assert [p.id for p in store.list_all()] == [2]

    def test_not_found(self):
        with pytest.raises(EntityNotFoundError, match="Product #5 not found"):
            DeleteProductHandler(FakeCatalogStore()).handle(5)


class TestShowPriceHistory:

    def test_most_recent_first(self):
        store = FakeCatalogStore([make_product(1, price="100")])
        update = UpdateProductHandler(store, PriceHistoryRecorder(clock=FixedClock()), actor="Maya")
        update.handle(1, ProductPatch(price="110"))
        update.handle(1, ProductPatch(price="105"))

        history = ShowPriceHistoryHandler(store).handle(1)

        assert [(h.old_price, h.new_price) for h in history] == [
            (Decimal("110"), Decimal("105")),
            (Decimal("100"), Decimal("110")),
        ]
        assert history[0].actor == "Maya"
        assert history[0].timestamp == "2026-01-01T09:01:00+00:00"

    def test_never_repriced_is_empty(self):
        store = FakeCatalogStore([make_product(1, previous_price=Decimal("90"))])
        assert ShowPriceHistoryHandler(store).handle(1) == []

    def test_not_found(self):
        with pytest.raises(EntityNotFoundError):
            ShowPriceHistoryHandler(FakeCatalogStore()).handle(1)
