"""Application service: Show Price History use case (query)."""

from __future__ import annotations

from pricing_engine.application.dto import PriceChangeDTO, history_entry_to_dto
from pricing_engine.domain.exceptions import EntityNotFoundError
from pricing_engine.domain.repository.catalog_store import CatalogStore
from pricing_engine.domain.service.price_history import PriceHistoryRecorder


class ShowPriceHistoryHandler:

    def __init__(self, store: CatalogStore) -> None:
        self._store = store

    def handle(self, product_id: int) -> list[PriceChangeDTO]:
        """Most recent change first; empty if the price never changed."""
        product = self._store.get(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product #{product_id} not found")
        return [history_entry_to_dto(e) for e in PriceHistoryRecorder.history_of(product)]
