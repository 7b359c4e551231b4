"""Application service: Bulk Update Prices use case.

Thin wrapper around the BulkUpdateOrchestrator that accepts either a
typed request or the loose mapping an API layer receives.
"""

from __future__ import annotations

from typing import Any, Mapping

from pricing_engine.application.dto import BulkUpdateSummaryDTO, PricePreviewDTO, ProductRefDTO
from pricing_engine.domain.model.bulk_request import BulkUpdateRequest
from pricing_engine.domain.repository.catalog_store import CatalogStore
from pricing_engine.domain.service.bulk_update import BulkUpdateOrchestrator
from pricing_engine.domain.service.price_history import PriceHistoryRecorder


class BulkUpdatePricesHandler:

    def __init__(
        self,
        store: CatalogStore,
        recorder: PriceHistoryRecorder | None = None,
        actor: str = "Admin",
    ) -> None:
        self._orchestrator = BulkUpdateOrchestrator(store, recorder, actor)

    def handle(self, request: BulkUpdateRequest | Mapping[str, Any]) -> BulkUpdateSummaryDTO:
        summary = self._orchestrator.apply(self._typed(request))
        return BulkUpdateSummaryDTO(
            updated_count=summary.updated_count,
            total_filtered=summary.total_filtered,
            conflict_count=summary.conflict_count,
            strategy=summary.strategy,
            conflict_products=[
                ProductRefDTO(id=p.id, name=p.name) for p in summary.conflict_products
            ],
        )

    def preview(self, request: BulkUpdateRequest | Mapping[str, Any]) -> list[PricePreviewDTO]:
        return [
            PricePreviewDTO(
                product_id=line.product_id,
                name=line.name,
                current_price=line.current_price,
                new_price=line.new_price,
                price_change=line.price_change,
                skipped=line.skipped,
            )
            for line in self._orchestrator.preview(self._typed(request))
        ]

    @staticmethod
    def _typed(request: BulkUpdateRequest | Mapping[str, Any]) -> BulkUpdateRequest:
        if isinstance(request, BulkUpdateRequest):
            return request
        return BulkUpdateRequest.from_dict(request)
