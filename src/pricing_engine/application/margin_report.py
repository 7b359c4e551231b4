"""Application service: Margin Report use case (query, admin only)."""

from __future__ import annotations

from pricing_engine.application.dto import MarginLineDTO
from pricing_engine.domain.repository.catalog_store import CatalogStore
from pricing_engine.domain.service.calculator import profit_metrics


class MarginReportHandler:

    def __init__(self, store: CatalogStore) -> None:
        self._store = store

    def handle(self) -> list[MarginLineDTO]:
        lines = []
        for product in self._store.list_all():
            metrics = profit_metrics(product)
            lines.append(
                MarginLineDTO(
                    product_id=product.id,
                    name=product.name,
                    price=product.price,
                    final_price=metrics.final_price,
                    purchase_price=product.purchase_price,
                    profit_margin=metrics.profit_margin,
                    min_selling_price=metrics.min_selling_price,
                    health=metrics.health,
                    is_healthy_margin=metrics.is_healthy_margin,
                    is_profitable=metrics.is_profitable,
                )
            )
        return lines
