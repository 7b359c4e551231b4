"""Application service: Bulk Partial Update use case.

Each row sets a new base price and/or cost price on one product. Rows are
independent: a failing row is reported and the batch moves on, so rows
that succeeded before it stay committed.
"""

from __future__ import annotations

import logging

from pricing_engine.application.dto import (
    PartialPriceUpdate,
    PartialUpdateErrorDTO,
    PartialUpdateReportDTO,
    ProductPatch,
)
from pricing_engine.application.update_product import UpdateProductHandler
from pricing_engine.domain.exceptions import DomainException, ValidationError
from pricing_engine.domain.model.value_objects import ZERO, to_decimal
from pricing_engine.domain.repository.catalog_store import CatalogStore
from pricing_engine.domain.service.price_history import PARTIAL_UPDATE, PriceHistoryRecorder

logger = logging.getLogger(__name__)


class BulkPartialUpdateHandler:

    def __init__(
        self,
        store: CatalogStore,
        recorder: PriceHistoryRecorder | None = None,
        actor: str = "Admin",
    ) -> None:
        self._store = store
        self._update = UpdateProductHandler(store, recorder, actor)

    def handle(self, updates: list[PartialPriceUpdate]) -> PartialUpdateReportDTO:
        success_count = 0
        errors: list[PartialUpdateErrorDTO] = []

        with self._store.write_lock():
            for update in updates:
                try:
                    self._apply(update)
                except DomainException as exc:
                    logger.warning("Partial update of product #%s rejected: %s", update.product_id, exc)
                    errors.append(PartialUpdateErrorDTO(product_id=update.product_id, error=str(exc)))
                    continue
                success_count += 1

        return PartialUpdateReportDTO(
            success_count=success_count,
            total_updates=len(updates),
            errors=errors,
        )

    def _apply(self, update: PartialPriceUpdate) -> None:
        base_price = (
            to_decimal(update.base_price, "base price") if update.base_price is not None else None
        )
        cost_price = (
            to_decimal(update.cost_price, "cost price") if update.cost_price is not None else None
        )

        if base_price is not None and base_price <= ZERO:
            raise ValidationError("Base price must be greater than 0")
        if base_price is not None and cost_price is not None and base_price <= cost_price:
            raise ValidationError("Base price must be greater than cost price")

        self._update.handle(
            update.product_id,
            ProductPatch(price=base_price, purchase_price=cost_price),
            reason=PARTIAL_UPDATE,
        )
