"""Application service: Update Product use case.

Applies a partial patch to one product. A price change snapshots the old
price into ``previous_price`` and appends a history entry; a patch that
leaves the price alone never does.
"""

from __future__ import annotations

import logging
from typing import Any

from pricing_engine.application.dto import ADMIN_ROLE, ProductDTO, ProductPatch, product_to_dto
from pricing_engine.domain.exceptions import EntityNotFoundError, FieldError, RuleError
from pricing_engine.domain.model.product import Product
from pricing_engine.domain.model.value_objects import ZERO, Discount, to_decimal, to_int
from pricing_engine.domain.repository.catalog_store import CatalogStore
from pricing_engine.domain.service.price_history import MANUAL_UPDATE, PriceHistoryRecorder
from pricing_engine.domain.service.validation import validate_profit_rules

logger = logging.getLogger(__name__)

_DISCOUNT_FIELDS = (
    "discount_type",
    "discount_value",
    "discount_start_date",
    "discount_end_date",
    "discount_priority",
)
_PRICING_FIELDS = ("price", "purchase_price", "discount")


class UpdateProductHandler:

    def __init__(
        self,
        store: CatalogStore,
        recorder: PriceHistoryRecorder | None = None,
        actor: str = "Admin",
    ) -> None:
        self._store = store
        self._recorder = recorder or PriceHistoryRecorder()
        self._actor = actor

    def handle(
        self,
        product_id: int,
        patch: ProductPatch,
        reason: str = MANUAL_UPDATE,
    ) -> ProductDTO:
        with self._store.write_lock():
            product = self._store.get(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product #{product_id} not found")

            changes = self._coerce(product, patch.provided())
            if not changes:
                return product_to_dto(product, ADMIN_ROLE)

            self._check(changes)

            if "price" in changes and changes["price"] != product.price:
                changes["previous_price"] = product.price
            updated = product.merge(changes)

            if any(name in changes for name in _PRICING_FIELDS):
                validate_profit_rules(updated.price, updated.purchase_price, updated.discount)

            updated = self._recorder.record_change(
                updated, product.price, updated.price, self._actor, reason
            )
            self._store.upsert(updated)

        logger.info("Updated product #%s (%s)", product_id, ", ".join(sorted(changes)))
        return product_to_dto(updated, ADMIN_ROLE)

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _coerce(product: Product, raw: dict[str, Any]) -> dict[str, Any]:
        changes: dict[str, Any] = {}
        for name, value in raw.items():
            if name in _DISCOUNT_FIELDS:
                continue
            if name in ("price", "purchase_price"):
                changes[name] = to_decimal(value, name.replace("_", " "))
            elif name in ("stock", "min_stock"):
                changes[name] = to_int(value, name.replace("_", " "))
            elif name == "name":
                if not str(value).strip():
                    raise FieldError("Product name is required")
                changes[name] = str(value).strip()
            else:
                changes[name] = value

        if any(name in raw for name in _DISCOUNT_FIELDS):
            current = product.discount
            changes["discount"] = Discount.of(
                raw.get("discount_type") or (current.type if current else "Fixed Amount"),
                raw.get("discount_value", current.value if current else ZERO),
                raw.get("discount_start_date", current.start_date if current else None),
                raw.get("discount_end_date", current.end_date if current else None),
                raw.get("discount_priority", current.priority if current else None),
            )
        return changes

    @staticmethod
    def _check(changes: dict[str, Any]) -> None:
        price = changes.get("price")
        purchase_price = changes.get("purchase_price")
        if price is not None and price <= ZERO:
            raise FieldError("Price must be greater than 0")
        if changes.get("stock") is not None and changes["stock"] < 0:
            raise FieldError("Stock cannot be negative")
        if price is not None and purchase_price is not None and price <= purchase_price:
            raise RuleError("Selling price must be greater than purchase price")
