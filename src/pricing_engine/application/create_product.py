"""Application service: Create Product use case."""

from __future__ import annotations

import logging

from pricing_engine.application.dto import ADMIN_ROLE, ProductDraft, ProductDTO, product_to_dto
from pricing_engine.domain.model.product import DEFAULT_MIN_STOCK, Product
from pricing_engine.domain.model.value_objects import ZERO, Discount, to_decimal, to_int
from pricing_engine.domain.repository.catalog_store import CatalogStore
from pricing_engine.domain.service.validation import (
    validate_product_fields,
    validate_profit_rules,
)

logger = logging.getLogger(__name__)


class CreateProductHandler:

    def __init__(self, store: CatalogStore) -> None:
        self._store = store

    def handle(self, draft: ProductDraft) -> ProductDTO:
        """Add a new product to the catalog.

        Field checks run first, then the profit rules; nothing is stored
        unless both pass. The ID is ``max(existing) + 1``.
        """
        price = to_decimal(draft.price, "price") if draft.price is not None else None
        stock = to_int(draft.stock, "stock") if draft.stock is not None else None
        validate_product_fields(draft.name, price, stock)

        purchase_price = (
            to_decimal(draft.purchase_price, "purchase price")
            if draft.purchase_price is not None
            else ZERO
        )
        discount = None
        if draft.discount_value is not None:
            discount = Discount.of(
                draft.discount_type or "Fixed Amount",
                draft.discount_value,
                draft.discount_start_date,
                draft.discount_end_date,
                draft.discount_priority,
            )
        validate_profit_rules(price, purchase_price, discount)

        with self._store.write_lock():
            product = Product.create(
                self._store.next_id(),
                name=draft.name.strip(),
                price=price,
                stock=stock,
                category=draft.category,
                purchase_price=purchase_price,
                sku=draft.sku,
                barcode=draft.barcode,
                min_stock=to_int(draft.min_stock, "minimum stock")
                if draft.min_stock is not None
                else DEFAULT_MIN_STOCK,
                is_active=draft.is_active,
                discount=discount,
            )
            self._store.upsert(product)

        logger.info("Created product #%s '%s' at %s", product.id, product.name, product.price)
        return product_to_dto(product, ADMIN_ROLE)
