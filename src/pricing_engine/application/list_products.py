"""Application service: List Products use case (query)."""

from __future__ import annotations

from pricing_engine.application.dto import ProductDTO, product_to_dto
from pricing_engine.domain.model.product import Product
from pricing_engine.domain.repository.catalog_store import CatalogStore


class ListProductsHandler:

    def __init__(self, store: CatalogStore) -> None:
        self._store = store

    def handle(self, role: str = "customer", search: str | None = None) -> list[ProductDTO]:
        """Every product, optionally narrowed by a case-insensitive search
        over name, SKU, barcode and category."""
        products = self._store.list_all()
        if search:
            needle = search.lower()
            products = [p for p in products if self._matches(p, needle)]
        return [product_to_dto(p, role) for p in products]

    @staticmethod
    def _matches(product: Product, needle: str) -> bool:
        return any(
            value and needle in value.lower()
            for value in (product.name, product.sku, product.barcode, product.category)
        )
