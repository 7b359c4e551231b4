"""Dict-backed implementation of CatalogStore.

The authoritative catalog while the engine runs. Records are immutable,
so handing them out directly is safe.
"""

from __future__ import annotations

from typing import Iterable

from pricing_engine.domain.model.product import Product
from pricing_engine.domain.repository.catalog_store import CatalogStore


class InMemoryCatalogStore(CatalogStore):

    def __init__(self, products: Iterable[Product] | None = None) -> None:
        super().__init__()
        self._store: dict[int, Product] = {}
        for product in products or []:
            self._store[product.id] = product

    def get(self, product_id: int) -> Product | None:
        return self._store.get(product_id)

    def list_all(self) -> list[Product]:
        return list(self._store.values())

    def upsert(self, product: Product) -> None:
        self._store[product.id] = product

    def delete(self, product_id: int) -> bool:
        return self._store.pop(product_id, None) is not None
