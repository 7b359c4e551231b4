"""Abstract catalog store for the Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (in-memory, JSON file) live in
the infrastructure layer.

Mutating operations must run one at a time against a store. Handlers
hold ``write_lock()`` for the duration of a single operation; reads do
not take it.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod

from pricing_engine.domain.model.product import Product


class CatalogStore(ABC):

    def __init__(self) -> None:
        self._write_lock = threading.RLock()

    def write_lock(self) -> threading.RLock:
        """Re-entrant mutex serialising writers on this store."""
        return self._write_lock

    @abstractmethod
    def get(self, product_id: int) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog, in insertion order."""

    @abstractmethod
    def upsert(self, product: Product) -> None:
        """Persist a new or updated product."""

    @abstractmethod
    def delete(self, product_id: int) -> bool:
        """Remove a product. Returns False if it did not exist."""

    def next_id(self) -> int:
        """Generate the next product ID (max existing + 1, or 1)."""
        products = self.list_all()
        if not products:
            return 1
        return max(p.id for p in products) + 1

    def get_by_barcode(self, barcode: str) -> Product | None:
        for product in self.list_all():
            if product.barcode == barcode:
                return product
        return None
