"""Application service: Delete Product use case.

Removes the product from the catalog entirely; no tombstone is kept.
"""

from __future__ import annotations

import logging

from pricing_engine.domain.exceptions import EntityNotFoundError
from pricing_engine.domain.repository.catalog_store import CatalogStore

logger = logging.getLogger(__name__)


class DeleteProductHandler:

    def __init__(self, store: CatalogStore) -> None:
        self._store = store

    def handle(self, product_id: int) -> bool:
        with self._store.write_lock():
            if not self._store.delete(product_id):
                raise EntityNotFoundError(f"Product #{product_id} not found")
        logger.info("Deleted product #%s", product_id)
        return True
