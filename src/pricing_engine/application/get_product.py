"""Application service: Get Product use case (query).

Financial fields are only visible to admins.
"""

from __future__ import annotations

from pricing_engine.application.dto import ProductDTO, product_to_dto
from pricing_engine.domain.exceptions import EntityNotFoundError
from pricing_engine.domain.repository.catalog_store import CatalogStore


class GetProductHandler:

    def __init__(self, store: CatalogStore) -> None:
        self._store = store

    def handle(self, product_id: int, role: str = "customer") -> ProductDTO:
        product = self._store.get(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product #{product_id} not found")
        return product_to_dto(product, role)

    def by_barcode(self, barcode: str, role: str = "customer") -> ProductDTO:
        """Scanner lookup; inactive products are not sold, so not found."""
        product = self._store.get_by_barcode(barcode)
        if product is None or not product.is_active:
            raise EntityNotFoundError(f"No active product with barcode '{barcode}'")
        return product_to_dto(product, role)
