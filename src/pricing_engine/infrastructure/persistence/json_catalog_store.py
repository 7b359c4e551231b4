"""JSON-file-backed implementation of CatalogStore.

Serves as the catalog's seed/load data source: the whole file is read on
every call and rewritten on every write.
"""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from pricing_engine.domain.model.price_history import PriceChangeEntry
from pricing_engine.domain.model.product import DEFAULT_MIN_STOCK, Product
from pricing_engine.domain.model.value_objects import Discount
from pricing_engine.domain.repository.catalog_store import CatalogStore


class JsonCatalogStore(CatalogStore):

    def __init__(self, file_path: Path) -> None:
        super().__init__()
        self._file_path = file_path
        self._ensure_file()

    # --- CatalogStore interface -----------------------------------------------

    def get(self, product_id: int) -> Product | None:
        return self._load().get(product_id)

    def list_all(self) -> list[Product]:
        return list(self._load().values())

    def upsert(self, product: Product) -> None:
        products = self._load()
        products[product.id] = product
        self._persist(products)

    def delete(self, product_id: int) -> bool:
        products = self._load()
        if products.pop(product_id, None) is None:
            return False
        self._persist(products)
        return True

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[int, Product]:
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        products = (self._to_domain(item) for item in raw)
        return {p.id: p for p in products}

    def _persist(self, products: dict[int, Product]) -> None:
        raw = [self._to_raw(p) for p in products.values()]
        self._file_path.write_text(
            json.dumps(raw, indent=2) + "\n", encoding="utf-8"
        )

    @staticmethod
    def _to_raw(product: Product) -> dict:
        discount = product.discount
        return {
            "id": product.id,
            "name": product.name,
            "sku": product.sku,
            "barcode": product.barcode,
            "category": product.category,
            "stock": product.stock,
            "min_stock": product.min_stock,
            "is_active": product.is_active,
            "price": str(product.price),
            "purchase_price": str(product.purchase_price),
            "previous_price": _optional_str(product.previous_price),
            "discount": None if discount is None else {
                "type": discount.type.value,
                "value": str(discount.value),
                "start_date": _optional_str(discount.start_date),
                "end_date": _optional_str(discount.end_date),
                "priority": discount.priority,
            },
            "price_history": [
                {
                    "timestamp": entry.timestamp.isoformat(),
                    "old_price": str(entry.old_price),
                    "new_price": str(entry.new_price),
                    "actor": entry.actor,
                    "reason": entry.reason,
                }
                for entry in product.price_history
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        discount = raw.get("discount")
        previous_price = raw.get("previous_price")
        return Product.create(
            int(raw["id"]),
            name=raw["name"],
            sku=raw.get("sku"),
            barcode=raw.get("barcode"),
            category=raw.get("category", ""),
            stock=int(raw.get("stock", 0)),
            min_stock=int(raw.get("min_stock", DEFAULT_MIN_STOCK)),
            is_active=bool(raw.get("is_active", True)),
            price=Decimal(raw["price"]),
            purchase_price=Decimal(raw.get("purchase_price") or "0"),
            previous_price=Decimal(previous_price) if previous_price is not None else None,
            discount=None if discount is None else Discount.of(
                discount["type"],
                discount["value"],
                discount.get("start_date"),
                discount.get("end_date"),
                discount.get("priority"),
            ),
            price_history=tuple(
                PriceChangeEntry(
                    timestamp=datetime.fromisoformat(entry["timestamp"]),
                    old_price=Decimal(entry["old_price"]),
                    new_price=Decimal(entry["new_price"]),
                    actor=entry["actor"],
                    reason=entry["reason"],
                )
                for entry in raw.get("price_history", [])
            ),
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")


def _optional_str(value) -> str | None:
    return None if value is None else str(value)
