"""Product aggregate.

Products are immutable records. Every change goes through ``merge()``,
which returns a new Product with the derived pricing fields recomputed;
the catalog store is the only place a record is replaced.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from decimal import Decimal
from typing import Any, Mapping

from pricing_engine.domain.exceptions import FieldError
from pricing_engine.domain.model.price_history import PriceChangeEntry
from pricing_engine.domain.model.value_objects import ZERO, Discount
from pricing_engine.domain.service.calculator import (
    compute_margin,
    compute_min_selling_price,
)

DEFAULT_MIN_STOCK = 10

# Derived or append-only fields a patch may never set directly.
_PROTECTED_FIELDS = frozenset(
    {"id", "profit_margin", "min_selling_price", "price_history"}
)


@dataclass(frozen=True)
class Product:
    """A product in the catalog.

    Invariants enforced by the validation engine before any record is
    stored:
    - ``price`` lies in [1, 100000]
    - ``price > purchase_price`` whenever ``purchase_price > 0``
    - ``profit_margin`` always matches price and purchase price
    """

    id: int
    name: str
    price: Decimal
    category: str = ""
    stock: int = 0
    purchase_price: Decimal = ZERO
    sku: str | None = None
    barcode: str | None = None
    min_stock: int = DEFAULT_MIN_STOCK
    is_active: bool = True
    previous_price: Decimal | None = None
    discount: Discount | None = None
    profit_margin: Decimal = ZERO
    min_selling_price: Decimal = ZERO
    price_history: tuple[PriceChangeEntry, ...] = field(default_factory=tuple)

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def create(product_id: int, **attrs: Any) -> Product:
        """Build a new product with its derived fields filled in."""
        return Product(id=product_id, **attrs).with_derived_fields()

    # --- Mutations (all return a new record) ----------------------------------

    def merge(self, patch: Mapping[str, Any]) -> Product:
        """Apply a partial patch, preserving identity and history."""
        known = {f.name for f in fields(self)}
        for key in patch:
            if key not in known:
                raise FieldError(f"Unknown product field: {key!r}")
            if key in _PROTECTED_FIELDS:
                raise FieldError(f"Field {key!r} cannot be patched")
        if not patch:
            return self
        return replace(self, **patch).with_derived_fields()

    def with_derived_fields(self) -> Product:
        return replace(
            self,
            profit_margin=compute_margin(self.price, self.purchase_price),
            min_selling_price=compute_min_selling_price(self.purchase_price),
        )

    def append_history(self, entry: PriceChangeEntry) -> Product:
        return replace(self, price_history=self.price_history + (entry,))

    # --- Computed properties --------------------------------------------------

    @property
    def has_discount(self) -> bool:
        return self.discount is not None and self.discount.is_active

    @property
    def discount_priority(self) -> int:
        return self.discount.priority if self.discount is not None else 1

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.min_stock
