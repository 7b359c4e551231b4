"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the caller (CLI or API layer) and the application
handlers without exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from pricing_engine.domain.model.price_history import PriceChangeEntry
from pricing_engine.domain.model.product import Product
from pricing_engine.domain.model.value_objects import ZERO, Discount, to_decimal

ADMIN_ROLE = "admin"
FINANCIAL_FIELDS = ("purchase_price", "min_selling_price", "profit_margin")

Amount = str | float | int | Decimal


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProductDraft:
    """Input: a product that does not exist yet."""

    name: str | None
    price: Amount | None
    stock: int | None
    category: str = ""
    purchase_price: Amount | None = None
    sku: str | None = None
    barcode: str | None = None
    min_stock: int | None = None
    is_active: bool = True
    discount_type: str | None = None
    discount_value: Amount | None = None
    discount_start_date: date | str | None = None
    discount_end_date: date | str | None = None
    discount_priority: int | None = None


@dataclass(frozen=True)
class ProductPatch:
    """Input: a partial update. ``None`` means "leave unchanged"."""

    name: str | None = None
    price: Amount | None = None
    purchase_price: Amount | None = None
    stock: int | None = None
    category: str | None = None
    sku: str | None = None
    barcode: str | None = None
    min_stock: int | None = None
    is_active: bool | None = None
    discount_type: str | None = None
    discount_value: Amount | None = None
    discount_start_date: date | str | None = None
    discount_end_date: date | str | None = None
    discount_priority: int | None = None

    def provided(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class PricingTerms:
    """Input for the stand-alone pricing checks.

    Satisfies the same read-only shape as a Product, so the validation
    engine can check a proposed offer before anything is stored.
    """

    price: Decimal
    purchase_price: Decimal = ZERO
    discount: Discount | None = None
    category: str = ""
    id: int | None = None
    name: str = ""

    @staticmethod
    def of(
        price: Amount,
        purchase_price: Amount | None = None,
        discount_type: str | None = None,
        discount_value: Amount | None = None,
        discount_start_date: date | str | None = None,
        discount_end_date: date | str | None = None,
        discount_priority: int | None = None,
        category: str = "",
        product_id: int | None = None,
    ) -> PricingTerms:
        discount = None
        if discount_value is not None:
            discount = Discount.of(
                discount_type or "Fixed Amount",
                discount_value,
                discount_start_date,
                discount_end_date,
                discount_priority,
            )
        return PricingTerms(
            price=to_decimal(price, "price"),
            purchase_price=to_decimal(purchase_price, "purchase price")
            if purchase_price is not None
            else ZERO,
            discount=discount,
            category=category,
            id=product_id,
        )


@dataclass(frozen=True)
class PartialPriceUpdate:
    """Input: one row of a partial batch (either price may be omitted)."""

    product_id: int
    base_price: Amount | None = None
    cost_price: Amount | None = None


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProductDTO:
    """Output: a product as shown to a caller.

    Financial fields are ``None`` for non-admin callers.
    """

    id: int
    name: str
    category: str
    price: Decimal
    stock: int
    min_stock: int
    is_active: bool
    sku: str | None = None
    barcode: str | None = None
    previous_price: Decimal | None = None
    discount_type: str | None = None
    discount_value: Decimal | None = None
    discount_start_date: date | None = None
    discount_end_date: date | None = None
    discount_priority: int = 1
    purchase_price: Decimal | None = None
    min_selling_price: Decimal | None = None
    profit_margin: Decimal | None = None

    def as_dict(self) -> dict[str, Any]:
        """Plain mapping with elided financial fields left out entirely."""
        data = asdict(self)
        for name in FINANCIAL_FIELDS:
            if data[name] is None:
                del data[name]
        return data


@dataclass(frozen=True)
class PriceChangeDTO:
    timestamp: str
    old_price: Decimal
    new_price: Decimal
    actor: str
    reason: str


@dataclass(frozen=True)
class ValidationResultDTO:
    is_valid: bool
    error: str | None = None


@dataclass(frozen=True)
class ConflictDTO:
    type: str
    product_id: int | None
    details: str
    product_name: str | None = None


@dataclass(frozen=True)
class OfferCheckDTO:
    is_valid: bool
    conflicts: list[ConflictDTO] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    error: str | None = None


@dataclass(frozen=True)
class ProductRefDTO:
    id: int
    name: str


@dataclass(frozen=True)
class BulkUpdateSummaryDTO:
    updated_count: int
    total_filtered: int
    conflict_count: int
    strategy: str
    conflict_products: list[ProductRefDTO] = field(default_factory=list)


@dataclass(frozen=True)
class PricePreviewDTO:
    product_id: int
    name: str
    current_price: Decimal
    new_price: Decimal
    price_change: Decimal
    skipped: bool


@dataclass(frozen=True)
class PartialUpdateErrorDTO:
    product_id: int
    error: str


@dataclass(frozen=True)
class PartialUpdateReportDTO:
    success_count: int
    total_updates: int
    errors: list[PartialUpdateErrorDTO] = field(default_factory=list)


@dataclass(frozen=True)
class MarginLineDTO:
    product_id: int
    name: str
    price: Decimal
    final_price: Decimal
    purchase_price: Decimal
    profit_margin: Decimal
    min_selling_price: Decimal
    health: str
    is_healthy_margin: bool
    is_profitable: bool


# ---------------------------------------------------------------------------
# Mapping
# ---------------------------------------------------------------------------


def product_to_dto(product: Product, role: str) -> ProductDTO:
    """Map a Product for *role*; only admins see cost and margin."""
    discount = product.discount
    is_admin = role == ADMIN_ROLE
    return ProductDTO(
        id=product.id,
        name=product.name,
        category=product.category,
        price=product.price,
        stock=product.stock,
        min_stock=product.min_stock,
        is_active=product.is_active,
        sku=product.sku,
        barcode=product.barcode,
        previous_price=product.previous_price,
        discount_type=discount.type.value if discount else None,
        discount_value=discount.value if discount else None,
        discount_start_date=discount.start_date if discount else None,
        discount_end_date=discount.end_date if discount else None,
        discount_priority=product.discount_priority,
        purchase_price=product.purchase_price if is_admin else None,
        min_selling_price=product.min_selling_price if is_admin else None,
        profit_margin=product.profit_margin if is_admin else None,
    )


def history_entry_to_dto(entry: PriceChangeEntry) -> PriceChangeDTO:
    return PriceChangeDTO(
        timestamp=entry.timestamp.isoformat(),
        old_price=entry.old_price,
        new_price=entry.new_price,
        actor=entry.actor,
        reason=entry.reason,
    )
