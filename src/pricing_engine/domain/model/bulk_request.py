"""Bulk update requests.

A request is either a ``PricingUpdate`` (percentage / fixed / range
strategies) or a ``DiscountUpdate`` (category-wide discount). Both share
the product filter and the optional request-level price bounds.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping

from pricing_engine.domain.exceptions import FieldError, RequestError
from pricing_engine.domain.model.value_objects import DiscountType, parse_date, to_decimal

ALL_CATEGORIES = "all"
CATEGORY_DISCOUNT = "category_discount"


class PricingStrategy(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    RANGE = "range"


class ConflictResolution(Enum):
    SKIP = "skip"
    OVERRIDE = "override"
    MERGE = "merge"


@dataclass(frozen=True)
class ProductFilter:
    """Which part of the catalog a bulk request touches."""

    category: str = ALL_CATEGORIES
    apply_to_low_stock: bool = False
    stock_threshold: int | None = None

    def matches(self, product) -> bool:
        if self.category != ALL_CATEGORIES and product.category != self.category:
            return False
        if self.apply_to_low_stock and product.stock > (self.stock_threshold or 0):
            return False
        return True


@dataclass(frozen=True, kw_only=True)
class BulkUpdateRequest(ABC):
    product_filter: ProductFilter = field(default_factory=ProductFilter)
    min_price: Decimal | None = None
    max_price: Decimal | None = None

    @property
    @abstractmethod
    def strategy_name(self) -> str:
        """Label reported in the update summary."""

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def from_dict(raw: Mapping[str, Any]) -> BulkUpdateRequest:
        """Parse the loosely-shaped payload an API layer receives.

        Accepts camelCase keys (``activeTab``, ``minPrice`` ...) as well as
        their snake_case spellings.
        """
        try:
            return _parse(raw)
        except FieldError as exc:
            raise RequestError(str(exc)) from exc


@dataclass(frozen=True, kw_only=True)
class PricingUpdate(BulkUpdateRequest):
    strategy: PricingStrategy
    value: Decimal | None = None

    @property
    def strategy_name(self) -> str:
        return self.strategy.value


@dataclass(frozen=True, kw_only=True)
class DiscountUpdate(BulkUpdateRequest):
    discount_type: DiscountType
    discount_value: Decimal
    start_date: date | None = None
    end_date: date | None = None
    conflict_resolution: ConflictResolution = ConflictResolution.SKIP

    @property
    def strategy_name(self) -> str:
        return CATEGORY_DISCOUNT


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def _get(raw: Mapping[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    value = raw.get(camel, raw.get(snake, default))
    if isinstance(value, str) and not value.strip():
        return default
    return value


_TRUE_FLAGS = frozenset({"true", "1", "yes", "on"})
_FALSE_FLAGS = frozenset({"false", "0", "no", "off"})


def _flag(raw: Mapping[str, Any], camel: str, snake: str) -> bool:
    """Checkbox values arrive as booleans or as their string spellings."""
    value = _get(raw, camel, snake, False)
    if isinstance(value, str):
        key = value.strip().lower()
        if key in _TRUE_FLAGS:
            return True
        if key in _FALSE_FLAGS:
            return False
        raise RequestError(f"Invalid value for {camel}: {value!r}")
    return bool(value)


def _optional_amount(
    raw: Mapping[str, Any], camel: str, snake: str, label: str
) -> Decimal | None:
    value = _get(raw, camel, snake)
    if value is None:
        return None
    try:
        return to_decimal(value, label)
    except FieldError as exc:
        raise RequestError(f"{label.capitalize()} must be a valid number") from exc


def _parse_filter(raw: Mapping[str, Any]) -> ProductFilter:
    apply_to_low_stock = _flag(raw, "applyToLowStock", "apply_to_low_stock")
    threshold = _get(raw, "stockThreshold", "stock_threshold")
    if threshold is not None:
        try:
            threshold = int(threshold)
        except (TypeError, ValueError) as exc:
            raise RequestError(f"Invalid stock threshold: {threshold!r}") from exc
    if apply_to_low_stock and threshold is None:
        raise RequestError("Stock threshold is required when filtering low-stock products")
    return ProductFilter(
        category=str(_get(raw, "category", "category", ALL_CATEGORIES)),
        apply_to_low_stock=apply_to_low_stock,
        stock_threshold=threshold,
    )


def _parse(raw: Mapping[str, Any]) -> BulkUpdateRequest:
    tab = str(_get(raw, "activeTab", "active_tab", "pricing")).lower()
    common = dict(
        product_filter=_parse_filter(raw),
        min_price=_optional_amount(raw, "minPrice", "min_price", "minimum price"),
        max_price=_optional_amount(raw, "maxPrice", "max_price", "maximum price"),
    )

    if tab == "pricing":
        strategy_raw = _get(raw, "strategy", "strategy")
        if strategy_raw is None:
            raise RequestError("Update strategy is required")
        try:
            strategy = PricingStrategy(str(strategy_raw).lower())
        except ValueError as exc:
            raise RequestError(f"Unknown update strategy: {strategy_raw!r}") from exc
        return PricingUpdate(
            strategy=strategy,
            value=_optional_amount(raw, "value", "value", "update value"),
            **common,
        )

    if tab == "discounts":
        if not _flag(raw, "categoryDiscount", "category_discount"):
            raise RequestError("Category discount must be enabled for discount updates")
        discount_value = _optional_amount(raw, "discountValue", "discount_value", "discount value")
        if discount_value is None:
            raise RequestError("Discount value is required")
        resolution_raw = _get(raw, "conflictResolution", "conflict_resolution", "skip")
        try:
            resolution = ConflictResolution(str(resolution_raw).lower())
        except ValueError as exc:
            raise RequestError(f"Unknown conflict resolution: {resolution_raw!r}") from exc
        return DiscountUpdate(
            discount_type=DiscountType.parse(
                _get(raw, "discountType", "discount_type", DiscountType.PERCENTAGE)
            ),
            discount_value=discount_value,
            start_date=parse_date(_get(raw, "discountStartDate", "start_date")),
            end_date=parse_date(_get(raw, "discountEndDate", "end_date")),
            conflict_resolution=resolution,
            **common,
        )

    raise RequestError(f"Unknown update tab: {tab!r}")
