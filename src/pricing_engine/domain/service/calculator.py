"""Margin & discount calculator.

Pure functions over Decimal amounts. Every returned amount is rounded half
away from zero to two places so downstream comparisons see stable values.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from pricing_engine.domain.model.value_objects import (
    ZERO,
    Discount,
    DiscountType,
    round_money,
)

HUNDRED = Decimal("100")
MIN_SELLING_MARKUP = Decimal("1.1")

# Financial health thresholds, in margin percent.
EXCELLENT_MARGIN = Decimal("25")
GOOD_MARGIN = Decimal("15")
FAIR_MARGIN = Decimal("5")


def discount_amount(price: Decimal, discount_type: DiscountType, discount_value: Decimal) -> Decimal:
    """Absolute currency reduction a discount takes off *price*."""
    if discount_value <= ZERO:
        return ZERO
    if discount_type is DiscountType.PERCENTAGE:
        return round_money(price * discount_value / HUNDRED)
    return round_money(discount_value)


def compute_final_price(
    price: Decimal,
    discount_type: DiscountType,
    discount_value: Decimal,
) -> Decimal:
    """Price after discount, never below zero."""
    final = price - discount_amount(price, discount_type, discount_value)
    return round_money(max(ZERO, final))


def compute_margin(selling_price: Decimal, purchase_price: Decimal) -> Decimal:
    """Profit margin in percent of the purchase price.

    Zero whenever either side is unknown (<= 0).
    """
    if purchase_price <= ZERO or selling_price <= ZERO:
        return round_money(ZERO)
    return round_money((selling_price - purchase_price) / purchase_price * HUNDRED)


def compute_min_selling_price(purchase_price: Decimal) -> Decimal:
    """Purchase price plus the 10% floor margin."""
    if purchase_price <= ZERO:
        return round_money(ZERO)
    return round_money(purchase_price * MIN_SELLING_MARKUP)


def final_price_of(price: Decimal, discount: Discount | None) -> Decimal:
    if discount is None or not discount.is_active:
        return round_money(price)
    return compute_final_price(price, discount.type, discount.value)


# ---------------------------------------------------------------------------
# Display metrics
# ---------------------------------------------------------------------------


class PricedItem(Protocol):
    price: Decimal
    purchase_price: Decimal
    discount: Discount | None


@dataclass(frozen=True)
class ProfitMetrics:
    final_price: Decimal
    profit_margin: Decimal
    min_selling_price: Decimal

    @property
    def is_healthy_margin(self) -> bool:
        return self.profit_margin > GOOD_MARGIN

    @property
    def is_profitable(self) -> bool:
        return self.profit_margin > ZERO

    @property
    def health(self) -> str:
        return financial_health(self.profit_margin)


def profit_metrics(item: PricedItem) -> ProfitMetrics:
    """Metrics on the price a customer actually pays (discount applied)."""
    final_price = final_price_of(item.price, item.discount)
    return ProfitMetrics(
        final_price=final_price,
        profit_margin=compute_margin(final_price, item.purchase_price),
        min_selling_price=compute_min_selling_price(item.purchase_price),
    )


def financial_health(margin: Decimal) -> str:
    if margin >= EXCELLENT_MARGIN:
        return "excellent"
    if margin >= GOOD_MARGIN:
        return "good"
    if margin >= FAIR_MARGIN:
        return "fair"
    if margin > ZERO:
        return "poor"
    return "loss"
