"""Validation engine.

Stateless rule checks. Each ``validate_*`` function returns ``None`` when
the input is acceptable and raises the matching ValidationError subclass
(FieldError, RuleError, RequestError) with a human-readable reason
otherwise. ``detect_offer_conflicts`` is the exception: it reports every
finding instead of stopping at the first one, so the caller can decide.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Protocol

from pricing_engine.domain.exceptions import FieldError, RequestError, RuleError
from pricing_engine.domain.model.bulk_request import (
    BulkUpdateRequest,
    DiscountUpdate,
    PricingStrategy,
    PricingUpdate,
)
from pricing_engine.domain.model.conflicts import ConflictRecord, ConflictType, OfferCheck
from pricing_engine.domain.model.value_objects import ZERO, Discount, DiscountType
from pricing_engine.domain.service.calculator import compute_final_price, compute_margin

# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MIN_PRICE = Decimal("1")
MAX_PRICE = Decimal("100000")
MAX_PERCENTAGE_DISCOUNT = Decimal("90")
MIN_MARGIN_PERCENT = Decimal("5")
DEEP_DISCOUNT_RATIO = Decimal("0.1")


class OfferTerms(Protocol):
    id: int | None
    category: str
    price: Decimal
    purchase_price: Decimal
    discount: Discount | None


# ---------------------------------------------------------------------------
# Field and profit rules
# ---------------------------------------------------------------------------


def validate_product_fields(
    name: str | None,
    price: Decimal | None,
    stock: int | None,
) -> None:
    if not name or not name.strip() or price is None or stock is None:
        raise FieldError("Name, price, and stock are required fields")
    if price <= ZERO:
        raise FieldError("Price must be greater than 0")
    if stock < 0:
        raise FieldError("Stock cannot be negative")


def validate_profit_rules(
    price: Decimal,
    purchase_price: Decimal = ZERO,
    discount: Discount | None = None,
) -> None:
    """Price guards, discount bounds and the minimum margin rule.

    With an active discount the margin is checked on the discounted price,
    otherwise on the raw price.
    """
    if price < MIN_PRICE:
        raise RuleError(f"Price cannot be less than {MIN_PRICE}")
    if price > MAX_PRICE:
        raise RuleError(f"Price cannot exceed {MAX_PRICE:,}")
    if purchase_price > ZERO and price <= purchase_price:
        raise RuleError("Selling price must be greater than purchase price")

    if discount is not None and discount.is_active:
        _check_discount_bounds(price, discount)
        final_price = compute_final_price(price, discount.type, discount.value)
        if purchase_price > ZERO and final_price <= purchase_price:
            raise RuleError(
                "Discounted price cannot be equal to or less than purchase price"
            )
        if purchase_price > ZERO and compute_margin(final_price, purchase_price) < MIN_MARGIN_PERCENT:
            raise RuleError(
                f"Profit margin after discount should be at least {MIN_MARGIN_PERCENT}% "
                f"for sustainable business"
            )
    elif purchase_price > ZERO and compute_margin(price, purchase_price) < MIN_MARGIN_PERCENT:
        raise RuleError(
            f"Profit margin should be at least {MIN_MARGIN_PERCENT}% for sustainable business"
        )


def _check_discount_bounds(price: Decimal, discount: Discount) -> None:
    if discount.type is DiscountType.PERCENTAGE and discount.value > MAX_PERCENTAGE_DISCOUNT:
        raise RuleError(f"Percentage discount cannot exceed {MAX_PERCENTAGE_DISCOUNT}%")
    if discount.type is DiscountType.FIXED_AMOUNT and discount.value >= price:
        raise RuleError(
            "Fixed discount cannot be equal to or greater than the product price"
        )


# ---------------------------------------------------------------------------
# Bulk requests
# ---------------------------------------------------------------------------


def validate_bulk_update_request(request: BulkUpdateRequest) -> None:
    for label, bound in (("Minimum", request.min_price), ("Maximum", request.max_price)):
        if bound is not None and not (MIN_PRICE <= bound <= MAX_PRICE):
            raise RequestError(
                f"{label} price must be between {MIN_PRICE} and {MAX_PRICE:,}"
            )
    if (
        request.min_price is not None
        and request.max_price is not None
        and request.min_price >= request.max_price
    ):
        raise RequestError("Minimum price must be less than maximum price")

    if isinstance(request, PricingUpdate):
        if request.strategy is PricingStrategy.RANGE:
            if request.min_price is None or request.max_price is None:
                raise RequestError(
                    "Both minimum and maximum prices are required for range strategy"
                )
        elif request.value is None:
            raise RequestError("Update value is required")
    elif isinstance(request, DiscountUpdate):
        if request.discount_value <= ZERO:
            raise RequestError("Discount value must be greater than 0")
        if (
            request.discount_type is DiscountType.PERCENTAGE
            and request.discount_value > MAX_PERCENTAGE_DISCOUNT
        ):
            raise RequestError(f"Percentage discount cannot exceed {MAX_PERCENTAGE_DISCOUNT}%")
        if (
            request.start_date is not None
            and request.end_date is not None
            and request.start_date > request.end_date
        ):
            raise RequestError("Discount start date must not be after its end date")
    else:
        raise RequestError(f"Unsupported bulk request: {type(request).__name__}")


# ---------------------------------------------------------------------------
# Offer conflicts
# ---------------------------------------------------------------------------


def detect_offer_conflicts(
    candidate: OfferTerms,
    catalog: Iterable,
    exclude_id: int | None = None,
) -> OfferCheck:
    """Compare a candidate offer against the rest of its category."""
    skip_id = exclude_id if exclude_id is not None else candidate.id
    peers = [
        p
        for p in catalog
        if p is not None
        and p.category == candidate.category
        and (skip_id is None or p.id != skip_id)
    ]

    conflicts: list[ConflictRecord] = []
    warnings: list[str] = []
    discount = candidate.discount

    if discount is None or not discount.is_active:
        return OfferCheck(conflicts, warnings)

    # Overlapping campaign windows
    for peer in peers:
        if peer.discount is not None and peer.discount.is_active and discount.overlaps(peer.discount):
            conflicts.append(
                ConflictRecord(
                    type=ConflictType.OVERLAPPING_DATES,
                    product_id=peer.id,
                    product_name=peer.name,
                    details=(
                        f"Overlapping discount period with {peer.name} "
                        f"({peer.discount.describe_window()})"
                    ),
                )
            )

    # Discount bounds, reported instead of rejected
    final_price = compute_final_price(candidate.price, discount.type, discount.value)
    if final_price < candidate.price * DEEP_DISCOUNT_RATIO:
        warnings.append(
            "Discount results in very low final price (less than 10% of original)"
        )
    if discount.type is DiscountType.PERCENTAGE and discount.value > MAX_PERCENTAGE_DISCOUNT:
        conflicts.append(
            ConflictRecord(
                type=ConflictType.EXCESSIVE_DISCOUNT,
                product_id=candidate.id,
                details=f"Percentage discount exceeds {MAX_PERCENTAGE_DISCOUNT}%",
            )
        )
    if discount.type is DiscountType.FIXED_AMOUNT and discount.value >= candidate.price:
        conflicts.append(
            ConflictRecord(
                type=ConflictType.INVALID_DISCOUNT,
                product_id=candidate.id,
                details="Fixed discount amount equals or exceeds product price",
            )
        )

    # Priority collisions are advisory only
    same_priority = [
        p
        for p in peers
        if p.discount is not None
        and p.discount.is_active
        and p.discount.priority == discount.priority
    ]
    if same_priority:
        warnings.append(
            f"{len(same_priority)} other products in {candidate.category} "
            f"have the same priority level"
        )

    if candidate.purchase_price > ZERO:
        margin = compute_margin(final_price, candidate.purchase_price)
        if margin < MIN_MARGIN_PERCENT:
            conflicts.append(
                ConflictRecord(
                    type=ConflictType.LOW_PROFIT_MARGIN,
                    product_id=candidate.id,
                    details=(
                        f"Discounted price results in {margin}% profit margin "
                        f"(minimum {MIN_MARGIN_PERCENT}% recommended)"
                    ),
                )
            )

    return OfferCheck(conflicts, warnings)
