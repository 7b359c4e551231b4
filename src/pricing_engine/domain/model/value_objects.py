"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum

from pricing_engine.domain.exceptions import FieldError

CENT = Decimal("0.01")
ZERO = Decimal("0")


# ---------------------------------------------------------------------------
# Money helpers
# ---------------------------------------------------------------------------


def to_decimal(amount: str | float | int | Decimal, field_name: str = "amount") -> Decimal:
    """Coerce user input to Decimal safely.

    Floats go through ``str`` first so ``0.1`` stays ``0.1`` instead of the
    binary approximation.
    """
    if isinstance(amount, Decimal):
        result = amount
    elif isinstance(amount, bool):
        raise FieldError(f"Invalid {field_name}: {amount!r}")
    else:
        try:
            result = Decimal(str(amount).strip())
        except (InvalidOperation, ValueError) as exc:
            raise FieldError(f"Invalid {field_name}: {amount!r}") from exc
    if not result.is_finite():
        raise FieldError(f"Invalid {field_name}: {amount!r}")
    return result


def to_int(value: str | int, field_name: str = "value") -> int:
    if isinstance(value, bool):
        raise FieldError(f"Invalid {field_name}: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise FieldError(f"Invalid {field_name}: {value!r}") from exc


def round_money(amount: Decimal) -> Decimal:
    """Round half away from zero to two decimal places."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount: Decimal) -> str:
    return f"{round_money(amount):.2f}"


# ---------------------------------------------------------------------------
# Discounts
# ---------------------------------------------------------------------------


class DiscountType(Enum):
    PERCENTAGE = "Percentage"
    FIXED_AMOUNT = "Fixed Amount"

    @staticmethod
    def parse(raw: str | DiscountType) -> DiscountType:
        """Accept the spellings used by seed files and request payloads."""
        if isinstance(raw, DiscountType):
            return raw
        key = str(raw).strip().lower().replace("_", "").replace(" ", "")
        if key in ("percentage", "percent"):
            return DiscountType.PERCENTAGE
        if key in ("fixedamount", "fixed"):
            return DiscountType.FIXED_AMOUNT
        raise FieldError(f"Unknown discount type: {raw!r}")


DEFAULT_DISCOUNT_PRIORITY = 1


@dataclass(frozen=True)
class Discount:
    """A promotional discount attached to a product.

    ``start_date``/``end_date`` are optional; the window only takes part in
    overlap detection when both ends are known.
    """

    type: DiscountType
    value: Decimal
    start_date: date | None = None
    end_date: date | None = None
    priority: int = DEFAULT_DISCOUNT_PRIORITY

    def __post_init__(self) -> None:
        if not isinstance(self.value, Decimal):
            raise FieldError(
                f"Discount value must be a Decimal, got {type(self.value).__name__}"
            )
        if self.value < ZERO:
            raise FieldError("Discount value cannot be negative")
        if (
            self.start_date is not None
            and self.end_date is not None
            and self.start_date > self.end_date
        ):
            raise FieldError("Discount start date must not be after its end date")

    @property
    def is_active(self) -> bool:
        return self.value > ZERO

    @property
    def has_window(self) -> bool:
        return self.start_date is not None and self.end_date is not None

    def overlaps(self, other: Discount) -> bool:
        """Closed-interval overlap: ``s1 <= e2 and s2 <= e1``."""
        if not (self.has_window and other.has_window):
            return False
        return self.start_date <= other.end_date and other.start_date <= self.end_date  # type: ignore[operator]

    def describe_window(self) -> str:
        return f"{self.start_date} to {self.end_date}"

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(
        discount_type: str | DiscountType,
        value: str | float | int | Decimal,
        start_date: date | str | None = None,
        end_date: date | str | None = None,
        priority: int | str | None = None,
    ) -> Discount:
        """Convenient factory that coerces loose input."""
        return Discount(
            type=DiscountType.parse(discount_type),
            value=to_decimal(value, "discount value"),
            start_date=parse_date(start_date),
            end_date=parse_date(end_date),
            priority=_parse_priority(priority),
        )


def parse_date(raw: date | str | None) -> date | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    try:
        # Accept full ISO timestamps as well as plain dates.
        return date.fromisoformat(str(raw)[:10])
    except ValueError as exc:
        raise FieldError(f"Invalid date: {raw!r}") from exc


def _parse_priority(raw: int | str | None) -> int:
    if raw is None or raw == "":
        return DEFAULT_DISCOUNT_PRIORITY
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise FieldError(f"Invalid discount priority: {raw!r}") from exc
