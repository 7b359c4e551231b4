"""Offer conflict findings produced by the validation engine.

Conflicts block a pricing change; warnings are advisory and left to the
operator. Neither is ever persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ConflictType(Enum):
    OVERLAPPING_DATES = "overlapping_dates"
    EXCESSIVE_DISCOUNT = "excessive_discount"
    INVALID_DISCOUNT = "invalid_discount"
    LOW_PROFIT_MARGIN = "low_profit_margin"


@dataclass(frozen=True)
class ConflictRecord:
    type: ConflictType
    product_id: int | None
    details: str
    product_name: str | None = None


@dataclass(frozen=True)
class OfferCheck:
    conflicts: list[ConflictRecord] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.conflicts

    def has(self, conflict_type: ConflictType) -> bool:
        return any(c.type is conflict_type for c in self.conflicts)
