"""Price change audit entries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class PriceChangeEntry:
    """One immutable line of a product's price audit trail."""

    timestamp: datetime
    old_price: Decimal
    new_price: Decimal
    actor: str
    reason: str

    @property
    def change(self) -> Decimal:
        return self.new_price - self.old_price
