"""Domain service: Price History Recorder.

Appends an audit entry to a product whenever its price value changes.
History is never synthesised: a product that was never repriced has an
empty history.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable

from pricing_engine.domain.model.price_history import PriceChangeEntry
from pricing_engine.domain.model.product import Product

logger = logging.getLogger(__name__)

MANUAL_UPDATE = "Manual update"
BULK_UPDATE = "Bulk update"
PARTIAL_UPDATE = "Partial price update"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PriceHistoryRecorder:

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._clock = clock

    def record_change(
        self,
        product: Product,
        old_price: Decimal,
        new_price: Decimal,
        actor: str,
        reason: str,
    ) -> Product:
        """Return *product* with a new history entry, if the price moved."""
        if old_price == new_price:
            return product
        entry = PriceChangeEntry(
            timestamp=self._clock(),
            old_price=old_price,
            new_price=new_price,
            actor=actor,
            reason=reason,
        )
        logger.info(
            "Price of product #%s changed %s -> %s by %s (%s)",
            product.id, old_price, new_price, actor, reason,
        )
        return product.append_history(entry)

    @staticmethod
    def history_of(product: Product) -> list[PriceChangeEntry]:
        """Most recent entry first."""
        return list(reversed(product.price_history))
