"""Domain service: Bulk Update Orchestrator.

Applies one pricing strategy (or a category-wide discount) to a filtered
slice of the catalog. The request is validated once, up front; after that
every record is resolved and committed on its own:

  1. Filter: category (unless "all"), then low stock if requested.
  2. Resolve: strategy price, or discount with the conflict policy.
  3. Guard: clamp to [1, 100000], then to the request's bounds.
  4. Commit: only if the price moved by more than one cent and the
     resulting record still passes the profit rules.

There is no rollback across records: a record that cannot be updated is
left as it was and the batch carries on. Unlike the partial-update path,
no per-record errors are reported, only the summary counts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from pricing_engine.domain.exceptions import RuleError
from pricing_engine.domain.model.bulk_request import (
    BulkUpdateRequest,
    ConflictResolution,
    DiscountUpdate,
    PricingStrategy,
    PricingUpdate,
)
from pricing_engine.domain.model.product import Product
from pricing_engine.domain.model.value_objects import Discount, DiscountType, round_money
from pricing_engine.domain.repository.catalog_store import CatalogStore
from pricing_engine.domain.service.calculator import (
    HUNDRED,
    compute_final_price,
    discount_amount,
)
from pricing_engine.domain.service.price_history import BULK_UPDATE, PriceHistoryRecorder
from pricing_engine.domain.service.validation import (
    MAX_PRICE,
    MIN_PRICE,
    validate_bulk_update_request,
    validate_profit_rules,
)

logger = logging.getLogger(__name__)

PRICE_EPSILON = Decimal("0.01")
MAX_REPORTED_CONFLICTS = 5


@dataclass(frozen=True)
class BulkUpdateSummary:
    updated_count: int
    total_filtered: int
    conflict_count: int
    strategy: str
    conflict_products: list[Product] = field(default_factory=list)


@dataclass(frozen=True)
class PricePreview:
    """What a bulk request would do to one product, without doing it."""

    product_id: int
    name: str
    current_price: Decimal
    new_price: Decimal
    skipped: bool = False

    @property
    def price_change(self) -> Decimal:
        return self.new_price - self.current_price


@dataclass(frozen=True)
class _Resolution:
    new_price: Decimal | None = None  # None: keep the record as it is
    discount: Discount | None = None
    skipped: bool = False


class BulkUpdateOrchestrator:

    def __init__(
        self,
        store: CatalogStore,
        recorder: PriceHistoryRecorder | None = None,
        actor: str = "Admin",
    ) -> None:
        self._store = store
        self._recorder = recorder or PriceHistoryRecorder()
        self._actor = actor

    def apply(self, request: BulkUpdateRequest) -> BulkUpdateSummary:
        validate_bulk_update_request(request)

        updated = 0
        conflicts: list[Product] = []

        with self._store.write_lock():
            targets = self._filter(request)
            for product in targets:
                resolution = self._resolve(product, request)
                if resolution.skipped:
                    conflicts.append(product)
                    continue
                if resolution.new_price is None:
                    continue
                if abs(resolution.new_price - product.price) <= PRICE_EPSILON:
                    continue
                if self._commit(product, resolution, request):
                    updated += 1

        logger.info(
            "Bulk %s update: %d of %d products updated, %d conflicts",
            request.strategy_name, updated, len(targets), len(conflicts),
        )
        return BulkUpdateSummary(
            updated_count=updated,
            total_filtered=len(targets),
            conflict_count=len(conflicts),
            strategy=request.strategy_name,
            conflict_products=conflicts[:MAX_REPORTED_CONFLICTS],
        )

    def preview(self, request: BulkUpdateRequest) -> list[PricePreview]:
        validate_bulk_update_request(request)
        lines: list[PricePreview] = []
        for product in self._filter(request):
            resolution = self._resolve(product, request)
            new_price = resolution.new_price if resolution.new_price is not None else product.price
            lines.append(
                PricePreview(
                    product_id=product.id,
                    name=product.name,
                    current_price=product.price,
                    new_price=new_price,
                    skipped=resolution.skipped,
                )
            )
        return lines

    # --- Internal helpers -----------------------------------------------------

    def _filter(self, request: BulkUpdateRequest) -> list[Product]:
        return [p for p in self._store.list_all() if request.product_filter.matches(p)]

    def _resolve(self, product: Product, request: BulkUpdateRequest) -> _Resolution:
        original = product.price

        if isinstance(request, PricingUpdate):
            new_price = self._strategy_price(original, request)
            return _Resolution(new_price=self._guard(new_price, request), discount=product.discount)

        if isinstance(request, DiscountUpdate):
            offered = Discount(
                type=request.discount_type,
                value=request.discount_value,
                start_date=request.start_date,
                end_date=request.end_date,
                priority=product.discount_priority,
            )
            if product.has_discount:
                policy = request.conflict_resolution
                if policy is ConflictResolution.SKIP:
                    return _Resolution(skipped=True)
                if policy is ConflictResolution.MERGE and not self._is_deeper(
                    original, offered, product.discount
                ):
                    return _Resolution()

            if request.discount_type is DiscountType.FIXED_AMOUNT and offered.value >= original:
                return _Resolution()

            new_price = compute_final_price(original, offered.type, offered.value)
            return _Resolution(new_price=self._guard(new_price, request), discount=offered)

        return _Resolution()

    @staticmethod
    def _strategy_price(price: Decimal, request: PricingUpdate) -> Decimal:
        if request.strategy is PricingStrategy.PERCENTAGE:
            return price * (1 + request.value / HUNDRED)
        if request.strategy is PricingStrategy.FIXED:
            return price + request.value
        return min(max(price, request.min_price), request.max_price)

    @staticmethod
    def _is_deeper(price: Decimal, offered: Discount, existing: Discount) -> bool:
        """Merge keeps whichever discount takes more currency off *price*."""
        return discount_amount(price, offered.type, offered.value) > discount_amount(
            price, existing.type, existing.value
        )

    @staticmethod
    def _guard(price: Decimal, request: BulkUpdateRequest) -> Decimal:
        price = min(max(price, MIN_PRICE), MAX_PRICE)
        if request.min_price is not None and price < request.min_price:
            price = request.min_price
        if request.max_price is not None and price > request.max_price:
            price = request.max_price
        return round_money(price)

    def _commit(
        self,
        product: Product,
        resolution: _Resolution,
        request: BulkUpdateRequest,
    ) -> bool:
        patch: dict = {"price": resolution.new_price, "previous_price": product.price}
        if isinstance(request, DiscountUpdate):
            patch["discount"] = resolution.discount
        candidate = product.merge(patch)

        # The stored discount still applies on top of the committed price.
        try:
            validate_profit_rules(candidate.price, candidate.purchase_price, candidate.discount)
        except RuleError as exc:
            logger.debug("Product #%s left unchanged: %s", product.id, exc)
            return False

        candidate = self._recorder.record_change(
            candidate, product.price, candidate.price, self._actor, BULK_UPDATE
        )
        self._store.upsert(candidate)
        return True
