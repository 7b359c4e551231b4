"""Application services: stand-alone pricing checks (queries).

Both checks report instead of raising, so a form can show the reason
next to the offending field before anything is submitted.
"""

from __future__ import annotations

from typing import Iterable

from pricing_engine.application.dto import (
    ConflictDTO,
    OfferCheckDTO,
    PricingTerms,
    ValidationResultDTO,
)
from pricing_engine.domain.exceptions import RuleError
from pricing_engine.domain.model.product import Product
from pricing_engine.domain.repository.catalog_store import CatalogStore
from pricing_engine.domain.service.validation import (
    OfferTerms,
    detect_offer_conflicts,
    validate_profit_rules,
)


class CheckProfitRulesHandler:

    def handle(self, terms: PricingTerms) -> ValidationResultDTO:
        try:
            validate_profit_rules(terms.price, terms.purchase_price, terms.discount)
        except RuleError as exc:
            return ValidationResultDTO(is_valid=False, error=str(exc))
        return ValidationResultDTO(is_valid=True)


class CheckOfferConflictsHandler:

    def __init__(self, store: CatalogStore) -> None:
        self._store = store

    def handle(
        self,
        candidate: OfferTerms,
        catalog: Iterable[Product] | None = None,
        exclude_id: int | None = None,
    ) -> OfferCheckDTO:
        """Check *candidate* against *catalog* (the live store by default)."""
        snapshot = list(catalog) if catalog is not None else self._store.list_all()
        result = detect_offer_conflicts(candidate, snapshot, exclude_id)
        return OfferCheckDTO(
            is_valid=result.is_valid,
            conflicts=[
                ConflictDTO(
                    type=c.type.value,
                    product_id=c.product_id,
                    details=c.details,
                    product_name=c.product_name,
                )
                for c in result.conflicts
            ],
            warnings=list(result.warnings),
            error=None if result.is_valid else "Offer conflicts detected",
        )
