"""Unit tests for offer conflict detection."""

from pricing_engine.domain.model.conflicts import ConflictType
from pricing_engine.domain.model.value_objects import Discount
from pricing_engine.domain.service.validation import detect_offer_conflicts
from tests.fakes import make_product


def _windowed(product_id, start, end, category="Snacks", **kwargs):
    return make_product(
        product_id=product_id,
        name=f"Item {product_id}",
        category=category,
        discount=Discount.of("percentage", "10", start, end),
        **kwargs,
    )


class TestOverlappingDates:

    def test_overlap_reported_once(self):
        a = _windowed(1, "2026-01-01", "2026-01-10")
        b = _windowed(2, "2026-01-05", "2026-01-15")

        result = detect_offer_conflicts(a, [a, b])

        overlaps = [c for c in result.conflicts if c.type is ConflictType.OVERLAPPING_DATES]
        assert len(overlaps) == 1
        assert overlaps[0].product_id == 2
        assert "Item 2" in overlaps[0].details
        assert not result.is_valid

    def test_overlap_is_symmetric(self):
        a = _windowed(1, "2026-01-01", "2026-01-10")
        b = _windowed(2, "2026-01-05", "2026-01-15")
        assert detect_offer_conflicts(a, [a, b]).has(ConflictType.OVERLAPPING_DATES)
        assert detect_offer_conflicts(b, [a, b]).has(ConflictType.OVERLAPPING_DATES)

    def test_other_category_ignored(self):
        a = _windowed(1, "2026-01-01", "2026-01-10")
        b = _windowed(2, "2026-01-05", "2026-01-15", category="Drinks")
        assert not detect_offer_conflicts(a, [a, b]).has(ConflictType.OVERLAPPING_DATES)

    def test_disjoint_windows(self):
        a = _windowed(1, "2026-01-01", "2026-01-04")
        b = _windowed(2, "2026-01-05", "2026-01-15")
        assert detect_offer_conflicts(a, [a, b]).is_valid

    def test_exclude_id_skips_stored_copy(self):
        stored = _windowed(1, "2026-01-01", "2026-01-10")
        edited = _windowed(1, "2026-01-03", "2026-01-12")
        assert detect_offer_conflicts(edited, [stored], exclude_id=1).is_valid


class TestDiscountFindings:

    def test_no_discount_means_no_findings(self):
        a = make_product(product_id=1, category="Snacks")
        b = _windowed(2, "2026-01-05", "2026-01-15")
        result = detect_offer_conflicts(a, [a, b])
        assert result.conflicts == []
        assert result.warnings == []

    def test_excessive_percentage(self):
        p = make_product(discount=Discount.of("percentage", "95"))
        result = detect_offer_conflicts(p, [p])
        assert result.has(ConflictType.EXCESSIVE_DISCOUNT)
        assert any("less than 10% of original" in w for w in result.warnings)

    def test_fixed_discount_at_price(self):
        p = make_product(price="50", discount=Discount.of("fixed", "50"))
        assert detect_offer_conflicts(p, [p]).has(ConflictType.INVALID_DISCOUNT)

    def test_low_margin_after_discount(self):
        p = make_product(price="100", purchase_price="85", discount=Discount.of("percentage", "12"))
        result = detect_offer_conflicts(p, [p])
        assert result.has(ConflictType.LOW_PROFIT_MARGIN)
        assert "3.53%" in result.conflicts[-1].details

    def test_healthy_offer_is_valid(self):
        p = make_product(price="100", purchase_price="50", discount=Discount.of("percentage", "10"))
        assert detect_offer_conflicts(p, [p]).is_valid


class TestPriorityWarnings:

    def test_same_priority_warns(self):
        a = make_product(1, category="Snacks", discount=Discount.of("fixed", "5", priority=2))
        b = make_product(2, category="Snacks", discount=Discount.of("fixed", "5", priority=2))
        c = make_product(3, category="Snacks", discount=Discount.of("fixed", "5", priority=2))

        result = detect_offer_conflicts(a, [a, b, c])

        assert "2 other products in Snacks have the same priority level" in result.warnings
        assert result.is_valid

    def test_undiscounted_peers_not_counted(self):
        a = make_product(1, category="Snacks", discount=Discount.of("fixed", "5"))
        b = make_product(2, category="Snacks")
        assert detect_offer_conflicts(a, [a, b]).warnings == []
