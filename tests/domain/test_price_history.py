"""Unit tests for the price history recorder."""

from datetime import datetime, timezone
from decimal import Decimal

from pricing_engine.domain.service.price_history import (
    BULK_UPDATE,
    MANUAL_UPDATE,
    PriceHistoryRecorder,
)
from tests.fakes import FixedClock, make_product


class TestPriceHistoryRecorder:

    def test_records_a_change(self):
        recorder = PriceHistoryRecorder(clock=FixedClock())
        p = recorder.record_change(make_product(), Decimal("100"), Decimal("120"), "Admin", MANUAL_UPDATE)

        assert len(p.price_history) == 1
        entry = p.price_history[0]
        assert entry.old_price == Decimal("100")
        assert entry.new_price == Decimal("120")
        assert entry.actor == "Admin"
        assert entry.reason == "Manual update"
        assert entry.timestamp == datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)

    def test_unchanged_price_not_recorded(self):
        recorder = PriceHistoryRecorder(clock=FixedClock())
        original = make_product()
        assert recorder.record_change(original, Decimal("100"), Decimal("100.00"), "Admin", MANUAL_UPDATE) is original

    def test_history_most_recent_first(self):
        recorder = PriceHistoryRecorder(clock=FixedClock())
        p = make_product()
        p = recorder.record_change(p, Decimal("100"), Decimal("110"), "Admin", MANUAL_UPDATE)
        p = recorder.record_change(p, Decimal("110"), Decimal("121"), "Admin", BULK_UPDATE)

        history = PriceHistoryRecorder.history_of(p)

        assert [e.new_price for e in history] == [Decimal("121"), Decimal("110")]
        assert history[0].timestamp > history[1].timestamp

    def test_no_history_is_empty(self):
        assert PriceHistoryRecorder.history_of(make_product(previous_price=Decimal("90"))) == []
