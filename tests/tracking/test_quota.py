"""Tests for the monthly quota gate."""

from datetime import datetime, timezone

from shop_tracker.tracking.quota import QuotaGate


def _set_usage(store, **fields):
    doc = store.read()
    for name, value in fields.items():
        setattr(doc.usage, name, value)
    store.write(doc, "usage")


class TestQuotaGate:
    def test_fresh_window_allows(self, store):
        gate = QuotaGate(store)

        assert gate.may_proceed() is True
        assert gate.remaining() == 10

    def test_consume_counts(self, store):
        gate = QuotaGate(store)

        assert gate.consume() is True
        assert gate.consume() is True

        assert store.read().usage.analyses_used == 2
        assert gate.remaining() == 8

    def test_denied_at_limit_and_counter_unchanged(self, store, memory_backend):
        _set_usage(store, analyses_used=10)
        gate = QuotaGate(store)
        writes = memory_backend.writes

        assert gate.may_proceed() is False
        assert gate.consume() is False
        assert store.read().usage.analyses_used == 10
        assert memory_backend.writes == writes
        assert gate.remaining() == 0

    def test_last_unit_then_denied(self, store):
        _set_usage(store, analyses_used=9)
        gate = QuotaGate(store)

        assert gate.consume() is True
        assert gate.consume() is False
        assert store.read().usage.analyses_used == 10

    def test_pro_is_unmetered_but_still_counted(self, store):
        _set_usage(store, analyses_used=10, is_pro=True)
        gate = QuotaGate(store)

        assert gate.may_proceed() is True
        assert gate.remaining() is None
        assert gate.consume() is True
        assert store.read().usage.analyses_used == 11

    def test_zero_limit_denies(self, store):
        _set_usage(store, monthly_limit=0)
        assert QuotaGate(store).consume() is False


class TestRollover:
    def test_rollover_happens_before_check(self, store, clock):
        _set_usage(store, analyses_used=10)
        gate = QuotaGate(store)
        assert gate.may_proceed() is False

        clock.current = datetime(2026, 4, 1, 0, 0, 1, tzinfo=timezone.utc)

        assert gate.consume() is True
        usage = store.read().usage
        assert usage.analyses_used == 1
        assert usage.reset_date == datetime(2026, 5, 1, tzinfo=timezone.utc)

    def test_reset_instant_itself_does_not_roll(self, store, clock):
        _set_usage(store, analyses_used=10)
        clock.current = datetime(2026, 4, 1, tzinfo=timezone.utc)

        assert QuotaGate(store).may_proceed() is False

    def test_rollover_is_persisted_by_read(self, store, clock, memory_backend):
        _set_usage(store, analyses_used=3)
        clock.current = datetime(2026, 12, 15, tzinfo=timezone.utc)

        store.read()

        usage = memory_backend.data["usage"]
        assert usage["analyses_used"] == 0
        assert usage["reset_date"].startswith("2027-01-01T00:00:00")

    def test_rollover_keeps_plan_and_limit(self, store, clock):
        _set_usage(store, analyses_used=10, monthly_limit=25, is_pro=True)
        clock.advance(days=40)

        usage = store.read().usage
        assert usage.analyses_used == 0
        assert usage.monthly_limit == 25
        assert usage.is_pro is True
