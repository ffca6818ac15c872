"""Tests for usage policies and the monthly tracker."""

from __future__ import annotations

from datetime import datetime

from metasmith.core.usage import (
    FREE_TIER,
    PAID_TIER,
    MonthlyUsageTracker,
    TierLimits,
    UnlimitedUsage,
    UsagePolicy,
)


class _Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class TestTiers:
    def test_free_tier(self):
        assert FREE_TIER.max_entries_per_use == 50
        assert FREE_TIER.max_uses_per_month == 2

    def test_paid_tier_unlimited_runs(self):
        assert PAID_TIER.max_entries_per_use == 500
        assert PAID_TIER.max_uses_per_month is None


class TestUnlimitedUsage:
    def test_never_limited(self):
        usage = UnlimitedUsage()
        usage.record_usage(10_000)
        assert usage.is_limited() is False
        assert usage.max_rows_to_process() >= 5000

    def test_satisfies_protocol(self):
        assert isinstance(UnlimitedUsage(), UsagePolicy)
        assert isinstance(MonthlyUsageTracker(), UsagePolicy)


class TestMonthlyUsageTracker:
    def test_free_tier_limited_after_two_runs(self):
        tracker = MonthlyUsageTracker(clock=_Clock(datetime(2024, 3, 5)))
        assert tracker.max_rows_to_process() == 50
        assert tracker.is_limited() is False

        tracker.record_usage(50)
        assert tracker.remaining_uses() == 1
        tracker.record_usage(20)

        assert tracker.is_limited() is True
        assert tracker.remaining_uses() == 0
        assert tracker.rows_processed == 70
        assert tracker.usage_message() == "Free uses remaining this month: 0"

    def test_new_month_resets_count(self):
        clock = _Clock(datetime(2024, 1, 31))
        tracker = MonthlyUsageTracker(clock=clock)
        tracker.record_usage(1)
        tracker.record_usage(1)
        assert tracker.is_limited() is True

        clock.now = datetime(2024, 2, 1)
        assert tracker.is_limited() is False
        assert tracker.count == 0
        assert tracker.last_reset == datetime(2024, 2, 1)

    def test_same_month_next_year_resets(self):
        clock = _Clock(datetime(2024, 5, 1))
        tracker = MonthlyUsageTracker(clock=clock)
        tracker.record_usage(1)
        clock.now = datetime(2025, 5, 1)
        assert tracker.remaining_uses() == 2

    def test_paid_tier(self):
        tracker = MonthlyUsageTracker(is_paid=True)
        for _ in range(10):
            tracker.record_usage(500)
        assert tracker.is_limited() is False
        assert tracker.max_rows_to_process() == 500
        assert tracker.remaining_uses() is None
        assert tracker.usage_message() == "You have premium access."

    def test_custom_tier(self):
        tracker = MonthlyUsageTracker(free_tier=TierLimits(max_entries_per_use=5, max_uses_per_month=1))
        tracker.record_usage(5)
        assert tracker.is_limited() is True
        assert tracker.max_rows_to_process() == 5
