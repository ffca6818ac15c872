"""
Usage limits consulted before a run and updated after it.

The enhancer only asks a :class:`UsagePolicy` whether the caller is limited
and how many rows it may process, and reports how many rows it processed.
Where the counters live is up to the policy implementation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Protocol, runtime_checkable

from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TierLimits:
    """Limits for one tier of caller.

    Attributes:
        max_entries_per_use: Rows processed per run.
        max_uses_per_month: Runs per calendar month (``None`` = unlimited).
    """

    max_entries_per_use: int
    max_uses_per_month: Optional[int] = None


FREE_TIER = TierLimits(max_entries_per_use=50, max_uses_per_month=2)
PAID_TIER = TierLimits(max_entries_per_use=500)


@runtime_checkable
class UsagePolicy(Protocol):
    """What the enhancer needs from a quota service."""

    def is_limited(self) -> bool: ...

    def max_rows_to_process(self) -> int: ...

    def record_usage(self, rows_processed: int) -> None: ...


class UnlimitedUsage:
    """Policy that never limits; used when no quota service is configured."""

    def is_limited(self) -> bool:
        return False

    def max_rows_to_process(self) -> int:
        return 2 ** 31 - 1

    def record_usage(self, rows_processed: int) -> None:
        logger.debug("Processed %d rows (unlimited usage)", rows_processed)


class MonthlyUsageTracker:
    """In-process usage counter with a free and a paid tier.

    Free callers get a fixed number of runs per calendar month; the counter
    resets on the first check in a new month. Paid callers are never
    limited but still have a per-run row cap.
    """

    def __init__(
        self,
        is_paid: bool = False,
        free_tier: TierLimits = FREE_TIER,
        paid_tier: TierLimits = PAID_TIER,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.is_paid = is_paid
        self.free_tier = free_tier
        self.paid_tier = paid_tier
        self._clock = clock
        self.count = 0
        self.rows_processed = 0
        self.last_reset = clock()

    @property
    def tier(self) -> TierLimits:
        return self.paid_tier if self.is_paid else self.free_tier

    def _reset_if_new_month(self) -> None:
        now = self._clock()
        if (now.year, now.month) != (self.last_reset.year, self.last_reset.month):
            logger.info("Resetting monthly usage counter")
            self.count = 0
            self.last_reset = now

    def is_limited(self) -> bool:
        """True when the monthly run allowance is used up."""
        self._reset_if_new_month()
        limit = self.tier.max_uses_per_month
        if limit is None:
            return False
        return self.count >= limit

    def max_rows_to_process(self) -> int:
        return self.tier.max_entries_per_use

    def record_usage(self, rows_processed: int) -> None:
        self._reset_if_new_month()
        self.count += 1
        self.rows_processed += rows_processed

    def remaining_uses(self) -> Optional[int]:
        """Runs left this month, or ``None`` when unlimited."""
        self._reset_if_new_month()
        limit = self.tier.max_uses_per_month
        if limit is None:
            return None
        return max(0, limit - self.count)

    def usage_message(self) -> str:
        remaining = self.remaining_uses()
        if remaining is None:
            return "You have premium access."
        return f"Free uses remaining this month: {remaining}"
