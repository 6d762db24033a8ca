"""
Per-user daily search quota with reserve/commit accounting.
"""
import threading
from dataclasses import replace
from datetime import date
from typing import Dict, Optional, Protocol

from models import QuotaDecision, UsageRecord
from app_logging import log_with_context


class UsageLedgerStore(Protocol):
    """Store protocol for per-user daily quota accounting."""

    def check_and_reserve(self, user_id: str, today: date, max_per_day: int) -> QuotaDecision:
        """Reserve one search slot for ``today`` if the user is under the limit."""
        ...

    def commit(self, user_id: str, today: date) -> UsageRecord:
        """Charge a reserved slot after a successful search."""
        ...

    def release(self, user_id: str, today: date) -> None:
        """Give a reserved slot back without charging it."""
        ...

    def get_record(self, user_id: str) -> Optional[UsageRecord]:
        """Read-only snapshot of a user's record."""
        ...


def normalise_record(record: Optional[UsageRecord], user_id: str, today: date) -> UsageRecord:
    """
    Return the record as it applies to ``today``.

    A missing record or one from an earlier day is replaced by a fresh one;
    counts never carry over between days.
    """
    if record is None or record.reset_date != today:
        return UsageRecord(user_id=user_id, count=0, reset_date=today)
    return record


class UsageLedger:
    """In-memory quota ledger.

    A successful reservation holds a slot (``pending``) until it is either
    committed or released, so concurrent requests of the same user cannot
    overshoot the daily limit.
    """

    def __init__(self):
        self._records: Dict[str, UsageRecord] = {}
        self._lock = threading.Lock()

    def check_and_reserve(self, user_id: str, today: date, max_per_day: int) -> QuotaDecision:
        """
        Check the user's quota and reserve one slot if available.

        Args:
            user_id: Authenticated user ID
            today: Current calendar date
            max_per_day: Daily limit of successful searches

        Returns:
            QuotaDecision with a snapshot of the normalised record
        """
        with self._lock:
            record = normalise_record(self._records.get(user_id), user_id, today)

            if record.count + record.pending >= max_per_day:
                self._records[user_id] = record
                log_with_context("info", f"Quota exhausted for user {user_id}: {record.count}/{max_per_day}")
                return QuotaDecision(allowed=False, record=replace(record))

            record.pending += 1
            self._records[user_id] = record
            return QuotaDecision(allowed=True, record=replace(record))

    def commit(self, user_id: str, today: date) -> UsageRecord:
        """Increment the stored count by one and consume a reservation."""
        with self._lock:
            record = normalise_record(self._records.get(user_id), user_id, today)
            record.count += 1
            record.pending = max(record.pending - 1, 0)
            self._records[user_id] = record
            return replace(record)

    def release(self, user_id: str, today: date) -> None:
        """Drop a reservation without charging it."""
        with self._lock:
            record = self._records.get(user_id)
            # A reservation from a previous day vanished with the reset.
            if record is None or record.reset_date != today:
                return
            record.pending = max(record.pending - 1, 0)

    def get_record(self, user_id: str) -> Optional[UsageRecord]:
        """Get a copy of the stored record for a user."""
        with self._lock:
            record = self._records.get(user_id)
            return replace(record) if record else None
