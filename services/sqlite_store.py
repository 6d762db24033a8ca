"""
SQLite-backed quota ledger and transcript cache.

Both stores share one connection. The default database is ``:memory:`` so state
lives for the lifetime of the process only.
"""
import sqlite3
import threading
import time
from contextlib import contextmanager
from datetime import date
from typing import Callable, Dict, Iterator, Optional, Tuple

from models import CacheEntry, QuotaDecision, StorageError, UsageRecord
from app_logging import log_with_context

SCHEMA = (
    """CREATE TABLE IF NOT EXISTS user_usage (
        user_id TEXT PRIMARY KEY,
        search_count INTEGER NOT NULL DEFAULT 0,
        last_reset TEXT NOT NULL
    )""",
    """CREATE TABLE IF NOT EXISTS transcript_cache (
        video_id TEXT PRIMARY KEY,
        captions TEXT NOT NULL,
        expires REAL NOT NULL
    )""",
)


class SQLiteDatabase:
    """Thread-safe wrapper around a single SQLite connection."""

    def __init__(self, path: str = ":memory:"):
        self.path = path
        self._lock = threading.RLock()
        try:
            self._connection = sqlite3.connect(path, check_same_thread=False)
            with self._connection:
                for statement in SCHEMA:
                    self._connection.execute(statement)
        except sqlite3.Error as e:
            log_with_context("error", f"Failed to initialise database at {path}: {str(e)}")
            raise StorageError("Database error") from e

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Hold the connection lock for one committed transaction."""
        with self._lock:
            try:
                with self._connection:
                    yield self._connection
            except sqlite3.Error as e:
                log_with_context("error", f"Database operation failed: {str(e)}", exc_info=True)
                raise StorageError("Database error") from e

    def close(self) -> None:
        with self._lock:
            self._connection.close()


class SQLiteUsageLedger:
    """Quota ledger persisted in the ``user_usage`` table.

    In-flight reservations are kept in memory next to the connection; only
    committed counts are written to the table.
    """

    def __init__(self, database: SQLiteDatabase):
        self._db = database
        self._pending: Dict[str, Tuple[date, int]] = {}

    def _load(self, conn: sqlite3.Connection, user_id: str, today: date) -> UsageRecord:
        row = conn.execute(
            "SELECT search_count, last_reset FROM user_usage WHERE user_id = ?", (user_id,)
        ).fetchone()

        if row is None or row[1] != today.isoformat():
            conn.execute(
                "INSERT OR REPLACE INTO user_usage (user_id, search_count, last_reset) VALUES (?, 0, ?)",
                (user_id, today.isoformat()),
            )
            count = 0
        else:
            count = row[0]

        pending_date, pending = self._pending.get(user_id, (today, 0))
        if pending_date != today:
            pending = 0
        return UsageRecord(user_id=user_id, count=count, reset_date=today, pending=pending)

    def check_and_reserve(self, user_id: str, today: date, max_per_day: int) -> QuotaDecision:
        with self._db.transaction() as conn:
            record = self._load(conn, user_id, today)
            if record.count + record.pending >= max_per_day:
                log_with_context("info", f"Quota exhausted for user {user_id}: {record.count}/{max_per_day}")
                return QuotaDecision(allowed=False, record=record)

            record.pending += 1
            self._pending[user_id] = (today, record.pending)
            return QuotaDecision(allowed=True, record=record)

    def commit(self, user_id: str, today: date) -> UsageRecord:
        with self._db.transaction() as conn:
            record = self._load(conn, user_id, today)
            conn.execute(
                "UPDATE user_usage SET search_count = search_count + 1 WHERE user_id = ?", (user_id,)
            )
            record.count += 1
            record.pending = max(record.pending - 1, 0)
            self._pending[user_id] = (today, record.pending)
            return record

    def release(self, user_id: str, today: date) -> None:
        with self._db.transaction():
            pending_date, pending = self._pending.get(user_id, (today, 0))
            if pending_date == today and pending > 0:
                self._pending[user_id] = (today, pending - 1)

    def get_record(self, user_id: str) -> Optional[UsageRecord]:
        with self._db.transaction() as conn:
            row = conn.execute(
                "SELECT search_count, last_reset FROM user_usage WHERE user_id = ?", (user_id,)
            ).fetchone()
            if row is None:
                return None
            reset_date = date.fromisoformat(row[1])
            pending_date, pending = self._pending.get(user_id, (reset_date, 0))
            return UsageRecord(
                user_id=user_id,
                count=row[0],
                reset_date=reset_date,
                pending=pending if pending_date == reset_date else 0,
            )


class SQLiteTranscriptCache:
    """Transcript cache persisted in the ``transcript_cache`` table."""

    def __init__(self, database: SQLiteDatabase, clock: Callable[[], float] = time.time):
        self._db = database
        self._clock = clock

    def get(self, video_id: str) -> Optional[CacheEntry]:
        with self._db.transaction() as conn:
            row = conn.execute(
                "SELECT captions, expires FROM transcript_cache WHERE video_id = ? AND expires > ?",
                (video_id, self._clock()),
            ).fetchone()
        if row is None:
            return None
        return CacheEntry(video_id=video_id, captions=row[0], expires_at=row[1])

    def put(self, video_id: str, captions: str, ttl_seconds: float) -> CacheEntry:
        entry = CacheEntry(video_id=video_id, captions=captions, expires_at=self._clock() + ttl_seconds)
        with self._db.transaction() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO transcript_cache (video_id, captions, expires) VALUES (?, ?, ?)",
                (entry.video_id, entry.captions, entry.expires_at),
            )
        return entry

    def size(self) -> int:
        with self._db.transaction() as conn:
            return conn.execute("SELECT COUNT(*) FROM transcript_cache").fetchone()[0]
