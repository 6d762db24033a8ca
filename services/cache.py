"""
In-memory cache for caption documents with TTL.
"""
import threading
import time
from typing import Callable, Dict, Optional, Protocol

from models import CacheEntry


class TranscriptCacheStore(Protocol):
    """Store protocol for cached caption documents keyed by video ID."""

    def get(self, video_id: str) -> Optional[CacheEntry]:
        """Return the entry only while it is still fresh."""
        ...

    def put(self, video_id: str, captions: str, ttl_seconds: float) -> CacheEntry:
        """Overwrite the entry for ``video_id`` with a new expiry."""
        ...


class TranscriptCache:
    """Simple in-memory cache for caption documents with TTL.

    Stale entries are not purged; they stay in the store and are shadowed
    until the next ``put`` for the same video overwrites them.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        """
        Initialize the cache.

        Args:
            clock: Source of the current time in epoch seconds
        """
        self._cache: Dict[str, CacheEntry] = {}
        self._clock = clock
        self._lock = threading.Lock()

    def get(self, video_id: str) -> Optional[CacheEntry]:
        """
        Get the cached captions for a video.

        Args:
            video_id: YouTube video ID

        Returns:
            Cache entry, or None if not found or expired
        """
        with self._lock:
            entry = self._cache.get(video_id)

        if entry is None or self._clock() >= entry.expires_at:
            return None
        return entry

    def put(self, video_id: str, captions: str, ttl_seconds: float) -> CacheEntry:
        """
        Cache captions for a video.

        Args:
            video_id: YouTube video ID
            captions: Raw caption document
            ttl_seconds: Time to live in seconds

        Returns:
            The stored entry
        """
        entry = CacheEntry(
            video_id=video_id,
            captions=captions,
            expires_at=self._clock() + ttl_seconds,
        )
        with self._lock:
            self._cache[video_id] = entry
        return entry

    def clear(self) -> None:
        """Clear all cached captions."""
        with self._lock:
            self._cache.clear()

    def size(self) -> int:
        """Get number of stored entries, stale ones included."""
        with self._lock:
            return len(self._cache)
