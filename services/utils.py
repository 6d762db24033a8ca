"""
Shared utilities for common functionality across services.
"""
import re
import time
from datetime import date, datetime, timezone
from typing import Optional

from app_logging import log_with_context

VIDEO_ID_PATTERN = re.compile(r'(?:v=|youtu\.be/)([a-zA-Z0-9_-]+)')


def extract_video_id(url: Optional[str]) -> Optional[str]:
    """
    Extract video ID from a YouTube URL.

    Accepts a ``v=`` query parameter or a ``youtu.be/`` path segment; the
    first run of letters, digits, hyphens and underscores after it is the ID.

    Args:
        url: YouTube video URL

    Returns:
        Video ID or None if extraction fails
    """
    if not url:
        return None

    match = VIDEO_ID_PATTERN.search(url)
    return match.group(1) if match else None


def utc_today() -> date:
    """Current calendar date in UTC; quota days roll over at UTC midnight."""
    return datetime.now(timezone.utc).date()


class TimingContext:
    """Context manager for timing operations."""

    def __init__(self, operation_name: str):
        self.operation_name = operation_name
        self.start_time = None
        self.duration = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None:
            self.duration = time.perf_counter() - self.start_time
            log_with_context("info", f"{self.operation_name} took {self.duration:.2f}s")

    @property
    def elapsed_seconds(self) -> Optional[float]:
        """Get elapsed time in seconds."""
        return self.duration
