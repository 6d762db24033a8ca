"""
Observability service for search metrics.
"""
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Optional


@dataclass
class Metrics:
    """Service metrics."""
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    total_processing_time: float = 0.0
    error_counts: Dict[str, int] = field(default_factory=dict)
    last_updated: datetime = field(default_factory=datetime.now)


class ObservabilityService:
    """Records search outcomes for the metrics endpoint."""

    def __init__(self):
        self.metrics = Metrics()
        self.request_history = deque(maxlen=1000)
        self.start_time = datetime.now()
        self._lock = threading.Lock()

    def record_search(self, success: bool, processing_time: float,
                      error_code: Optional[str] = None, cache_hit: Optional[bool] = None):
        """Record the outcome of one search request."""
        now = datetime.now()

        with self._lock:
            self.metrics.total_requests += 1
            if success:
                self.metrics.successful_requests += 1
            else:
                self.metrics.failed_requests += 1
                if error_code:
                    self.metrics.error_counts[error_code] = self.metrics.error_counts.get(error_code, 0) + 1

            if cache_hit is True:
                self.metrics.cache_hits += 1
            elif cache_hit is False:
                self.metrics.cache_misses += 1

            self.metrics.total_processing_time += processing_time
            self.metrics.last_updated = now
            self.request_history.append({"timestamp": now, "success": success, "error_code": error_code})

    def get_metrics(self) -> Dict[str, Any]:
        """Get current metrics."""
        with self._lock:
            uptime = (datetime.now() - self.start_time).total_seconds()
            total = self.metrics.total_requests
            one_minute_ago = datetime.now() - timedelta(minutes=1)
            lookups = self.metrics.cache_hits + self.metrics.cache_misses

            return {
                "uptime_seconds": uptime,
                "uptime_human": str(timedelta(seconds=int(uptime))),
                "total_requests": total,
                "successful_requests": self.metrics.successful_requests,
                "failed_requests": self.metrics.failed_requests,
                "success_rate": self.metrics.successful_requests / total * 100 if total > 0 else 0,
                "average_processing_time": self.metrics.total_processing_time / total if total > 0 else 0,
                "requests_per_minute": sum(1 for r in self.request_history if r["timestamp"] >= one_minute_ago),
                "cache": {
                    "hits": self.metrics.cache_hits,
                    "misses": self.metrics.cache_misses,
                    "hit_rate": round(self.metrics.cache_hits / lookups * 100, 1) if lookups else 0,
                },
                "error_counts": dict(self.metrics.error_counts),
                "last_updated": self.metrics.last_updated.isoformat(),
            }

    def reset_metrics(self):
        """Reset all metrics."""
        with self._lock:
            self.metrics = Metrics()
            self.request_history.clear()
            self.start_time = datetime.now()


# Global instance
observability_service = ObservabilityService()
