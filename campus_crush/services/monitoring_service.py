"""
Monitoring Service

Keeps a bounded, in-memory window of request metrics and unhandled errors
so admins can check latency and error rates without an external stack.

- Request metrics: recorded by the HTTP middleware in main.py
- Errors: recorded by the catch-all exception handler
- Stats: computed over the last hour on demand
"""

import threading
from collections import defaultdict, deque
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from campus_crush.core.config import get_settings
from campus_crush.core.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)

STATS_WINDOW = timedelta(hours=1)


@dataclass
class RequestMetric:
    endpoint: str
    method: str
    duration_ms: float
    status_code: int
    timestamp: datetime
    user_id: Optional[int] = None


@dataclass
class ErrorRecord:
    message: str
    endpoint: str
    method: str
    status_code: int
    timestamp: datetime
    user_id: Optional[int] = None


class MonitoringService:

    def __init__(self, max_metrics: int = None, max_errors: int = None, slow_request_ms: int = None):
        self.slow_request_ms = slow_request_ms or settings.slow_request_ms
        self.metrics = deque(maxlen=max_metrics or settings.monitoring_max_metrics)
        self.errors = deque(maxlen=max_errors or settings.monitoring_max_errors)
        self._lock = threading.Lock()

    def record_request(
        self,
        endpoint: str,
        method: str,
        duration_ms: float,
        status_code: int,
        user_id: Optional[int] = None
    ) -> None:
        metric = RequestMetric(
            endpoint=endpoint,
            method=method,
            duration_ms=duration_ms,
            status_code=status_code,
            timestamp=datetime.utcnow(),
            user_id=user_id
        )
        with self._lock:
            self.metrics.append(metric)

        if duration_ms > self.slow_request_ms:
            logger.warning("Slow request: %s %s took %dms", method, endpoint, duration_ms)

    def record_error(
        self,
        error: Exception,
        endpoint: str,
        method: str,
        status_code: int = 500,
        user_id: Optional[int] = None
    ) -> None:
        record = ErrorRecord(
            message=str(error) or error.__class__.__name__,
            endpoint=endpoint,
            method=method,
            status_code=status_code,
            timestamp=datetime.utcnow(),
            user_id=user_id
        )
        with self._lock:
            self.errors.append(record)

    def _recent_metrics(self) -> List[RequestMetric]:
        cutoff = datetime.utcnow() - STATS_WINDOW
        with self._lock:
            return [m for m in self.metrics if m.timestamp > cutoff]

    def performance_stats(self) -> dict:
        """Totals for the last hour."""
        recent = self._recent_metrics()
        if not recent:
            return {
                "total_requests": 0,
                "average_response_time": 0,
                "error_rate": 0.0,
                "slow_requests": 0,
                "time_window": "1 hour"
            }

        total = len(recent)
        avg_ms = sum(m.duration_ms for m in recent) / total
        error_count = sum(1 for m in recent if m.status_code >= 400)
        slow = sum(1 for m in recent if m.duration_ms > self.slow_request_ms)

        return {
            "total_requests": total,
            "average_response_time": round(avg_ms),
            "error_rate": round(error_count / total * 100, 2),
            "slow_requests": slow,
            "time_window": "1 hour"
        }

    def recent_errors(self, limit: int = 10) -> List[dict]:
        """Latest errors, newest first."""
        with self._lock:
            latest = list(self.errors)[-limit:] if limit > 0 else []
        return [
            {
                "message": e.message,
                "endpoint": e.endpoint,
                "method": e.method,
                "timestamp": e.timestamp,
                "status_code": e.status_code,
                "user_id": e.user_id
            } for e in reversed(latest)
        ]

    def endpoint_stats(self) -> List[dict]:
        """Per-endpoint breakdown for the last hour, busiest first."""
        buckets: Dict[str, dict] = defaultdict(lambda: {"count": 0, "total_ms": 0.0, "errors": 0})

        for m in self._recent_metrics():
            bucket = buckets[f"{m.method} {m.endpoint}"]
            bucket["count"] += 1
            bucket["total_ms"] += m.duration_ms
            if m.status_code >= 400:
                bucket["errors"] += 1

        stats = [
            {
                "endpoint": endpoint,
                "request_count": b["count"],
                "average_response_time": round(b["total_ms"] / b["count"]),
                "error_count": b["errors"],
                "error_rate": round(b["errors"] / b["count"] * 100, 2)
            } for endpoint, b in buckets.items()
        ]
        return sorted(stats, key=lambda s: s["request_count"], reverse=True)

    def reset(self) -> None:
        with self._lock:
            self.metrics.clear()
            self.errors.clear()


# Singleton instance
_monitoring_service: MonitoringService = None


def get_monitoring_service() -> MonitoringService:
    """Get or create the monitoring service (singleton pattern)"""
    global _monitoring_service
    if _monitoring_service is None:
        _monitoring_service = MonitoringService()
    return _monitoring_service
