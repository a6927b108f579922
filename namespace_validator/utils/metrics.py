"""
Metrics collection and emission for observability.

This module tracks, for a single validation run:
- Run duration
- Files validated and failed
- Comments posted
- GitHub API call counts and latency
"""

import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from namespace_validator.utils.logging import get_logger

logger = get_logger(__name__)


class RunMetrics:
    """
    Collects metrics during one validation run.

    Tracks:
    - Run start/end time
    - Files validated / failed
    - Comments posted / failed to post
    - API call counts and latency per endpoint
    """

    def __init__(self, pr_number: Optional[int] = None, organization: Optional[str] = None):
        """
        Initialize metrics collector.

        Args:
            pr_number: Pull request number, when known
            organization: Organization being validated against
        """
        self.pr_number = pr_number
        self.organization = organization

        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None
        self.duration_ms: Optional[int] = None

        self.files_validated: int = 0
        self.files_failed: int = 0
        self.failure_kinds: Dict[str, int] = {}
        self.comments_posted: int = 0
        self.comment_failures: int = 0

        self.api_calls: Dict[str, int] = {}
        self.api_latencies: Dict[str, List[float]] = {}

        self.status: str = "running"

    def start(self) -> None:
        """Mark run start."""
        self.start_time = datetime.now(timezone.utc)
        self.status = "running"
        logger.info(
            "Validation run started",
            extra={"pr_number": self.pr_number, "organization": self.organization},
        )

    def complete(self, status: str = "completed") -> None:
        """
        Mark run completion.

        Args:
            status: Final status ('passed', 'failed', 'aborted')
        """
        self.end_time = datetime.now(timezone.utc)
        self.status = status

        if self.start_time:
            duration = (self.end_time - self.start_time).total_seconds()
            self.duration_ms = int(duration * 1000)

        logger.info(
            "Validation run completed",
            extra={"pr_number": self.pr_number, **self.get_metrics_summary()},
        )

    def record_file(self, passed: bool, error_kind: Optional[str] = None) -> None:
        """Record one validated file."""
        self.files_validated += 1
        if not passed:
            self.files_failed += 1
            if error_kind:
                self.failure_kinds[error_kind] = self.failure_kinds.get(error_kind, 0) + 1

    def record_comment(self, success: bool) -> None:
        """Record a comment post attempt."""
        if success:
            self.comments_posted += 1
        else:
            self.comment_failures += 1

    def record_api_call(self, endpoint: str, duration_ms: float) -> None:
        """
        Record API call and latency.

        Args:
            endpoint: Logical endpoint name (e.g., 'team_membership')
            duration_ms: Call duration in milliseconds
        """
        self.api_calls[endpoint] = self.api_calls.get(endpoint, 0) + 1
        self.api_latencies.setdefault(endpoint, []).append(duration_ms)

    def get_metrics_summary(self) -> Dict[str, Any]:
        """
        Get summary of collected metrics.

        Returns:
            Dictionary of metrics
        """
        summary: Dict[str, Any] = {
            "status": self.status,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_ms": self.duration_ms,
            "files_validated": self.files_validated,
            "files_failed": self.files_failed,
            "failure_kinds": self.failure_kinds,
            "comments_posted": self.comments_posted,
            "comment_failures": self.comment_failures,
            "api_calls": self.api_calls,
        }

        if self.api_latencies:
            summary["api_latencies"] = {
                endpoint: {
                    "count": len(latencies),
                    "min_ms": round(min(latencies), 2),
                    "max_ms": round(max(latencies), 2),
                    "avg_ms": round(sum(latencies) / len(latencies), 2),
                }
                for endpoint, latencies in self.api_latencies.items()
                if latencies
            }

        return summary


@contextmanager
def track_api_call(metrics: Optional[RunMetrics], endpoint: str) -> Iterator[None]:
    """
    Context manager to time an API call into the run metrics.

    Usage:
        with track_api_call(metrics, "repository"):
            response = client.get(path)
    """
    start_time = time.perf_counter()
    try:
        yield
    finally:
        if metrics is not None:
            metrics.record_api_call(endpoint, (time.perf_counter() - start_time) * 1000)


def emit_metric(metric_name: str, value: float, **tags: Any) -> None:
    """
    Emit a single metric as a structured log line.

    Args:
        metric_name: Metric name
        value: Metric value
        **tags: Metric tags/labels
    """
    logger.info(
        f"Metric: {metric_name}",
        extra={
            "metric_name": metric_name,
            "metric_value": value,
            "metric_tags": tags,
        }
    )
