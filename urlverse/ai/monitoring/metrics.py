"""
Performance Metrics - Timing of pipeline operations.

Tracks how long the expensive steps of page generation take:
- page_generation: the whole pipeline, prompt to processed HTML
- api_call: the round trip to the generation API
- content_processing: fence stripping and attribute rewriting

Operations slower than their threshold are logged as warnings. The external
API dominates latency, so its threshold is the generous one.
"""

import logging
import time
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Deque, Dict, Iterator, List, Optional

logger = logging.getLogger("urlverse.ai.metrics")


@dataclass
class OperationTiming:
    """A single measured operation."""
    operation: str
    duration_ms: float
    success: bool = True
    context: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class OperationStats:
    """Aggregated timings of one operation name."""
    count: int = 0
    failures: int = 0
    total_ms: float = 0.0
    max_ms: float = 0.0
    slow_count: int = 0

    @property
    def avg_ms(self) -> float:
        if self.count == 0:
            return 0.0
        return self.total_ms / self.count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "failures": self.failures,
            "avg_ms": round(self.avg_ms, 2),
            "max_ms": round(self.max_ms, 2),
            "slow_count": self.slow_count,
        }


class PerformanceMonitor:
    """
    Records operation durations in a bounded in-memory buffer.

    Usage:
        monitor = PerformanceMonitor()

        with monitor.measure("api_call", model="gemini-2.5-flash-lite"):
            await client.generate(prompt)

        report = monitor.get_report()
    """

    # Warning thresholds in milliseconds
    THRESHOLDS_MS = {
        "api_call": 2000.0,
        "page_generation": 2500.0,
        "content_processing": 500.0,
    }
    DEFAULT_THRESHOLD_MS = 1000.0

    def __init__(self, max_history: int = 100):
        """
        Initialize the monitor.

        Args:
            max_history: Maximum number of timings to keep in memory
        """
        self._history: Deque[OperationTiming] = deque(maxlen=max_history)
        self._stats: Dict[str, OperationStats] = {}
        self._lock = Lock()

    def threshold_for(self, operation: str) -> float:
        return self.THRESHOLDS_MS.get(operation, self.DEFAULT_THRESHOLD_MS)

    @contextmanager
    def measure(self, operation: str, **context: Any) -> Iterator[Dict[str, Any]]:
        """
        Time the enclosed block.

        The yielded dict can be updated inside the block; a "success" key set
        to False marks the operation as failed. An exception escaping the
        block is recorded as a failure and re-raised.
        """
        outcome: Dict[str, Any] = {"success": True}
        start_time = time.perf_counter()
        try:
            yield outcome
        except BaseException:
            outcome["success"] = False
            raise
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            self.record(operation, duration_ms, success=bool(outcome.get("success")), **context)

    def record(
        self,
        operation: str,
        duration_ms: float,
        success: bool = True,
        **context: Any,
    ) -> OperationTiming:
        """Record a measured duration and warn if it exceeds the threshold."""
        timing = OperationTiming(
            operation=operation,
            duration_ms=duration_ms,
            success=success,
            context=context,
        )
        threshold = self.threshold_for(operation)
        slow = duration_ms > threshold

        with self._lock:
            self._history.append(timing)
            stats = self._stats.setdefault(operation, OperationStats())
            stats.count += 1
            stats.total_ms += duration_ms
            stats.max_ms = max(stats.max_ms, duration_ms)
            if not success:
                stats.failures += 1
            if slow:
                stats.slow_count += 1

        if slow:
            logger.warning(
                f"Slow operation: {operation} took {duration_ms:.0f}ms "
                f"(threshold {threshold:.0f}ms)"
            )
        else:
            logger.debug(f"{operation} took {duration_ms:.1f}ms")

        return timing

    def get_recent(self, limit: int = 10, operation: Optional[str] = None) -> List[OperationTiming]:
        """Most recent timings first."""
        with self._lock:
            timings = [t for t in self._history if operation is None or t.operation == operation]
        return list(reversed(timings))[:limit]

    def get_report(self) -> Dict[str, Dict[str, Any]]:
        """Aggregated statistics per operation."""
        with self._lock:
            return {name: stats.to_dict() for name, stats in self._stats.items()}

    def reset(self) -> None:
        """Reset all timings (useful for testing)."""
        with self._lock:
            self._history.clear()
            self._stats = {}


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
performance_monitor = PerformanceMonitor()
