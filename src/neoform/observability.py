"""In-process latency metrics for resource lifecycle operations.

Every reconciler call is wrapped in ``measure("<kind>.<operation>")``;
samples are aggregated per operation name and can be inspected with
``latency_metrics_snapshot()``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from threading import Lock
from time import perf_counter

logger = logging.getLogger(__name__)


@dataclass
class OperationStats:
    """Aggregated samples for one lifecycle operation."""

    calls: int = 0
    failures: int = 0
    total_ms: float = 0.0
    slowest_ms: float = 0.0
    last_ms: float = 0.0

    def add(self, duration_ms: float, ok: bool) -> None:
        self.calls += 1
        if not ok:
            self.failures += 1
        self.total_ms += duration_ms
        self.last_ms = duration_ms
        self.slowest_ms = max(self.slowest_ms, duration_ms)


class _OperationRecorder:
    def __init__(self) -> None:
        self._lock = Lock()
        self._stats: dict[str, OperationStats] = {}

    def record(self, operation: str, duration_ms: float, ok: bool) -> None:
        duration_ms = max(float(duration_ms), 0.0)
        with self._lock:
            self._stats.setdefault(operation, OperationStats()).add(duration_ms, ok)
        logger.debug(
            "operation=%s duration_ms=%.3f ok=%s", operation, duration_ms, ok
        )

    def snapshot(self) -> dict[str, dict[str, float | int]]:
        with self._lock:
            return {
                name: {
                    "calls": stats.calls,
                    "failures": stats.failures,
                    "avg_ms": round(stats.total_ms / stats.calls, 3)
                    if stats.calls
                    else 0.0,
                    "slowest_ms": round(stats.slowest_ms, 3),
                    "last_ms": round(stats.last_ms, 3),
                }
                for name, stats in sorted(self._stats.items())
            }

    def reset(self) -> None:
        with self._lock:
            self._stats.clear()


_RECORDER = _OperationRecorder()


def record_latency(*, operation: str, duration_ms: float, ok: bool = True) -> None:
    """Record one latency sample."""
    _RECORDER.record(operation, duration_ms, ok)


@contextmanager
def measure(operation: str) -> Iterator[None]:
    """Time the enclosed block; a raised exception counts as a failure."""
    start = perf_counter()
    ok = False
    try:
        yield
        ok = True
    finally:
        record_latency(
            operation=operation,
            duration_ms=(perf_counter() - start) * 1000,
            ok=ok,
        )


def latency_metrics_snapshot() -> dict[str, dict[str, float | int]]:
    """Return current aggregates keyed by operation name."""
    return _RECORDER.snapshot()


def reset_latency_metrics() -> None:
    """Clear all aggregates (test helper)."""
    _RECORDER.reset()
