"""In-process metrics for the pipeline.

Counters named ``messages.<event>.<queue>`` are additionally rolled up per
queue in the snapshot, so the health endpoint can show the traffic of each
pipeline stage at a glance.
"""

import time
from collections import defaultdict
from contextlib import contextmanager
from typing import Any

from ..ports.metrics import MetricsPort

QUEUE_COUNTER_PREFIX = "messages."


class MetricsSummary:
    """Running count/min/max/average of recorded values."""

    def __init__(self):
        self.count = 0
        self.total = 0.0
        self.min = float("inf")
        self.max = float("-inf")

    def add(self, value: float) -> None:
        self.count += 1
        self.total += value
        if value < self.min:
            self.min = value
        if value > self.max:
            self.max = value

    def to_dict(self) -> dict[str, float]:
        if not self.count:
            return {"count": 0, "average": 0.0, "min": 0.0, "max": 0.0}
        return {
            "count": self.count,
            "average": round(self.total / self.count, 2),
            "min": round(self.min, 2),
            "max": round(self.max, 2),
        }


def queue_breakdown(counters: dict[str, int]) -> dict[str, dict[str, int]]:
    """Group ``messages.<event>.<queue>`` counters by queue.

    Queue names may contain dots; the event is the segment right after the
    prefix and everything behind it is the queue.
    """
    queues: dict[str, dict[str, int]] = defaultdict(dict)
    for name, value in counters.items():
        if not name.startswith(QUEUE_COUNTER_PREFIX):
            continue
        event, _, queue = name[len(QUEUE_COUNTER_PREFIX) :].partition(".")
        if queue:
            queues[queue][event] = value
    return dict(queues)


class InMemoryMetrics(MetricsPort):
    """MetricsPort kept in process memory; lost on restart."""

    def __init__(self):
        self._counters: dict[str, int] = defaultdict(int)
        self._gauges: dict[str, float] = {}
        self._summaries: dict[str, MetricsSummary] = defaultdict(MetricsSummary)
        self._start_time = time.monotonic()

    def increment(self, name: str, value: int = 1) -> None:
        self._counters[name] += value

    def gauge(self, name: str, value: float) -> None:
        self._gauges[name] = value

    def record(self, name: str, value: float) -> None:
        self._summaries[name].add(value)

    @contextmanager
    def timer(self, name: str):
        """Record the duration of the block in milliseconds, even if it raises."""
        started = time.perf_counter()
        try:
            yield
        finally:
            self.record(name, (time.perf_counter() - started) * 1000)

    def get_all(self) -> dict[str, Any]:
        """Snapshot of every metric plus the per-queue roll-up."""
        counters = dict(self._counters)
        return {
            "uptime_seconds": round(time.monotonic() - self._start_time, 2),
            "counters": counters,
            "gauges": dict(self._gauges),
            "summaries": {name: s.to_dict() for name, s in self._summaries.items()},
            "queues": queue_breakdown(counters),
        }

    def reset(self) -> None:
        """Clear all metrics. Uptime keeps counting."""
        self._counters.clear()
        self._gauges.clear()
        self._summaries.clear()
