"""Request latency tracking against a response-time budget."""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import defaultdict, deque
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Deque

from fittrack.core.config import get_settings
from fittrack.core.constants import (
    PERFORMANCE_CRITICAL_RATIO,
    PERFORMANCE_SAMPLE_SIZE,
    PERFORMANCE_WARNING_RATIO,
)

logger = logging.getLogger(__name__)

SLOW_REQUESTS_SHOWN = 10


@dataclass
class RequestSample:
    timestamp: float
    method: str
    endpoint: str
    status_code: int
    duration_ms: float
    level: str = "ok"


@dataclass
class MetricSample:
    timestamp: float
    value: float
    tags: dict[str, Any] = field(default_factory=dict)


def percentile(values: list[float], pct: float) -> float:
    """Nearest-rank percentile of an unsorted list (0 for empty input)."""
    if not values:
        return 0.0
    ordered = sorted(values)
    rank = max(math.ceil(pct / 100 * len(ordered)) - 1, 0)
    return ordered[min(rank, len(ordered) - 1)]


class PerformanceMonitor:
    """Keeps the most recent request samples and custom metrics in memory."""

    def __init__(self, budget_ms: float, sample_size: int = PERFORMANCE_SAMPLE_SIZE) -> None:
        self.budget_ms = budget_ms
        self.sample_size = sample_size
        self._samples: Deque[RequestSample] = deque(maxlen=sample_size)
        self._metrics: dict[str, Deque[MetricSample]] = defaultdict(lambda: deque(maxlen=sample_size))
        self._lock = threading.Lock()

    def classify(self, duration_ms: float) -> str:
        if duration_ms >= self.budget_ms * PERFORMANCE_CRITICAL_RATIO:
            return "critical"
        if duration_ms >= self.budget_ms * PERFORMANCE_WARNING_RATIO:
            return "warning"
        return "ok"

    def record_request(self, method: str, endpoint: str, status_code: int, duration_ms: float) -> RequestSample:
        sample = RequestSample(
            timestamp=time.time(),
            method=method,
            endpoint=endpoint,
            status_code=status_code,
            duration_ms=round(duration_ms, 2),
            level=self.classify(duration_ms),
        )
        with self._lock:
            self._samples.append(sample)
        if sample.level == "critical":
            logger.warning(
                "Slow request %s %s took %.0fms (budget %.0fms)", method, endpoint, duration_ms, self.budget_ms
            )
        return sample

    def record_metric(self, name: str, value: float, **tags: Any) -> None:
        with self._lock:
            self._metrics[name].append(MetricSample(timestamp=time.time(), value=float(value), tags=tags))

    def error_rate(self) -> float:
        with self._lock:
            samples = list(self._samples)
        if not samples:
            return 0.0
        return round(sum(1 for s in samples if s.status_code >= 500) / len(samples) * 100, 2)

    def get_report(self) -> dict[str, Any]:
        with self._lock:
            samples = list(self._samples)
            metrics = {name: list(values) for name, values in self._metrics.items()}
        durations = [s.duration_ms for s in samples]

        by_endpoint: dict[str, list[RequestSample]] = defaultdict(list)
        for s in samples:
            by_endpoint[f"{s.method} {s.endpoint}"].append(s)
        endpoints = {
            key: {
                "count": len(items),
                "average_ms": round(sum(i.duration_ms for i in items) / len(items), 2),
                "p95_ms": percentile([i.duration_ms for i in items], 95),
                "max_ms": max(i.duration_ms for i in items),
                "errors": sum(1 for i in items if i.status_code >= 500),
            }
            for key, items in sorted(by_endpoint.items())
        }
        slow = sorted((s for s in samples if s.level != "ok"), key=lambda s: s.duration_ms, reverse=True)
        return {
            "budget_ms": self.budget_ms,
            "count": len(samples),
            "average_ms": round(sum(durations) / len(durations), 2) if durations else 0.0,
            "p95_ms": percentile(durations, 95),
            "max_ms": max(durations) if durations else 0.0,
            "error_rate": self.error_rate(),
            "warnings": sum(1 for s in samples if s.level == "warning"),
            "critical": sum(1 for s in samples if s.level == "critical"),
            "endpoints": endpoints,
            "slow_requests": [
                {
                    "method": s.method,
                    "endpoint": s.endpoint,
                    "status_code": s.status_code,
                    "duration_ms": s.duration_ms,
                    "level": s.level,
                }
                for s in slow[:SLOW_REQUESTS_SHOWN]
            ],
            "metrics": {
                name: {
                    "count": len(values),
                    "latest": values[-1].value,
                    "average": round(sum(v.value for v in values) / len(values), 2),
                }
                for name, values in metrics.items()
                if values
            },
        }

    def reset(self) -> None:
        with self._lock:
            self._samples.clear()
            self._metrics.clear()
        logger.info("Performance samples reset")


@lru_cache
def get_performance_monitor() -> PerformanceMonitor:
    return PerformanceMonitor(get_settings().api_response_budget_ms)
