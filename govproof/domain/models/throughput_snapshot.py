"""Throughput snapshot domain model.

Point-in-time view of the rolling decision window, derived on demand.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Sequence


def nearest_rank_percentile(values: Sequence[float], percentile: float) -> float:
    """Exact nearest-rank percentile.

    Args:
        values: Sample values (any order).
        percentile: Percentile to calculate (0-100].

    Returns:
        The smallest sample such that at least `percentile` percent of
        samples are <= it, or 0.0 when there is no data.

    Example:
        >>> nearest_rank_percentile([100, 200, 300, 400, 500], 50)
        300
        >>> nearest_rank_percentile([100, 200, 300, 400, 500], 95)
        500
    """
    if not 0 < percentile <= 100:
        raise ValueError(f"percentile must be in (0, 100], got {percentile}")
    if not values:
        return 0.0
    ordered = sorted(values)
    rank = math.ceil(percentile / 100 * len(ordered))
    return ordered[max(rank, 1) - 1]


@dataclass(frozen=True)
class ThroughputSnapshot:
    """Derived throughput metrics over the current decision window.

    Attributes:
        captured_at: When the snapshot was taken.
        throughput_per_sec: Decisions per second across the window span.
        queue_depth: Requests currently in flight.
        latency_p50_ms: Median pipeline latency in the window.
        latency_p95_ms: 95th percentile latency in the window.
        latency_p99_ms: 99th percentile latency in the window.
        avg_latency_ms: Mean latency in the window.
        certified_rate: Fraction of window decisions that were CERTIFIED.
        error_rate: Fraction of window decisions that were degraded.
        window_size: Number of decisions in the window.
        total_processed: Decisions recorded since start.
        uptime_seconds: Time since the monitor started.
    """

    captured_at: datetime
    throughput_per_sec: float
    queue_depth: int
    latency_p50_ms: float
    latency_p95_ms: float
    latency_p99_ms: float
    avg_latency_ms: float
    certified_rate: float
    error_rate: float
    window_size: int
    total_processed: int
    uptime_seconds: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "captured_at": self.captured_at.isoformat(),
            "throughput_per_sec": round(self.throughput_per_sec, 3),
            "queue_depth": self.queue_depth,
            "latency_p50_ms": round(self.latency_p50_ms, 3),
            "latency_p95_ms": round(self.latency_p95_ms, 3),
            "latency_p99_ms": round(self.latency_p99_ms, 3),
            "avg_latency_ms": round(self.avg_latency_ms, 3),
            "certified_rate": round(self.certified_rate, 4),
            "error_rate": round(self.error_rate, 4),
            "window_size": self.window_size,
            "total_processed": self.total_processed,
            "uptime_seconds": round(self.uptime_seconds, 3),
        }

    def summary(self) -> str:
        """Human-readable one-line summary."""
        return (
            f"Processed: {self.total_processed} | "
            f"Throughput: {self.throughput_per_sec:.1f}/s | "
            f"Queue: {self.queue_depth} | "
            f"p95: {self.latency_p95_ms:.1f}ms | "
            f"Certified: {self.certified_rate * 100:.1f}%"
        )
