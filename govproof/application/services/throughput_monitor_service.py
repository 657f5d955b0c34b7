"""Throughput monitor service.

Observes every terminal decision and keeps a bounded FIFO window of the
most recent ones. All derived statistics (throughput, latency
percentiles, certified rate, error rate) are computed on demand from the
window as it stands, never from stale aggregates.

The window is the only mutable state shared between concurrent pipeline
runs. It is append/evict only, and every mutation happens under one lock
so a Decision is applied atomically.
"""

from __future__ import annotations

import threading
from collections import deque

from govproof.application.ports.governance_metrics import GovernanceMetricsProtocol
from govproof.application.ports.time_authority import TimeAuthorityProtocol
from govproof.application.services.base import LoggingMixin
from govproof.domain.models.decision import Decision
from govproof.domain.models.throughput_snapshot import (
    ThroughputSnapshot,
    nearest_rank_percentile,
)

DEFAULT_WINDOW_SIZE = 100


class ThroughputMonitorService(LoggingMixin):
    """Rolling decision window with derived throughput statistics.

    Attributes:
        _window: Most recent decisions, oldest first.
        _in_flight: Requests that have entered the pipeline but not finished.
        _total: Decisions recorded since start (including evicted ones).
    """

    def __init__(
        self,
        time_authority: TimeAuthorityProtocol,
        window_size: int = DEFAULT_WINDOW_SIZE,
        metrics: GovernanceMetricsProtocol | None = None,
    ) -> None:
        if window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {window_size}")
        self._time = time_authority
        self._metrics = metrics
        self._lock = threading.Lock()
        self._window: deque[Decision] = deque(maxlen=window_size)
        self._in_flight = 0
        self._total = 0
        self._started = time_authority.monotonic()
        self._init_logger(component="throughput")

    @property
    def window_size(self) -> int:
        return self._window.maxlen or 0

    @property
    def queue_depth(self) -> int:
        with self._lock:
            return self._in_flight

    def begin(self) -> None:
        """Mark a request as entering the pipeline."""
        with self._lock:
            self._in_flight += 1
            depth = self._in_flight
        if self._metrics is not None:
            self._metrics.set_queue_depth(depth)

    def end(self) -> None:
        """Mark a request as leaving the pipeline, with or without a decision."""
        with self._lock:
            self._in_flight = max(0, self._in_flight - 1)
            depth = self._in_flight
        if self._metrics is not None:
            self._metrics.set_queue_depth(depth)

    def record(self, decision: Decision) -> None:
        """Append a decision to the window, evicting the oldest when full."""
        with self._lock:
            self._window.append(decision)
            self._total += 1
            total = self._total

        if self._metrics is not None:
            self._metrics.record_decision(
                decision.verdict.value,
                decision.grade.value,
                decision.latency_ms / 1000,
            )
            snapshot = self.snapshot()
            self._metrics.set_window_stats(
                snapshot.certified_rate, snapshot.latency_p95_ms / 1000
            )

        self._log_operation("record", request_id=decision.request_id).debug(
            "decision_recorded",
            verdict=decision.verdict.value,
            grade=decision.grade.value,
            proof_id=decision.proof_id,
            latency_ms=round(decision.latency_ms, 3),
            total_processed=total,
        )

    def recent(self, limit: int | None = None) -> tuple[Decision, ...]:
        """Decisions in the window, newest first."""
        with self._lock:
            decisions = tuple(reversed(self._window))
        return decisions if limit is None else decisions[:limit]

    def snapshot(self) -> ThroughputSnapshot:
        """Derive statistics from the current window."""
        with self._lock:
            window = tuple(self._window)
            in_flight = self._in_flight
            total = self._total

        now = self._time.now()
        latencies = [decision.latency_ms for decision in window]
        count = len(window)

        throughput = 0.0
        if window:
            span = (now - window[0].timestamp).total_seconds()
            if span > 0:
                throughput = count / span

        return ThroughputSnapshot(
            captured_at=now,
            throughput_per_sec=throughput,
            queue_depth=in_flight,
            latency_p50_ms=nearest_rank_percentile(latencies, 50),
            latency_p95_ms=nearest_rank_percentile(latencies, 95),
            latency_p99_ms=nearest_rank_percentile(latencies, 99),
            avg_latency_ms=sum(latencies) / count if count else 0.0,
            certified_rate=(
                sum(1 for d in window if d.certified) / count if count else 0.0
            ),
            error_rate=sum(1 for d in window if d.degraded) / count if count else 0.0,
            window_size=count,
            total_processed=total,
            uptime_seconds=self._time.monotonic() - self._started,
        )
