"""Prometheus metrics for the governance pipeline.

Operational metrics only: decision counts and latency, seat outcomes,
queue depth, window statistics, and proof verification outcomes. Each
collector owns a private CollectorRegistry, so several engines (or tests)
can coexist in one process without label collisions.

Labels: service, environment on every metric.
"""

from __future__ import annotations

import os
import time

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Content type for Prometheus metrics endpoint
METRICS_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"

# Decision latency buckets (10ms to 30s)
DECISION_LATENCY_BUCKETS = (0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)


class GovernanceMetricsCollector:
    """Collects governance pipeline metrics.

    Implements GovernanceMetricsProtocol.

    Attributes:
        decisions_total: Counter of terminal decisions by verdict and grade.
        decision_latency_seconds: Histogram of end-to-end pipeline latency.
        seat_outcomes_total: Counter of seat terminal statuses by provider.
        queue_depth: Gauge of in-flight requests.
        certified_rate: Gauge of the window's certified fraction.
        latency_p95_seconds: Gauge of the window's p95 latency.
        proof_verifications_total: Counter of verification outcomes by status.
        uptime_seconds: Gauge of seconds since the collector was created.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize the collector.

        Args:
            registry: Optional registry; a fresh one is created by default.
        """
        self._registry = registry or CollectorRegistry()
        self._environment = os.environ.get("ENVIRONMENT", "development")
        self._service_name = os.environ.get("SERVICE_NAME", "govproof")
        self._started = time.monotonic()
        base_labels = ["service", "environment"]

        self.decisions_total = Counter(
            name="governance_decisions_total",
            documentation="Terminal governance decisions",
            labelnames=[*base_labels, "verdict", "grade"],
            registry=self._registry,
        )
        self.decision_latency_seconds = Histogram(
            name="governance_decision_latency_seconds",
            documentation="End-to-end pipeline latency in seconds",
            labelnames=base_labels,
            buckets=DECISION_LATENCY_BUCKETS,
            registry=self._registry,
        )
        self.seat_outcomes_total = Counter(
            name="governance_seat_outcomes_total",
            documentation="Seat terminal statuses",
            labelnames=[*base_labels, "provider", "status"],
            registry=self._registry,
        )
        self.queue_depth = Gauge(
            name="governance_queue_depth",
            documentation="Governance requests currently in flight",
            labelnames=base_labels,
            registry=self._registry,
        )
        self.certified_rate = Gauge(
            name="governance_certified_rate",
            documentation="Fraction of decisions in the window that were certified",
            labelnames=base_labels,
            registry=self._registry,
        )
        self.latency_p95_seconds = Gauge(
            name="governance_latency_p95_seconds",
            documentation="95th percentile latency over the decision window",
            labelnames=base_labels,
            registry=self._registry,
        )
        self.proof_verifications_total = Counter(
            name="governance_proof_verifications_total",
            documentation="Proof verification outcomes",
            labelnames=[*base_labels, "status"],
            registry=self._registry,
        )
        self.uptime_seconds = Gauge(
            name="governance_uptime_seconds",
            documentation="Seconds since the governance engine started",
            labelnames=base_labels,
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def _labels(self) -> dict[str, str]:
        return {"service": self._service_name, "environment": self._environment}

    def record_decision(self, verdict: str, grade: str, latency_seconds: float) -> None:
        self.decisions_total.labels(**self._labels(), verdict=verdict, grade=grade).inc()
        self.decision_latency_seconds.labels(**self._labels()).observe(latency_seconds)

    def record_seat_outcome(self, provider: str, status: str) -> None:
        self.seat_outcomes_total.labels(
            **self._labels(), provider=provider, status=status
        ).inc()

    def record_verification(self, status: str) -> None:
        self.proof_verifications_total.labels(**self._labels(), status=status).inc()

    def set_queue_depth(self, depth: int) -> None:
        self.queue_depth.labels(**self._labels()).set(depth)

    def set_window_stats(self, certified_rate: float, latency_p95_seconds: float) -> None:
        self.certified_rate.labels(**self._labels()).set(certified_rate)
        self.latency_p95_seconds.labels(**self._labels()).set(latency_p95_seconds)

    def generate_metrics(self) -> bytes:
        """Render all metrics in Prometheus exposition format."""
        self.uptime_seconds.labels(**self._labels()).set(
            time.monotonic() - self._started
        )
        return generate_latest(self._registry)
