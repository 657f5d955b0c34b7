"""Governance metrics port definition.

Lets application services publish operational metrics without depending
on a metrics backend. The Prometheus collector implements it.
"""

from __future__ import annotations

from typing import Protocol


class GovernanceMetricsProtocol(Protocol):
    """Operational metrics sink for the governance pipeline."""

    def record_decision(self, verdict: str, grade: str, latency_seconds: float) -> None:
        """Count a terminal decision and observe its latency."""
        ...

    def record_seat_outcome(self, provider: str, status: str) -> None:
        """Count a seat's terminal status."""
        ...

    def record_verification(self, status: str) -> None:
        """Count a proof verification outcome."""
        ...

    def set_queue_depth(self, depth: int) -> None:
        """Set the number of in-flight requests."""
        ...

    def set_window_stats(self, certified_rate: float, latency_p95_seconds: float) -> None:
        """Publish derived statistics of the decision window."""
        ...
