"""Prometheus monitoring for the governance pipeline."""

from govproof.infrastructure.monitoring.metrics import (
    METRICS_CONTENT_TYPE,
    GovernanceMetricsCollector,
)

__all__ = ["METRICS_CONTENT_TYPE", "GovernanceMetricsCollector"]
