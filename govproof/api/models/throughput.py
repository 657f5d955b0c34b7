"""Throughput and load simulation models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from govproof.application.services.load_simulation_service import (
    MAX_RATE_PER_SECOND,
    MIN_RATE_PER_SECOND,
)


class ThroughputResponse(BaseModel):
    """Rolling window statistics plus the most recent decisions."""

    snapshot: dict[str, Any]
    recent_decisions: list[dict[str, Any]]
    simulation_running: bool


class StartSimulationRequest(BaseModel):
    """Request body for POST /v1/throughput/simulation/start."""

    rate_per_second: float = Field(ge=MIN_RATE_PER_SECOND, le=MAX_RATE_PER_SECOND)
    batch: bool = False


class SimulationStatusResponse(BaseModel):
    running: bool
    rate_per_second: float
    batch: bool
    submitted: int
