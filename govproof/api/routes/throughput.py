"""Throughput and load simulation endpoints."""

from fastapi import APIRouter, Depends, Query

from govproof.api.dependencies import get_engine
from govproof.api.models.throughput import (
    SimulationStatusResponse,
    StartSimulationRequest,
    ThroughputResponse,
)
from govproof.bootstrap.engine import GovernanceEngine

router = APIRouter(prefix="/v1/throughput", tags=["throughput"])


def _simulation_status(engine: GovernanceEngine) -> SimulationStatusResponse:
    simulation = engine.simulation
    return SimulationStatusResponse(
        running=simulation.running,
        rate_per_second=simulation.rate_per_second,
        batch=simulation.batch,
        submitted=simulation.submitted,
    )


@router.get("", response_model=ThroughputResponse, summary="Rolling window statistics")
async def get_throughput(
    limit: int = Query(default=20, ge=0, le=1000),
    engine: GovernanceEngine = Depends(get_engine),
) -> ThroughputResponse:
    return ThroughputResponse(
        snapshot=engine.throughput_snapshot().to_dict(),
        recent_decisions=[d.to_dict() for d in engine.recent_decisions(limit)],
        simulation_running=engine.simulation_running,
    )


@router.post(
    "/simulation/start",
    response_model=SimulationStatusResponse,
    summary="Start synthetic load",
)
async def start_simulation(
    body: StartSimulationRequest,
    engine: GovernanceEngine = Depends(get_engine),
) -> SimulationStatusResponse:
    await engine.start_simulation(body.rate_per_second, batch=body.batch)
    return _simulation_status(engine)


@router.post(
    "/simulation/stop",
    response_model=SimulationStatusResponse,
    summary="Stop synthetic load",
)
async def stop_simulation(
    engine: GovernanceEngine = Depends(get_engine),
) -> SimulationStatusResponse:
    await engine.stop_simulation()
    return _simulation_status(engine)
