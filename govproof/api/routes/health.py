"""Health check endpoint."""

from fastapi import APIRouter, Depends

from govproof.api.dependencies import get_engine
from govproof.api.models.health import HealthResponse
from govproof.bootstrap.engine import GovernanceEngine

router = APIRouter(prefix="/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    engine: GovernanceEngine = Depends(get_engine),
) -> HealthResponse:
    """Return health status with the active policy pack and signing key."""
    return HealthResponse(
        status="healthy",
        policy_pack_version=engine.config.policy_pack_version,
        roster_size=len(engine.pipeline.roster),
        signing_key_id=engine.signer.key_id,
    )
