"""Metrics endpoint for Prometheus scraping."""

from fastapi import APIRouter, Depends, Response

from govproof.api.dependencies import get_engine
from govproof.bootstrap.engine import GovernanceEngine
from govproof.infrastructure.monitoring.metrics import METRICS_CONTENT_TYPE

router = APIRouter(prefix="/v1", tags=["metrics"])


@router.get(
    "/metrics",
    summary="Prometheus metrics endpoint",
    response_class=Response,
    responses={200: {"description": "Metrics in Prometheus format", "content": {"text/plain": {}}}},
)
async def get_metrics(engine: GovernanceEngine = Depends(get_engine)) -> Response:
    return Response(
        content=engine.metrics.generate_metrics(),
        media_type=METRICS_CONTENT_TYPE,
    )
