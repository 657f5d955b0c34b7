"""Governance run endpoint.

A run always returns 200 with a complete result: refusals, mistrials and
degraded runs are verdicts, not HTTP errors. Only a malformed request body
is rejected.
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from govproof.api.dependencies import get_engine
from govproof.api.models.governance import (
    ErrorResponse,
    RunGovernanceRequest,
    RunGovernanceResponse,
)
from govproof.bootstrap.engine import GovernanceEngine
from govproof.domain.models.request import GovernanceRequest

router = APIRouter(prefix="/v1/governance", tags=["governance"])


@router.post(
    "/run",
    response_model=RunGovernanceResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid request"}},
    summary="Run a request through the governance pipeline",
)
async def run_governance(
    body: RunGovernanceRequest,
    request: Request,
    engine: GovernanceEngine = Depends(get_engine),
) -> RunGovernanceResponse:
    try:
        governance_request = GovernanceRequest.create(
            payload=body.payload,
            created_at=engine.time_authority.now(),
            domain=body.domain,
            request_id=body.request_id,
            metadata=body.metadata,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail={
                "type": "urn:govproof:request:invalid",
                "title": "Invalid Request",
                "status": 400,
                "detail": str(e),
                "instance": str(request.url),
            },
        ) from None

    result = await engine.run_governance(governance_request)
    payload = result.to_dict()
    if not body.include_trace:
        payload["trace_steps"] = []
    return RunGovernanceResponse.model_validate(payload)
