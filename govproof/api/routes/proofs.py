"""Proof verification and share token endpoints.

Verification outcomes are statuses (always 200). Share token failures map
to RFC 7807 problem responses:
- unknown token or proof -> 404
- expired or revoked token -> 410
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from govproof.api.dependencies import get_engine
from govproof.api.models.governance import ErrorResponse
from govproof.api.models.proofs import (
    RevokeShareTokenResponse,
    SharedProofResponse,
    ShareTokenResponse,
    VerifyProofRequest,
    VerifyProofResponse,
)
from govproof.bootstrap.engine import GovernanceEngine
from govproof.domain.errors.proof import ProofNotFoundError
from govproof.domain.errors.share_token import (
    ExpiredShareTokenError,
    InvalidShareTokenError,
    RevokedShareTokenError,
    ShareTokenError,
)

router = APIRouter(prefix="/v1", tags=["proofs"])


def _problem(request: Request, status: int, kind: str, title: str, detail: str) -> HTTPException:
    return HTTPException(
        status_code=status,
        detail={
            "type": f"urn:govproof:{kind}",
            "title": title,
            "status": status,
            "detail": detail,
            "instance": str(request.url),
        },
    )


@router.post(
    "/proofs/verify",
    response_model=VerifyProofResponse,
    summary="Verify a proof record against an input hash",
)
async def verify_proof(
    body: VerifyProofRequest,
    engine: GovernanceEngine = Depends(get_engine),
) -> VerifyProofResponse:
    verification = await engine.verify_proof_record(body.proof_id, body.input_hash)
    return VerifyProofResponse.model_validate(verification.to_dict())


@router.post(
    "/proofs/{proof_id}/share-token",
    response_model=ShareTokenResponse,
    status_code=201,
    responses={404: {"model": ErrorResponse, "description": "Unknown proof"}},
    summary="Issue a share token for a proof",
)
async def create_share_token(
    proof_id: str,
    request: Request,
    engine: GovernanceEngine = Depends(get_engine),
) -> ShareTokenResponse:
    try:
        token = await engine.generate_share_token(proof_id)
    except ProofNotFoundError as e:
        raise _problem(request, 404, "proof:not-found", "Proof Not Found", str(e)) from None
    return ShareTokenResponse(
        token=token.token,
        masked=token.masked,
        proof_id=token.proof_id,
        issued_at=token.issued_at,
        expires_at=token.expires_at,
    )


@router.get(
    "/share/{token}",
    response_model=SharedProofResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Unknown share token"},
        410: {"model": ErrorResponse, "description": "Expired or revoked share token"},
    },
    summary="Resolve a share token to its proof record",
)
async def redeem_share_token(
    token: str,
    request: Request,
    engine: GovernanceEngine = Depends(get_engine),
) -> SharedProofResponse:
    try:
        entry = await engine.redeem_share_token(token)
    except InvalidShareTokenError as e:
        raise _problem(request, 404, "share-token:invalid", "Invalid Share Token", str(e)) from None
    except (ExpiredShareTokenError, RevokedShareTokenError) as e:
        raise _problem(request, 410, "share-token:gone", "Share Token Gone", str(e)) from None
    except ShareTokenError as e:
        raise _problem(request, 400, "share-token:error", "Share Token Error", str(e)) from None

    return SharedProofResponse(
        proof_id=entry.record.proof_id,
        request_id=entry.request_id,
        verdict=entry.verdict,
        proof_record=entry.record.to_dict(),
    )


@router.delete(
    "/share/{token}",
    response_model=RevokeShareTokenResponse,
    summary="Revoke a share token",
)
async def revoke_share_token(
    token: str,
    engine: GovernanceEngine = Depends(get_engine),
) -> RevokeShareTokenResponse:
    return RevokeShareTokenResponse(revoked=await engine.revoke_share_token(token))
