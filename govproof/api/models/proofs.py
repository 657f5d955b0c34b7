"""Proof verification and share token models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class VerifyProofRequest(BaseModel):
    """Request body for POST /v1/proofs/verify."""

    proof_id: str = Field(min_length=1)
    input_hash: str = Field(min_length=1)


class VerifyProofResponse(BaseModel):
    """Verification outcome.

    Attributes:
        valid: True only when status is "valid".
        status: valid, expired, hash_mismatch, signature_invalid or not_found.
        message: Human-readable explanation.
    """

    valid: bool
    status: str
    message: str
    proof_id: str
    verdict: str | None = None
    expires_at: str | None = None


class ShareTokenResponse(BaseModel):
    """A freshly issued share token.

    The full token is returned exactly once, at issue time.
    """

    token: str
    masked: str
    proof_id: str
    issued_at: datetime
    expires_at: datetime


class SharedProofResponse(BaseModel):
    """Proof record resolved from a share token."""

    proof_id: str
    request_id: str
    verdict: str
    proof_record: dict[str, Any]


class RevokeShareTokenResponse(BaseModel):
    revoked: bool
