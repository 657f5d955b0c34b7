"""Governance run request/response models.

Request payloads are validated here; responses mirror the domain
result's to_dict() shape so the HTTP surface and the Python surface agree.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from govproof.domain.models.request import RequestDomain


class ErrorResponse(BaseModel):
    """RFC 7807 problem details body."""

    type: str
    title: str
    status: int
    detail: str
    instance: str | None = None


class RunGovernanceRequest(BaseModel):
    """Request body for POST /v1/governance/run.

    Attributes:
        payload: Content to be governed. Structural checks (empty, too large)
            happen in the pipeline so refusals still carry a proof.
        domain: Request domain; unknown domains are refused by the pipeline.
        request_id: Optional caller-supplied id.
        metadata: Opaque caller metadata, never shown to seats.
        include_trace: When true, stage events are included in the response.
    """

    payload: str
    domain: str = Field(default=RequestDomain.GENERAL.value, max_length=64)
    request_id: str | None = Field(default=None, min_length=1, max_length=128)
    metadata: dict[str, str] = Field(default_factory=dict)
    include_trace: bool = True


class GovernedRequestReference(BaseModel):
    """Identity of the governed request as committed to by the proof.

    request_id, domain and created_at here, plus the payload the caller
    submitted, re-derive the proof's input_hash.
    """

    request_id: str
    domain: str
    created_at: str


class RunGovernanceResponse(BaseModel):
    """Full governance result.

    The nested structures are passed through from the domain result.
    """

    trace_id: str
    request_id: str
    domain: str
    request: GovernedRequestReference
    verdict: str
    grade: str
    policy_pack_version: str
    contested: bool
    contested_reasons: list[str]
    reasons: list[str]
    degraded: bool
    redaction_count: int
    admission: dict[str, Any]
    seats: list[dict[str, Any]]
    judge: dict[str, Any] | None
    participation_summary: dict[str, Any]
    proof_record: dict[str, Any] | None
    trace_steps: list[dict[str, Any]] = Field(default_factory=list)
    created_at: str
