"""Proof record domain models.

A ProofRecord is the tamper-evident artifact issued for every terminal
governance decision. Its external shape is exactly:

    proof_id, input_hash, issued_at, expires_at, policy_pack_version, signature

The verdict it attests to is bound into the signature but stored alongside
the record in the registry, not inside it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import uuid4

from govproof.domain.signing import HASH_PREFIX, format_timestamp

PROOF_ID_PREFIX = "prf_"


def generate_proof_id() -> str:
    """Generate a new proof identifier."""
    return f"{PROOF_ID_PREFIX}{uuid4().hex}"


@dataclass(frozen=True)
class ProofRecord:
    """Signed attestation of a governance verdict.

    Attributes:
        proof_id: Unique identifier ("prf_" prefixed).
        input_hash: "sha256:" + hex digest of the canonical request bytes.
        issued_at: Issuance time from the time authority.
        expires_at: End of validity; always after issued_at.
        policy_pack_version: Policy pack in force at issuance.
        signature: Base64 Ed25519 signature over the signable content.
    """

    proof_id: str
    input_hash: str
    issued_at: datetime
    expires_at: datetime
    policy_pack_version: str
    signature: str

    def __post_init__(self) -> None:
        """Validate proof record invariants."""
        if not self.proof_id:
            raise ValueError("proof_id must be non-empty")
        if not self.input_hash.startswith(HASH_PREFIX):
            raise ValueError(f"input_hash must start with {HASH_PREFIX!r}")
        if self.expires_at <= self.issued_at:
            raise ValueError(
                f"expires_at ({self.expires_at.isoformat()}) must be after "
                f"issued_at ({self.issued_at.isoformat()})"
            )

    def to_dict(self) -> dict[str, str]:
        """External wire shape of the record."""
        return {
            "proof_id": self.proof_id,
            "input_hash": self.input_hash,
            "issued_at": format_timestamp(self.issued_at),
            "expires_at": format_timestamp(self.expires_at),
            "policy_pack_version": self.policy_pack_version,
            "signature": self.signature,
        }


class ProofStatus(str, Enum):
    """Outcome of verifying a proof."""

    VALID = "valid"
    EXPIRED = "expired"
    HASH_MISMATCH = "hash_mismatch"
    SIGNATURE_INVALID = "signature_invalid"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class ProofVerification:
    """Result of a proof verification.

    Attributes:
        valid: True only when status is VALID.
        status: Specific verification outcome.
        message: Human-readable explanation.
        proof_id: The proof that was checked.
        verdict: Verdict bound to the proof, when it was found.
        expires_at: Expiry of the proof, when it was found.
    """

    valid: bool
    status: ProofStatus
    message: str
    proof_id: str
    verdict: str | None = None
    expires_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.valid != (self.status is ProofStatus.VALID):
            raise ValueError("valid must be True exactly when status is VALID")

    def to_dict(self) -> dict[str, object]:
        return {
            "valid": self.valid,
            "status": self.status.value,
            "message": self.message,
            "proof_id": self.proof_id,
            "verdict": self.verdict,
            "expires_at": format_timestamp(self.expires_at) if self.expires_at else None,
        }
