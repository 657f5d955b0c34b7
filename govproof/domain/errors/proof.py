"""Proof record domain errors."""

from __future__ import annotations

from govproof.domain.exceptions import GovProofError


class ProofError(GovProofError):
    """Base class for proof-related errors."""

    pass


class ProofSigningError(ProofError):
    """Raised when the signer cannot produce a signature.

    Attributes:
        proof_id: Proof that could not be signed.
    """

    def __init__(self, proof_id: str, reason: str) -> None:
        self.proof_id = proof_id
        self.reason = reason
        super().__init__(f"Failed to sign proof {proof_id}: {reason}")


class ProofNotFoundError(ProofError):
    """Raised when a proof_id does not resolve in the registry."""

    def __init__(self, proof_id: str) -> None:
        self.proof_id = proof_id
        super().__init__(f"Proof not found: {proof_id}")


class DuplicateProofError(ProofError):
    """Raised when a proof_id is registered twice."""

    def __init__(self, proof_id: str) -> None:
        self.proof_id = proof_id
        super().__init__(f"Proof already registered: {proof_id}")
