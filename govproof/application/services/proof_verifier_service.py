"""Proof verifier service.

Re-checks a registered proof against a caller-supplied input hash.

Check order (first failure wins):
1. not_found - proof_id is not in the registry
2. signature_invalid - signature does not cover the stored record and verdict
3. hash_mismatch - supplied hash differs from the record (constant-time compare)
4. expired - now is at or after expires_at

Verification is idempotent and side-effect free apart from a metrics
counter.
"""

from __future__ import annotations

import hmac
from datetime import datetime

from govproof.application.ports.governance_metrics import GovernanceMetricsProtocol
from govproof.application.ports.proof_registry import ProofRegistryProtocol
from govproof.application.ports.proof_signer import ProofSignerProtocol
from govproof.application.ports.time_authority import TimeAuthorityProtocol
from govproof.application.services.base import LoggingMixin
from govproof.domain.models.proof_record import ProofStatus, ProofVerification
from govproof.domain.models.request import GovernanceRequest
from govproof.domain.signing import (
    compute_input_hash,
    compute_proof_signable_content,
    signature_from_base64,
)

_MESSAGES = {
    ProofStatus.VALID: "Proof is valid",
    ProofStatus.EXPIRED: "Proof has expired",
    ProofStatus.HASH_MISMATCH: "Input hash does not match the proof",
    ProofStatus.SIGNATURE_INVALID: "Proof signature is invalid",
    ProofStatus.NOT_FOUND: "Proof not found",
}


class ProofVerifierService(LoggingMixin):
    """Verifies proof records held in the registry."""

    def __init__(
        self,
        registry: ProofRegistryProtocol,
        signer: ProofSignerProtocol,
        time_authority: TimeAuthorityProtocol,
        metrics: GovernanceMetricsProtocol | None = None,
    ) -> None:
        self._registry = registry
        self._signer = signer
        self._time = time_authority
        self._metrics = metrics
        self._init_logger(component="proof")

    async def verify(self, proof_id: str, input_hash: str) -> ProofVerification:
        """Verify a proof against an input hash.

        Args:
            proof_id: Proof to check.
            input_hash: "sha256:" prefixed hash the caller derived from the
                request they hold.

        Returns:
            ProofVerification with a specific status.
        """
        entry = await self._registry.get(proof_id)
        if entry is None:
            return self._result(proof_id, ProofStatus.NOT_FOUND)

        record = entry.record
        signable = compute_proof_signable_content(
            proof_id=record.proof_id,
            input_hash=record.input_hash,
            verdict=entry.verdict,
            policy_pack_version=record.policy_pack_version,
            issued_at=record.issued_at,
            expires_at=record.expires_at,
        )
        try:
            signature = signature_from_base64(record.signature)
        except ValueError:
            signature = b""
        if not signature or not self._signer.verify(signable, signature):
            return self._result(proof_id, ProofStatus.SIGNATURE_INVALID, entry.verdict)

        if not hmac.compare_digest(
            record.input_hash.encode("utf-8"), input_hash.encode("utf-8")
        ):
            return self._result(proof_id, ProofStatus.HASH_MISMATCH, entry.verdict)

        if self._time.now() >= record.expires_at:
            return self._result(
                proof_id, ProofStatus.EXPIRED, entry.verdict, record.expires_at
            )

        return self._result(proof_id, ProofStatus.VALID, entry.verdict, record.expires_at)

    async def verify_request(
        self, proof_id: str, request: GovernanceRequest
    ) -> ProofVerification:
        """Verify a proof against the request it was issued for."""
        return await self.verify(
            proof_id, compute_input_hash(request.canonical_bytes())
        )

    def _result(
        self,
        proof_id: str,
        status: ProofStatus,
        verdict: str | None = None,
        expires_at: datetime | None = None,
    ) -> ProofVerification:
        if self._metrics is not None:
            self._metrics.record_verification(status.value)
        log = self._log_operation("verify", proof_id=proof_id)
        if status is ProofStatus.VALID:
            log.info("proof_verified", status=status.value)
        else:
            log.warning("proof_verification_failed", status=status.value)
        return ProofVerification(
            valid=status is ProofStatus.VALID,
            status=status,
            message=_MESSAGES[status],
            proof_id=proof_id,
            verdict=verdict,
            expires_at=expires_at,
        )
