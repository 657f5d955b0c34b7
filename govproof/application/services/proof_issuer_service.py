"""Proof issuer service.

Issues a signed ProofRecord for a governance verdict. Issuance is pure
apart from producing the record: registering it is the caller's job, so
a record is never visible before the pipeline has decided to keep it.
"""

from __future__ import annotations

from datetime import timedelta

from govproof.application.ports.proof_signer import ProofSignerProtocol
from govproof.application.ports.time_authority import TimeAuthorityProtocol
from govproof.application.services.base import LoggingMixin
from govproof.domain.errors.proof import ProofSigningError
from govproof.domain.models.governance_result import Verdict
from govproof.domain.models.proof_record import ProofRecord, generate_proof_id
from govproof.domain.models.request import GovernanceRequest
from govproof.domain.signing import (
    compute_input_hash,
    compute_proof_signable_content,
    signature_to_base64,
)


class ProofIssuerService(LoggingMixin):
    """Creates signed proof records.

    Attributes:
        _signer: Holder of the process-wide signing key.
        _time: Source of issuance timestamps.
        _policy_pack_version: Stamped into every record.
        _validity: Lifetime of each record.
    """

    def __init__(
        self,
        signer: ProofSignerProtocol,
        time_authority: TimeAuthorityProtocol,
        policy_pack_version: str,
        validity: timedelta,
    ) -> None:
        if validity <= timedelta(0):
            raise ValueError(f"validity must be positive, got {validity}")
        if not policy_pack_version:
            raise ValueError("policy_pack_version must be non-empty")
        self._signer = signer
        self._time = time_authority
        self._policy_pack_version = policy_pack_version
        self._validity = validity
        self._init_logger(component="proof")

    @property
    def policy_pack_version(self) -> str:
        return self._policy_pack_version

    def issue(self, request: GovernanceRequest, verdict: Verdict) -> ProofRecord:
        """Issue a proof for a request's verdict.

        Args:
            request: The original (unsanitized) request. Its canonical bytes
                are what input_hash commits to.
            verdict: The terminal verdict being attested.

        Returns:
            A signed ProofRecord.

        Raises:
            ProofSigningError: If the signer fails.
        """
        proof_id = generate_proof_id()
        issued_at = self._time.now()
        expires_at = issued_at + self._validity
        input_hash = compute_input_hash(request.canonical_bytes())

        signable = compute_proof_signable_content(
            proof_id=proof_id,
            input_hash=input_hash,
            verdict=verdict.value,
            policy_pack_version=self._policy_pack_version,
            issued_at=issued_at,
            expires_at=expires_at,
        )
        try:
            signature = self._signer.sign(signable)
        except Exception as e:
            raise ProofSigningError(proof_id, str(e)) from e

        record = ProofRecord(
            proof_id=proof_id,
            input_hash=input_hash,
            issued_at=issued_at,
            expires_at=expires_at,
            policy_pack_version=self._policy_pack_version,
            signature=signature_to_base64(signature),
        )
        self._log_operation(
            "issue", request_id=request.request_id, proof_id=proof_id
        ).info(
            "proof_issued",
            verdict=verdict.value,
            key_id=self._signer.key_id,
            expires_at=expires_at.isoformat(),
        )
        return record
