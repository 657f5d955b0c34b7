"""Application ports (interfaces implemented by infrastructure adapters)."""

from govproof.application.ports.governance_metrics import GovernanceMetricsProtocol
from govproof.application.ports.proof_registry import (
    ProofRegistryProtocol,
    RegisteredProof,
)
from govproof.application.ports.proof_signer import ProofSignerProtocol
from govproof.application.ports.seat import SeatProtocol
from govproof.application.ports.share_token_registry import (
    ShareTokenRegistryProtocol,
)
from govproof.application.ports.time_authority import TimeAuthorityProtocol

__all__ = [
    "GovernanceMetricsProtocol",
    "ProofRegistryProtocol",
    "ProofSignerProtocol",
    "RegisteredProof",
    "SeatProtocol",
    "ShareTokenRegistryProtocol",
    "TimeAuthorityProtocol",
]
