"""API request/response models."""

from govproof.api.models.governance import (
    ErrorResponse,
    GovernedRequestReference,
    RunGovernanceRequest,
    RunGovernanceResponse,
)
from govproof.api.models.health import HealthResponse
from govproof.api.models.proofs import (
    RevokeShareTokenResponse,
    SharedProofResponse,
    ShareTokenResponse,
    VerifyProofRequest,
    VerifyProofResponse,
)
from govproof.api.models.throughput import (
    SimulationStatusResponse,
    StartSimulationRequest,
    ThroughputResponse,
)

__all__ = [
    "ErrorResponse",
    "GovernedRequestReference",
    "HealthResponse",
    "RevokeShareTokenResponse",
    "RunGovernanceRequest",
    "RunGovernanceResponse",
    "SharedProofResponse",
    "ShareTokenResponse",
    "SimulationStatusResponse",
    "StartSimulationRequest",
    "ThroughputResponse",
    "VerifyProofRequest",
    "VerifyProofResponse",
]
