"""Application services - Use case orchestration.

Available services:
- AdmissionClassifierService: Intercept, risk classification and sanitization
- DebateOrchestratorService: Concurrent seat fan-out under a deadline
- ProofIssuerService: Signed proof records for terminal results
- ProofVerifierService: Proof record verification
- ShareTokenService: Opaque share token issue, redeem and revoke
- ThroughputMonitorService: Rolling decision window statistics
- GovernancePipelineService: End-to-end eight stage pipeline
- LoadSimulationService: Synthetic background load
"""

from govproof.application.services.admission_classifier_service import (
    AdmissionClassifierService,
)
from govproof.application.services.debate_orchestrator_service import (
    DebateOrchestratorService,
    DebateResult,
)
from govproof.application.services.governance_pipeline_service import (
    GovernancePipelineService,
    StageObserver,
)
from govproof.application.services.load_simulation_service import (
    LoadSimulationService,
)
from govproof.application.services.proof_issuer_service import ProofIssuerService
from govproof.application.services.proof_verifier_service import (
    ProofVerifierService,
)
from govproof.application.services.share_token_service import ShareTokenService
from govproof.application.services.throughput_monitor_service import (
    ThroughputMonitorService,
)

__all__ = [
    "AdmissionClassifierService",
    "DebateOrchestratorService",
    "DebateResult",
    "GovernancePipelineService",
    "LoadSimulationService",
    "ProofIssuerService",
    "ProofVerifierService",
    "ShareTokenService",
    "StageObserver",
    "ThroughputMonitorService",
]
