"""Domain models for governance requests, debates, verdicts and proofs."""

from govproof.domain.models.decision import Decision
from govproof.domain.models.governance_result import (
    GovernanceResult,
    Grade,
    ParticipationSummary,
    Verdict,
)
from govproof.domain.models.judge_output import (
    JudgeOutput,
    RiskLevel,
    RiskVerdict,
    SeatInfluence,
)
from govproof.domain.models.pipeline import (
    PIPELINE_ORDER,
    AdmissionDecision,
    PipelineStage,
    RiskDecision,
    StageEvent,
    StageStatus,
)
from govproof.domain.models.proof_record import (
    ProofRecord,
    ProofStatus,
    ProofVerification,
)
from govproof.domain.models.request import (
    GovernanceRequest,
    RequestDomain,
    SanitizedRequest,
)
from govproof.domain.models.seat import (
    DEFAULT_ROSTER,
    Ballot,
    SeatDescriptor,
    SeatOutcome,
    SeatStatus,
    Stance,
)
from govproof.domain.models.share_token import ShareToken, mask_token
from govproof.domain.models.throughput_snapshot import ThroughputSnapshot

__all__ = [
    "DEFAULT_ROSTER",
    "PIPELINE_ORDER",
    "AdmissionDecision",
    "Ballot",
    "Decision",
    "GovernanceRequest",
    "GovernanceResult",
    "Grade",
    "JudgeOutput",
    "ParticipationSummary",
    "PipelineStage",
    "ProofRecord",
    "ProofStatus",
    "ProofVerification",
    "RequestDomain",
    "RiskDecision",
    "RiskLevel",
    "RiskVerdict",
    "SanitizedRequest",
    "SeatDescriptor",
    "SeatInfluence",
    "SeatOutcome",
    "SeatStatus",
    "ShareToken",
    "Stance",
    "StageEvent",
    "StageStatus",
    "ThroughputSnapshot",
    "Verdict",
    "mask_token",
]
