"""Pure domain services: contestation, judge synthesis, and grading."""

from govproof.domain.services.contestation_detector import (
    ContestationDetector,
    ContestationResult,
)
from govproof.domain.services.grading import GradingPolicy, GradeOutcome
from govproof.domain.services.judge_synthesizer import (
    RISK_FLAG_SEVERITY,
    JudgeSynthesizer,
)

__all__ = [
    "RISK_FLAG_SEVERITY",
    "ContestationDetector",
    "ContestationResult",
    "GradeOutcome",
    "GradingPolicy",
    "JudgeSynthesizer",
]
