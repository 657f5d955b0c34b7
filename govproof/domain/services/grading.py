"""Grade and verdict policy.

Maps a judge output plus contestation and admission context to a
traffic-light grade and verdict:

- insufficient evidence              -> red / HUMAN_REVIEW_REQUIRED
- block stance or high risk          -> red / MISTRIAL
- score >= pass, uncontested approve,
  not restricted                     -> green / CERTIFIED
- score >= review                    -> yellow / HUMAN_REVIEW_REQUIRED
- otherwise                          -> red / MISTRIAL

A contested debate is never green.
"""

from __future__ import annotations

from dataclasses import dataclass

from govproof.domain.models.governance_result import Grade, Verdict
from govproof.domain.models.judge_output import JudgeOutput, RiskLevel
from govproof.domain.models.seat import Stance

DEFAULT_PASS_THRESHOLD = 80.0
DEFAULT_REVIEW_THRESHOLD = 60.0


@dataclass(frozen=True)
class GradeOutcome:
    """Grade, verdict and the reason codes behind them."""

    grade: Grade
    verdict: Verdict
    reasons: tuple[str, ...]


@dataclass(frozen=True)
class GradingPolicy:
    """Threshold policy for grading a judged debate.

    Attributes:
        pass_threshold: Minimum aggregate score for green.
        review_threshold: Minimum aggregate score for yellow.
        restrict_caps_grade: When True, RESTRICT admissions cannot be green.
    """

    pass_threshold: float = DEFAULT_PASS_THRESHOLD
    review_threshold: float = DEFAULT_REVIEW_THRESHOLD
    restrict_caps_grade: bool = True

    def __post_init__(self) -> None:
        if not 0.0 <= self.review_threshold <= self.pass_threshold <= 100.0:
            raise ValueError(
                "thresholds must satisfy 0 <= review <= pass <= 100, "
                f"got review={self.review_threshold}, pass={self.pass_threshold}"
            )

    def grade(
        self,
        judge: JudgeOutput,
        contested: bool,
        restricted: bool = False,
    ) -> GradeOutcome:
        """Grade a judge output.

        Args:
            judge: The synthesized decision.
            contested: Whether the debate was contested.
            restricted: Whether admission classified the request RESTRICT.

        Returns:
            GradeOutcome with explicit reason codes.
        """
        if judge.insufficient_evidence:
            return GradeOutcome(
                Grade.RED,
                Verdict.HUMAN_REVIEW_REQUIRED,
                ("JUDGE:INSUFFICIENT_EVIDENCE",),
            )

        hard_stops = []
        if judge.final_stance is Stance.BLOCK:
            hard_stops.append("JUDGE:BLOCKED")
        if judge.risk_verdict.level is RiskLevel.HIGH:
            hard_stops.append("JUDGE:HIGH_RISK")
        if hard_stops:
            return GradeOutcome(Grade.RED, Verdict.MISTRIAL, tuple(hard_stops))

        capped = restricted and self.restrict_caps_grade
        score = judge.aggregate_score
        if (
            score >= self.pass_threshold
            and not contested
            and judge.final_stance is Stance.APPROVE
            and not capped
        ):
            return GradeOutcome(Grade.GREEN, Verdict.CERTIFIED, ("JUDGE:CERTIFIED",))

        reasons = []
        if contested:
            reasons.append("JUDGE:CONTESTED")
        if judge.final_stance is Stance.REVISE:
            reasons.append("JUDGE:REVISE")
        if capped:
            reasons.append("JUDGE:RESTRICTED")
        if score < self.pass_threshold:
            reasons.append("JUDGE:BELOW_PASS_THRESHOLD")

        if score >= self.review_threshold:
            return GradeOutcome(
                Grade.YELLOW, Verdict.HUMAN_REVIEW_REQUIRED, tuple(reasons)
            )
        reasons.append("JUDGE:BELOW_REVIEW_THRESHOLD")
        return GradeOutcome(Grade.RED, Verdict.MISTRIAL, tuple(reasons))
