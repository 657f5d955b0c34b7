"""Judge synthesis domain service.

Reduces a panel's seat outcomes to a single JudgeOutput. Synthesis is
deterministic and order-independent: outcomes are sorted by seat_id before
anything is computed, and ties are broken by a fixed conservative order
(block > revise > approve).

Note: This is pure domain logic with no infrastructure dependencies.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Mapping

from govproof.domain.models.judge_output import (
    JudgeOutput,
    RiskLevel,
    RiskVerdict,
    SeatInfluence,
)
from govproof.domain.models.seat import (
    CONSERVATIVE_STANCE_ORDER,
    DEFAULT_SEAT_WEIGHTS,
    Ballot,
    SeatOutcome,
    Stance,
)
from govproof.domain.services.contestation_detector import ContestationResult

# Severity catalog for known risk flags. Unknown flags are treated as medium.
RISK_FLAG_SEVERITY: Mapping[str, RiskLevel] = {
    "credential_leak": RiskLevel.HIGH,
    "financial_fraud": RiskLevel.HIGH,
    "hate_speech": RiskLevel.HIGH,
    "illegal_activity": RiskLevel.HIGH,
    "medical_dosage": RiskLevel.HIGH,
    "pii_exposure": RiskLevel.HIGH,
    "prompt_injection": RiskLevel.HIGH,
    "self_harm": RiskLevel.HIGH,
    "violence": RiskLevel.HIGH,
    "bias": RiskLevel.MEDIUM,
    "copyright": RiskLevel.MEDIUM,
    "hallucination_risk": RiskLevel.MEDIUM,
    "privacy": RiskLevel.MEDIUM,
    "regulatory": RiskLevel.MEDIUM,
    "unverified_claim": RiskLevel.MEDIUM,
    "formatting": RiskLevel.LOW,
    "style": RiskLevel.LOW,
    "tone": RiskLevel.LOW,
}

# Calibration weight at or above which a voting seat has high influence
HIGH_INFLUENCE_WEIGHT = 15.0
# Calibration weight at or above which a voting seat has medium influence
MEDIUM_INFLUENCE_WEIGHT = 10.0

_FINAL_ANSWERS: Mapping[Stance, str] = {
    Stance.APPROVE: "The panel approves the response for release.",
    Stance.REVISE: "The panel requires revisions before the response is released.",
    Stance.BLOCK: "The panel blocks the response.",
}

INSUFFICIENT_EVIDENCE_ANSWER = (
    "Insufficient evidence: no seat returned a usable ballot."
)


def classify_flag(flag: str) -> RiskLevel:
    """Look up the severity of a risk flag."""
    return RISK_FLAG_SEVERITY.get(flag.strip().lower(), RiskLevel.MEDIUM)


def _seat_list(seat_ids: Iterable[int]) -> str:
    return ", ".join(str(seat_id) for seat_id in sorted(seat_ids))


class JudgeSynthesizer:
    """Synthesizes the panel's ballots into one decision.

    Seat calibration weights decide how much influence each voting seat is
    reported to have. They do not enter the aggregate score, which stays
    confidence-weighted.

    Example:
        >>> judge = JudgeSynthesizer()
        >>> output = judge.synthesize(outcomes, contestation)
        >>> output.final_stance
        <Stance.APPROVE: 'approve'>
    """

    def __init__(self, seat_weights: Mapping[int, float] = DEFAULT_SEAT_WEIGHTS) -> None:
        self._seat_weights = dict(seat_weights)

    def synthesize(
        self,
        outcomes: Iterable[SeatOutcome],
        contestation: ContestationResult,
    ) -> JudgeOutput:
        """Produce a JudgeOutput from seat outcomes.

        Args:
            outcomes: One outcome per roster seat, in any order.
            contestation: Result of contestation detection on the same ballots.

        Returns:
            JudgeOutput. When no seat cast a voting ballot the output is
            marked insufficient_evidence and its risk is never low.
        """
        ordered = sorted(outcomes, key=lambda outcome: outcome.seat_id)
        ballots = [outcome.ballot for outcome in ordered if outcome.ballot is not None]
        voting = [ballot for ballot in ballots if ballot.is_voting]

        risk_verdict = self._assess_risk(ballots)

        if not voting:
            return self._insufficient_evidence(ordered, risk_verdict)

        counts = Counter(ballot.stance for ballot in voting)
        top = max(counts.values())
        tied = [s for s in CONSERVATIVE_STANCE_ORDER if counts.get(s) == top]
        final_stance = tied[0]

        total_confidence = sum(ballot.confidence for ballot in voting)
        if total_confidence > 0:
            aggregate_score = (
                sum(ballot.score * ballot.confidence for ballot in voting)
                / total_confidence
            )
        else:
            aggregate_score = sum(ballot.score for ballot in voting) / len(voting)
        aggregate_confidence = total_confidence / len(voting)

        rationale = [
            (
                f"{len(voting)} of {len(ordered)} seats voted: "
                f"{counts.get(Stance.APPROVE, 0)} approve, "
                f"{counts.get(Stance.REVISE, 0)} revise, "
                f"{counts.get(Stance.BLOCK, 0)} block"
            ),
            f"Majority stance: {final_stance.value}"
            + (" (tie resolved conservatively)" if len(tied) > 1 else ""),
            (
                f"Confidence-weighted score {aggregate_score:.1f} "
                f"at mean confidence {aggregate_confidence:.2f}"
            ),
        ]
        if contestation.contested:
            rationale.extend(f"Contested: {reason}" for reason in contestation.reasons)
            rationale.extend(self._minority_positions(voting, final_stance))

        return JudgeOutput(
            final_answer=self._final_answer(final_stance, voting),
            rationale=tuple(rationale),
            risk_verdict=risk_verdict,
            final_stance=final_stance,
            aggregate_score=aggregate_score,
            aggregate_confidence=aggregate_confidence,
            insufficient_evidence=False,
            seat_influence=self._influence(ordered),
        )

    def _assess_risk(self, ballots: list[Ballot]) -> RiskVerdict:
        raised: dict[str, set[int]] = {}
        for ballot in ballots:
            for flag in ballot.risk_flags:
                raised.setdefault(flag.strip().lower(), set()).add(ballot.seat_id)

        if not raised:
            return RiskVerdict(level=RiskLevel.LOW, notes=("No risk flags raised",))

        level = max((classify_flag(flag) for flag in raised), key=lambda lv: lv.severity)
        notes = tuple(
            f"{flag} ({classify_flag(flag).value}) raised by seats {_seat_list(seats)}"
            for flag, seats in sorted(raised.items())
        )
        return RiskVerdict(level=level, notes=notes)

    def _insufficient_evidence(
        self,
        ordered: list[SeatOutcome],
        risk_verdict: RiskVerdict,
    ) -> JudgeOutput:
        level = risk_verdict.level
        if level.severity < RiskLevel.MEDIUM.severity:
            level = RiskLevel.MEDIUM
        tally = Counter(outcome.status.value for outcome in ordered)
        summary = ", ".join(f"{count} {status}" for status, count in sorted(tally.items()))
        return JudgeOutput(
            final_answer=INSUFFICIENT_EVIDENCE_ANSWER,
            rationale=(
                f"No voting ballots from {len(ordered)} seats ({summary or 'empty roster'})",
            ),
            risk_verdict=RiskVerdict(
                level=level,
                notes=risk_verdict.notes + ("Risk cannot be assessed without ballots",),
            ),
            final_stance=Stance.ABSTAIN,
            aggregate_score=0.0,
            aggregate_confidence=0.0,
            insufficient_evidence=True,
            seat_influence={outcome.seat_id: SeatInfluence.NONE for outcome in ordered},
        )

    @staticmethod
    def _minority_positions(voting: list[Ballot], final_stance: Stance) -> list[str]:
        lines = []
        for stance in CONSERVATIVE_STANCE_ORDER:
            if stance is final_stance:
                continue
            holders = [ballot for ballot in voting if ballot.stance is stance]
            if not holders:
                continue
            points = [point for ballot in holders for point in ballot.key_points]
            argument = points[0] if points else "no key points given"
            lines.append(
                f"Minority position ({stance.value}) from seats "
                f"{_seat_list(b.seat_id for b in holders)}: {argument}"
            )
        return lines

    @staticmethod
    def _final_answer(final_stance: Stance, voting: list[Ballot]) -> str:
        answer = _FINAL_ANSWERS[final_stance]
        if final_stance is Stance.REVISE:
            edits = [
                edit
                for ballot in voting
                if ballot.stance is Stance.REVISE
                for edit in ballot.recommended_edits
            ]
            if edits:
                answer += " Recommended edits: " + "; ".join(edits[:3])
        return answer

    def _influence(self, ordered: list[SeatOutcome]) -> dict[int, SeatInfluence]:
        influence: dict[int, SeatInfluence] = {}
        for outcome in ordered:
            ballot = outcome.ballot
            weight = self._seat_weights.get(outcome.seat_id, 0.0)
            if ballot is None or not ballot.is_voting:
                influence[outcome.seat_id] = SeatInfluence.NONE
            elif weight >= HIGH_INFLUENCE_WEIGHT:
                influence[outcome.seat_id] = SeatInfluence.HIGH
            elif weight >= MEDIUM_INFLUENCE_WEIGHT:
                influence[outcome.seat_id] = SeatInfluence.MEDIUM
            else:
                influence[outcome.seat_id] = SeatInfluence.LOW
        return influence
