"""Governance result domain model.

The complete, externally visible outcome of one pipeline run: seat
outcomes, judge synthesis, contestation, verdict, grade, trace, and the
proof record issued for it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from govproof.domain.models.judge_output import JudgeOutput
from govproof.domain.models.pipeline import AdmissionDecision, StageEvent
from govproof.domain.models.proof_record import ProofRecord
from govproof.domain.models.seat import SeatOutcome, SeatStatus
from govproof.domain.signing import format_timestamp


class Verdict(str, Enum):
    """Terminal verdict of a governance run."""

    CERTIFIED = "CERTIFIED"
    HUMAN_REVIEW_REQUIRED = "HUMAN_REVIEW_REQUIRED"
    MISTRIAL = "MISTRIAL"
    REFUSED = "REFUSED"


class Grade(str, Enum):
    """Traffic-light grade shown to users."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


@dataclass(frozen=True)
class ParticipationSummary:
    """Seat ids grouped by terminal status."""

    voted: tuple[int, ...] = ()
    abstained: tuple[int, ...] = ()
    offline: tuple[int, ...] = ()
    timed_out: tuple[int, ...] = ()
    errored: tuple[int, ...] = ()

    @classmethod
    def from_outcomes(cls, outcomes: tuple[SeatOutcome, ...]) -> ParticipationSummary:
        def ids(status: SeatStatus) -> tuple[int, ...]:
            return tuple(sorted(o.seat_id for o in outcomes if o.status is status))

        return cls(
            voted=ids(SeatStatus.VOTED),
            abstained=ids(SeatStatus.ABSTAIN),
            offline=ids(SeatStatus.OFFLINE),
            timed_out=ids(SeatStatus.TIMEOUT),
            errored=ids(SeatStatus.ERROR),
        )

    def to_dict(self) -> dict[str, list[int]]:
        return {
            "voted": list(self.voted),
            "abstained": list(self.abstained),
            "offline": list(self.offline),
            "timed_out": list(self.timed_out),
            "errored": list(self.errored),
        }


@dataclass(frozen=True)
class GovernanceResult:
    """Outcome of a single governance run.

    Attributes:
        trace_id: Identifier correlating logs and stage events for the run.
        request_id: The governed request.
        domain: Request domain.
        created_at: When the result was produced.
        request_created_at: Submission time of the governed request. Together
            with request_id, domain and the caller's payload it is what the
            proof's input_hash commits to.
        admission: Intercept/classification decision.
        seats: One outcome per roster seat, sorted by seat_id. Empty only
            when the request was refused before the debate.
        judge: Judge synthesis, absent when refused before the debate.
        contested: Whether the panel disagreed materially.
        contested_reasons: Reasons the debate was contested.
        verdict: Terminal verdict.
        grade: Traffic-light grade.
        reasons: Reason codes explaining the verdict.
        trace_steps: One StageEvent per pipeline stage, in order.
        participation: Seat ids grouped by status.
        policy_pack_version: Policy pack in force.
        redaction_count: Number of PII/PHI spans redacted before the debate.
        proof_record: Proof issued for this result.
        degraded: True when an internal fault forced a fallback verdict.
    """

    trace_id: str
    request_id: str
    domain: str
    created_at: datetime
    request_created_at: datetime
    admission: AdmissionDecision
    verdict: Verdict
    grade: Grade
    policy_pack_version: str
    seats: tuple[SeatOutcome, ...] = ()
    judge: JudgeOutput | None = None
    contested: bool = False
    contested_reasons: tuple[str, ...] = ()
    reasons: tuple[str, ...] = ()
    trace_steps: tuple[StageEvent, ...] = ()
    participation: ParticipationSummary = field(default_factory=ParticipationSummary)
    redaction_count: int = 0
    proof_record: ProofRecord | None = None
    degraded: bool = False

    def __post_init__(self) -> None:
        """Validate result invariants."""
        seat_ids = [outcome.seat_id for outcome in self.seats]
        if seat_ids != sorted(seat_ids):
            raise ValueError("seats must be sorted by seat_id")
        if len(set(seat_ids)) != len(seat_ids):
            raise ValueError("seats must contain one outcome per seat")
        if self.contested and self.grade is Grade.GREEN:
            raise ValueError("contested results can never be graded green")
        if self.verdict is Verdict.CERTIFIED and (
            self.contested or self.grade is not Grade.GREEN
        ):
            raise ValueError("only uncontested green results can be certified")

    @property
    def proof_id(self) -> str | None:
        return self.proof_record.proof_id if self.proof_record else None

    def with_trace(self, trace_steps: tuple[StageEvent, ...]) -> GovernanceResult:
        return replace(self, trace_steps=tuple(trace_steps))

    def with_proof(self, proof_record: ProofRecord) -> GovernanceResult:
        return replace(self, proof_record=proof_record)

    def to_dict(self) -> dict[str, object]:
        """External result shape."""
        return {
            "trace_id": self.trace_id,
            "request_id": self.request_id,
            "domain": self.domain,
            "created_at": format_timestamp(self.created_at),
            "request": {
                "request_id": self.request_id,
                "domain": self.domain,
                "created_at": format_timestamp(self.request_created_at),
            },
            "admission": self.admission.to_dict(),
            "seats": [outcome.to_dict() for outcome in self.seats],
            "judge": self.judge.to_dict() if self.judge else None,
            "contested": self.contested,
            "contested_reasons": list(self.contested_reasons),
            "verdict": self.verdict.value,
            "grade": self.grade.value,
            "reasons": list(self.reasons),
            "trace_steps": [step.to_dict() for step in self.trace_steps],
            "participation_summary": self.participation.to_dict(),
            "policy_pack_version": self.policy_pack_version,
            "redaction_count": self.redaction_count,
            "proof_record": self.proof_record.to_dict() if self.proof_record else None,
            "degraded": self.degraded,
        }
