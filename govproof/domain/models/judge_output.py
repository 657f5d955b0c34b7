"""Judge synthesis output model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from govproof.domain.models.seat import Stance


class RiskLevel(str, Enum):
    """Overall risk assessed across all ballots."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {RiskLevel.LOW: 0, RiskLevel.MEDIUM: 1, RiskLevel.HIGH: 2}


class SeatInfluence(str, Enum):
    """How much a seat's ballot shaped the final answer."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


@dataclass(frozen=True)
class RiskVerdict:
    """Risk level with supporting notes."""

    level: RiskLevel
    notes: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "notes", tuple(self.notes))


@dataclass(frozen=True)
class JudgeOutput:
    """Single synthesized decision produced from a panel's ballots.

    Attributes:
        final_answer: Human-readable summary of the decision.
        rationale: Ordered reasoning lines, including minority positions
            when the debate was contested.
        risk_verdict: Aggregated risk level and notes.
        final_stance: Majority stance (ABSTAIN when evidence is insufficient).
        aggregate_score: Confidence-weighted mean score of voting seats.
        aggregate_confidence: Mean confidence of voting seats.
        insufficient_evidence: True when no seat cast a usable ballot.
        seat_influence: Influence of each seat keyed by seat_id.
    """

    final_answer: str
    rationale: tuple[str, ...]
    risk_verdict: RiskVerdict
    final_stance: Stance
    aggregate_score: float
    aggregate_confidence: float
    insufficient_evidence: bool = False
    seat_influence: Mapping[int, SeatInfluence] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate invariants of insufficient-evidence output."""
        object.__setattr__(self, "rationale", tuple(self.rationale))
        object.__setattr__(
            self, "seat_influence", MappingProxyType(dict(self.seat_influence))
        )
        if self.insufficient_evidence and self.risk_verdict.level is RiskLevel.LOW:
            raise ValueError("insufficient evidence can never be assessed low risk")

    def to_dict(self) -> dict[str, object]:
        return {
            "final_answer": self.final_answer,
            "rationale": list(self.rationale),
            "risk_verdict": {
                "level": self.risk_verdict.level.value,
                "notes": list(self.risk_verdict.notes),
            },
            "final_stance": self.final_stance.value,
            "aggregate_score": round(self.aggregate_score, 2),
            "aggregate_confidence": round(self.aggregate_confidence, 3),
            "insufficient_evidence": self.insufficient_evidence,
            "seat_influence": {
                str(seat_id): influence.value
                for seat_id, influence in sorted(self.seat_influence.items())
            },
        }
