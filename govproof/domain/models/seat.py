"""Seat and ballot domain models.

A seat is one independent model on the debate panel. Each debate produces
exactly one SeatOutcome per roster seat, whatever happened to that seat.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class SeatStatus(str, Enum):
    """Lifecycle status of a seat within one debate."""

    OFFLINE = "offline"
    RUNNING = "running"
    VOTED = "voted"
    TIMEOUT = "timeout"
    ERROR = "error"
    ABSTAIN = "abstain"


class Stance(str, Enum):
    """A seat's position on the request."""

    APPROVE = "approve"
    REVISE = "revise"
    BLOCK = "block"
    ABSTAIN = "abstain"


# Tie-break order, most conservative first
CONSERVATIVE_STANCE_ORDER: tuple[Stance, ...] = (
    Stance.BLOCK,
    Stance.REVISE,
    Stance.APPROVE,
)


@dataclass(frozen=True)
class SeatDescriptor:
    """Identity of a roster seat.

    Attributes:
        seat_id: Roster position, unique within a roster.
        provider: Model vendor (e.g. "OpenAI").
        model: Model name (e.g. "gpt-4o").
    """

    seat_id: int
    provider: str
    model: str

    def __post_init__(self) -> None:
        if self.seat_id < 1:
            raise ValueError(f"seat_id must be >= 1, got {self.seat_id}")
        if not self.provider:
            raise ValueError("provider must be non-empty")


DEFAULT_ROSTER: tuple[SeatDescriptor, ...] = (
    SeatDescriptor(1, "OpenAI", "gpt-4o"),
    SeatDescriptor(2, "Anthropic", "claude-3.5-sonnet"),
    SeatDescriptor(3, "Google", "gemini-1.5-pro"),
    SeatDescriptor(4, "Meta", "llama-3.1-70b-instruct"),
    SeatDescriptor(5, "DeepSeek", "deepseek-v3"),
    SeatDescriptor(6, "Mistral", "mistral-large"),
    SeatDescriptor(7, "xAI", "grok-2"),
)

# Calibration weight per seat, out of 100 across the default roster.
# Seats missing from a weight mapping have weight 0.
DEFAULT_SEAT_WEIGHTS: Mapping[int, float] = MappingProxyType(
    {1: 15.0, 2: 15.0, 3: 15.0, 4: 14.0, 5: 14.0, 6: 14.0, 7: 13.0}
)


@dataclass(frozen=True)
class Ballot:
    """A seat's vote on a request.

    Attributes:
        seat_id: Seat that cast the ballot.
        stance: approve, revise, block or abstain.
        score: Quality score, 0 to 100.
        confidence: Self-reported confidence, 0 to 1.
        risk_flags: Risk categories the seat raised.
        key_points: Main arguments for the stance.
        counterpoints: Arguments the seat considered against it.
        recommended_edits: Suggested changes to the output.
    """

    seat_id: int
    stance: Stance
    score: float
    confidence: float
    risk_flags: tuple[str, ...] = field(default_factory=tuple)
    key_points: tuple[str, ...] = field(default_factory=tuple)
    counterpoints: tuple[str, ...] = field(default_factory=tuple)
    recommended_edits: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate ranges and normalize sequences to tuples."""
        if not isinstance(self.stance, Stance):
            object.__setattr__(self, "stance", Stance(self.stance))
        if not 0.0 <= self.score <= 100.0:
            raise ValueError(f"score must be between 0 and 100, got {self.score}")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(
                f"confidence must be between 0 and 1, got {self.confidence}"
            )
        for name in ("risk_flags", "key_points", "counterpoints", "recommended_edits"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    @property
    def is_voting(self) -> bool:
        """True unless the seat abstained."""
        return self.stance is not Stance.ABSTAIN


@dataclass(frozen=True)
class SeatOutcome:
    """What happened to one seat during one debate.

    Attributes:
        descriptor: The seat.
        status: Terminal status (never RUNNING once the debate returns).
        ballot: The ballot, present only for VOTED and ABSTAIN.
        latency_ms: Time the seat took, or time until it was cut off.
        error: Failure description for ERROR and TIMEOUT.
    """

    descriptor: SeatDescriptor
    status: SeatStatus
    ballot: Ballot | None = None
    latency_ms: float = 0.0
    error: str | None = None

    def __post_init__(self) -> None:
        has_ballot = self.status in (SeatStatus.VOTED, SeatStatus.ABSTAIN)
        if has_ballot and self.ballot is None:
            raise ValueError(f"{self.status.value} outcome requires a ballot")
        if not has_ballot and self.ballot is not None:
            raise ValueError(f"{self.status.value} outcome cannot carry a ballot")

    @property
    def seat_id(self) -> int:
        return self.descriptor.seat_id

    def to_dict(self) -> dict[str, object]:
        ballot = self.ballot
        return {
            "seat_id": self.descriptor.seat_id,
            "provider": self.descriptor.provider,
            "model": self.descriptor.model,
            "status": self.status.value,
            "stance": ballot.stance.value if ballot else None,
            "score": ballot.score if ballot else None,
            "confidence": ballot.confidence if ballot else None,
            "risk_flags": list(ballot.risk_flags) if ballot else [],
            "key_points": list(ballot.key_points) if ballot else [],
            "counterpoints": list(ballot.counterpoints) if ballot else [],
            "recommended_edits": list(ballot.recommended_edits) if ballot else [],
            "latency_ms": round(self.latency_ms, 3),
            "error": self.error,
        }
