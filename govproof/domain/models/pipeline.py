"""Pipeline stage and admission models.

Stages run in a fixed linear order. Every run reports exactly one
StageEvent per stage, in order, including stages skipped after an early
exit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class PipelineStage(str, Enum):
    """Governance pipeline stages, declared in execution order."""

    INTERCEPT = "INTERCEPT"
    CLASSIFY_RISK = "CLASSIFY_RISK"
    SANITIZE = "SANITIZE"
    DEBATE = "DEBATE"
    JUDGE = "JUDGE"
    VERIFY = "VERIFY"
    LOG = "LOG"
    RELEASE = "RELEASE"

    @classmethod
    def ordered(cls) -> tuple[PipelineStage, ...]:
        return tuple(cls)

    @property
    def position(self) -> int:
        return PIPELINE_ORDER.index(self)


PIPELINE_ORDER: tuple[PipelineStage, ...] = tuple(PipelineStage)


class StageStatus(str, Enum):
    """How a stage ended."""

    COMPLETE = "complete"
    SHORT_CIRCUITED = "short_circuited"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class StageEvent:
    """Progress report for a single stage.

    Attributes:
        stage: The stage reported on.
        status: How the stage ended.
        elapsed_ms: Wall time spent in the stage.
        detail: Short free-text note (reason code, seat tally, ...).
    """

    stage: PipelineStage
    status: StageStatus
    elapsed_ms: float = 0.0
    detail: str = ""

    def to_dict(self) -> dict[str, object]:
        return {
            "stage": self.stage.value,
            "status": self.status.value,
            "elapsed_ms": round(self.elapsed_ms, 3),
            "detail": self.detail,
        }


class RiskDecision(str, Enum):
    """Admission classifier outcome."""

    ALLOW = "ALLOW"
    RESTRICT = "RESTRICT"
    BLOCK = "BLOCK"


@dataclass(frozen=True)
class AdmissionDecision:
    """Result of intercept and risk classification.

    Attributes:
        risk_decision: ALLOW, RESTRICT or BLOCK.
        reason_codes: Explicit codes such as "BLOCK:PROMPT_INJECTION".
        refused_at: Stage that refused the request, if any.
    """

    risk_decision: RiskDecision
    reason_codes: tuple[str, ...] = field(default_factory=tuple)
    refused_at: PipelineStage | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "reason_codes", tuple(self.reason_codes))
        if self.risk_decision is RiskDecision.BLOCK and not self.reason_codes:
            raise ValueError("BLOCK admission requires at least one reason code")

    @property
    def admitted(self) -> bool:
        return self.risk_decision is not RiskDecision.BLOCK

    @property
    def restricted(self) -> bool:
        return self.risk_decision is RiskDecision.RESTRICT

    def to_dict(self) -> dict[str, object]:
        return {
            "risk_decision": self.risk_decision.value,
            "reason_codes": list(self.reason_codes),
            "refused_at": self.refused_at.value if self.refused_at else None,
        }
