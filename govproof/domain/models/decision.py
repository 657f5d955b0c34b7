"""Decision domain model.

A Decision is the compact record of one terminal governance verdict that
the throughput monitor keeps in its rolling buffer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import uuid4

from govproof.domain.models.governance_result import (
    GovernanceResult,
    Grade,
    Verdict,
)


@dataclass(frozen=True)
class Decision:
    """Terminal verdict of one request, as seen by the monitor.

    Attributes:
        decision_id: Unique identifier ("dec_" prefixed).
        request_id: The request decided.
        grade: Traffic-light grade.
        verdict: Terminal verdict.
        reason: Primary reason code or summary.
        proof_id: Proof issued for the decision. Always resolvable.
        latency_ms: End-to-end pipeline latency.
        timestamp: When the decision was recorded.
        degraded: True when an internal fault forced the verdict.
    """

    decision_id: str
    request_id: str
    grade: Grade
    verdict: Verdict
    reason: str
    proof_id: str
    latency_ms: float
    timestamp: datetime
    degraded: bool = False

    def __post_init__(self) -> None:
        if not self.proof_id:
            raise ValueError("decision must reference a proof_id")
        if self.latency_ms < 0:
            raise ValueError(f"latency_ms must be >= 0, got {self.latency_ms}")

    @classmethod
    def from_result(
        cls,
        result: GovernanceResult,
        latency_ms: float,
        timestamp: datetime,
    ) -> Decision:
        """Build a Decision from a result that already carries its proof.

        Raises:
            ValueError: If the result has no proof record.
        """
        if result.proof_record is None:
            raise ValueError(f"result {result.request_id} has no proof record")
        reason = result.reasons[0] if result.reasons else result.verdict.value
        return cls(
            decision_id=f"dec_{uuid4().hex}",
            request_id=result.request_id,
            grade=result.grade,
            verdict=result.verdict,
            reason=reason,
            proof_id=result.proof_record.proof_id,
            latency_ms=latency_ms,
            timestamp=timestamp,
            degraded=result.degraded,
        )

    @property
    def certified(self) -> bool:
        return self.verdict is Verdict.CERTIFIED

    def to_dict(self) -> dict[str, object]:
        return {
            "decision_id": self.decision_id,
            "request_id": self.request_id,
            "grade": self.grade.value,
            "verdict": self.verdict.value,
            "reason": self.reason,
            "proof_id": self.proof_id,
            "latency_ms": round(self.latency_ms, 3),
            "timestamp": self.timestamp.isoformat(),
            "degraded": self.degraded,
        }
