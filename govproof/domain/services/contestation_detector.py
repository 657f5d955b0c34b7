"""Contestation detection domain service.

A debate is contested when the panel disagrees materially. Detection is a
pure function of the set of ballots: it sorts by seat_id first, so the
order in which seats finished never changes the result.

Rules, evaluated and reported in this order:
1. At least one seat blocked while at least one approved.
2. Population standard deviation of voting scores exceeds the band.
3. The most common stance is tied between two or more stances.

Abstaining ballots are ignored by every rule.

Note: This is pure domain logic with no infrastructure dependencies.
"""

from __future__ import annotations

import statistics
from collections import Counter
from dataclasses import dataclass
from typing import Iterable

from govproof.domain.models.seat import CONSERVATIVE_STANCE_ORDER, Ballot, Stance

DEFAULT_VARIANCE_BAND = 20.0


@dataclass(frozen=True)
class ContestationResult:
    """Outcome of contestation detection.

    Attributes:
        contested: True if any rule fired.
        reasons: One human-readable reason per rule that fired.
        score_stdev: Population standard deviation of voting scores.
    """

    contested: bool
    reasons: tuple[str, ...]
    score_stdev: float


class ContestationDetector:
    """Detects material disagreement across a panel's ballots.

    Example:
        >>> detector = ContestationDetector(variance_band=20.0)
        >>> result = detector.detect(ballots)
        >>> if result.contested:
        ...     print(result.reasons)
    """

    def __init__(self, variance_band: float = DEFAULT_VARIANCE_BAND) -> None:
        """Initialize the detector.

        Args:
            variance_band: Score standard deviation above which the panel
                is considered split.
        """
        if variance_band < 0:
            raise ValueError(f"variance_band must be >= 0, got {variance_band}")
        self._variance_band = variance_band

    @property
    def variance_band(self) -> float:
        return self._variance_band

    def detect(self, ballots: Iterable[Ballot]) -> ContestationResult:
        """Detect contestation in a set of ballots.

        Args:
            ballots: Ballots from seats that returned one, in any order.

        Returns:
            ContestationResult; uncontested with no reasons when fewer than
            two seats voted.
        """
        voting = sorted(
            (ballot for ballot in ballots if ballot.is_voting),
            key=lambda ballot: ballot.seat_id,
        )
        scores = [ballot.score for ballot in voting]
        stdev = statistics.pstdev(scores) if len(scores) > 1 else 0.0

        if len(voting) < 2:
            return ContestationResult(contested=False, reasons=(), score_stdev=stdev)

        counts = Counter(ballot.stance for ballot in voting)
        reasons: list[str] = []

        blocks = counts.get(Stance.BLOCK, 0)
        approves = counts.get(Stance.APPROVE, 0)
        if blocks and approves:
            reasons.append(f"{blocks} seats blocked while {approves} approved")

        if stdev > self._variance_band:
            reasons.append(
                f"score spread {stdev:.1f} exceeds variance band {self._variance_band:.1f}"
            )

        top = max(counts.values())
        tied = [stance for stance in CONSERVATIVE_STANCE_ORDER if counts.get(stance) == top]
        if len(tied) > 1:
            names = ", ".join(stance.value for stance in tied)
            reasons.append(f"stance tie at {top} votes each between {names}")

        return ContestationResult(
            contested=bool(reasons),
            reasons=tuple(reasons),
            score_stdev=stdev,
        )
