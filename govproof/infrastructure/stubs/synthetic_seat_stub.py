"""Synthetic seat stub - deterministic seats without a model provider.

Each synthetic seat derives its ballot from a hash of its seat_id and the
sanitized payload, so the same request always gets the same ballot from
the same seat. Tests can also script a fixed stance, score and failure
mode per seat.

WARNING: NOT FOR PRODUCTION USE. Used by tests and the load simulation.
"""

from __future__ import annotations

import asyncio
import hashlib
import random
from typing import Iterable

from govproof.application.ports.seat import SeatProtocol
from govproof.domain.models.request import SanitizedRequest
from govproof.domain.models.seat import DEFAULT_ROSTER, Ballot, SeatDescriptor, Stance

# Cumulative stance distribution for derived ballots
_DERIVED_STANCES: tuple[tuple[float, Stance], ...] = (
    (0.82, Stance.APPROVE),
    (0.94, Stance.REVISE),
    (0.98, Stance.BLOCK),
    (1.00, Stance.ABSTAIN),
)

_SCORE_RANGES = {
    Stance.APPROVE: (80.0, 98.0),
    Stance.REVISE: (55.0, 80.0),
    Stance.BLOCK: (5.0, 45.0),
    Stance.ABSTAIN: (0.0, 50.0),
}


class SyntheticSeatStub(SeatProtocol):
    """Deterministic or scripted seat.

    Attributes:
        _stance: Scripted stance, or None to derive one from the payload.
        _score: Scripted score, or None to derive one.
        _confidence: Scripted confidence, or None to derive one.
        _risk_flags: Flags added to every ballot.
        _latency_ms: Simulated latency before the ballot is returned.
        _jitter_ms: Extra derived latency, up to this many milliseconds.
        _available: When False the seat reports itself offline.
        _fail_with: Exception raised instead of returning a ballot.
        _ballot_seat_id: Seat id written into the ballot (for mismatch tests).
        invocation_count: Number of deliberate() calls.
    """

    def __init__(
        self,
        descriptor: SeatDescriptor,
        *,
        stance: Stance | None = None,
        score: float | None = None,
        confidence: float | None = None,
        risk_flags: Iterable[str] = (),
        key_points: Iterable[str] = (),
        latency_ms: float = 0.0,
        jitter_ms: float = 0.0,
        available: bool = True,
        fail_with: Exception | None = None,
        ballot_seat_id: int | None = None,
    ) -> None:
        self._descriptor = descriptor
        self._stance = stance
        self._score = score
        self._confidence = confidence
        self._risk_flags = tuple(risk_flags)
        self._key_points = tuple(key_points)
        self._latency_ms = latency_ms
        self._jitter_ms = jitter_ms
        self._available = available
        self._fail_with = fail_with
        self._ballot_seat_id = ballot_seat_id
        self.invocation_count = 0

    @property
    def descriptor(self) -> SeatDescriptor:
        return self._descriptor

    def is_available(self) -> bool:
        return self._available

    async def deliberate(self, request: SanitizedRequest) -> Ballot:
        self.invocation_count += 1
        rng = self._rng_for(request)

        delay_ms = self._latency_ms + (rng.uniform(0, self._jitter_ms) if self._jitter_ms else 0.0)
        if delay_ms > 0:
            await asyncio.sleep(delay_ms / 1000)
        else:
            await asyncio.sleep(0)

        if self._fail_with is not None:
            raise self._fail_with

        stance = self._stance or self._derive_stance(rng)
        low, high = _SCORE_RANGES[stance]
        score = self._score if self._score is not None else round(rng.uniform(low, high), 1)
        confidence = (
            self._confidence
            if self._confidence is not None
            else round(rng.uniform(0.6, 0.98), 2)
        )

        flags = list(self._risk_flags)
        if "[REDACTED:" in request.payload and "privacy" not in flags:
            flags.append("privacy")

        return Ballot(
            seat_id=self._ballot_seat_id or self._descriptor.seat_id,
            stance=stance,
            score=score,
            confidence=confidence,
            risk_flags=tuple(flags),
            key_points=self._key_points
            or (f"{self._descriptor.model} assessed the response as {stance.value}",),
            counterpoints=(),
            recommended_edits=(
                ("Clarify unsupported claims",) if stance is Stance.REVISE else ()
            ),
        )

    def _rng_for(self, request: SanitizedRequest) -> random.Random:
        digest = hashlib.sha256(
            f"{self._descriptor.seat_id}:{request.payload}".encode("utf-8")
        ).digest()
        return random.Random(int.from_bytes(digest[:8], "big"))

    @staticmethod
    def _derive_stance(rng: random.Random) -> Stance:
        roll = rng.random()
        for threshold, stance in _DERIVED_STANCES:
            if roll < threshold:
                return stance
        return Stance.APPROVE


def build_synthetic_roster(
    roster: Iterable[SeatDescriptor] = DEFAULT_ROSTER,
    *,
    stance: Stance | None = None,
    score: float | None = None,
    confidence: float | None = None,
    latency_ms: float = 0.0,
    jitter_ms: float = 0.0,
    available: bool = True,
) -> list[SyntheticSeatStub]:
    """Build one synthetic seat per descriptor with shared options."""
    return [
        SyntheticSeatStub(
            descriptor,
            stance=stance,
            score=score,
            confidence=confidence,
            latency_ms=latency_ms,
            jitter_ms=jitter_ms,
            available=available,
        )
        for descriptor in roster
    ]
