"""Builders for requests, ballots and scripted seat rosters."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Sequence

from govproof.domain.models.request import GovernanceRequest
from govproof.domain.models.seat import (
    DEFAULT_ROSTER,
    Ballot,
    SeatDescriptor,
    SeatOutcome,
    SeatStatus,
    Stance,
)
from govproof.infrastructure.stubs.synthetic_seat_stub import SyntheticSeatStub
from tests.helpers.fake_time_authority import DEFAULT_FROZEN_AT

SAFE_PAYLOAD = "Summarize our refund policy for annual plans in two sentences."


def make_request(
    payload: str = SAFE_PAYLOAD,
    domain: str = "qna",
    request_id: str | None = "req_test",
    created_at: datetime = DEFAULT_FROZEN_AT,
) -> GovernanceRequest:
    return GovernanceRequest.create(
        payload=payload,
        created_at=created_at,
        domain=domain,
        request_id=request_id,
    )


def make_ballot(
    seat_id: int,
    stance: Stance = Stance.APPROVE,
    score: float = 90.0,
    confidence: float = 0.9,
    risk_flags: Iterable[str] = (),
    key_points: Iterable[str] = (),
) -> Ballot:
    return Ballot(
        seat_id=seat_id,
        stance=stance,
        score=score,
        confidence=confidence,
        risk_flags=tuple(risk_flags),
        key_points=tuple(key_points),
    )


def make_outcome(ballot: Ballot) -> SeatOutcome:
    status = SeatStatus.VOTED if ballot.is_voting else SeatStatus.ABSTAIN
    return SeatOutcome(
        descriptor=DEFAULT_ROSTER[ballot.seat_id - 1],
        status=status,
        ballot=ballot,
    )


def scripted_roster(
    stances: Sequence[Stance],
    scores: Sequence[float] | None = None,
    confidence: float = 0.9,
    roster: Sequence[SeatDescriptor] = DEFAULT_ROSTER,
) -> list[SyntheticSeatStub]:
    """One scripted seat per stance, in roster order."""
    seats = []
    for index, stance in enumerate(stances):
        seats.append(
            SyntheticSeatStub(
                roster[index],
                stance=stance,
                score=scores[index] if scores is not None else None,
                confidence=confidence,
            )
        )
    return seats
