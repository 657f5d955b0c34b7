"""Seat domain errors.

Seat failures never escape the debate orchestrator: they are recorded as
seat statuses. These errors exist so adapters can signal *why* a seat
failed and the orchestrator can log a precise reason.
"""

from __future__ import annotations

from govproof.domain.exceptions import GovProofError


class SeatError(GovProofError):
    """Base class for seat-related errors.

    Attributes:
        seat_id: Roster position of the failing seat.
    """

    def __init__(self, seat_id: int, message: str) -> None:
        self.seat_id = seat_id
        super().__init__(f"Seat {seat_id}: {message}")


class SeatUnavailableError(SeatError):
    """Raised when a seat's provider cannot be reached."""

    def __init__(self, seat_id: int, provider: str) -> None:
        self.provider = provider
        super().__init__(seat_id, f"provider {provider} is unavailable")


class BallotDecodeError(SeatError):
    """Raised when a seat's response cannot be decoded into a Ballot.

    Attributes:
        detail: Validation detail from the boundary decoder.
    """

    def __init__(self, seat_id: int, detail: str) -> None:
        self.detail = detail
        super().__init__(seat_id, f"malformed ballot: {detail}")


class DuplicateSeatError(GovProofError, ValueError):
    """Raised when a roster lists the same seat_id twice."""

    def __init__(self, seat_ids: list[int]) -> None:
        self.seat_ids = seat_ids
        super().__init__(f"Roster contains duplicate seat ids: {seat_ids}")
