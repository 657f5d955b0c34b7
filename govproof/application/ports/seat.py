"""Seat port definition.

A seat is one independent model on the debate panel. Adapters implement
this port for real providers (HTTP) and for synthetic seats used in tests
and load simulation. The orchestrator never sees provider-specific
payloads: adapters decode responses into a Ballot at the boundary.

Seats never receive the signing key or any proof material; they only see
the sanitized request.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from govproof.domain.models.request import SanitizedRequest
from govproof.domain.models.seat import Ballot, SeatDescriptor


class SeatProtocol(ABC):
    """Abstract interface for a debate seat."""

    @property
    @abstractmethod
    def descriptor(self) -> SeatDescriptor:
        """Identity of the seat (seat_id, provider, model)."""
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the seat can be called at all.

        Unavailable seats are reported offline without being invoked.
        """
        ...

    @abstractmethod
    async def deliberate(self, request: SanitizedRequest) -> Ballot:
        """Review a sanitized request and cast a ballot.

        Args:
            request: The redacted request under review.

        Returns:
            The seat's Ballot. An abstaining seat returns a Ballot with
            stance ABSTAIN.

        Raises:
            SeatError: If the provider fails or returns an unusable ballot.
                Any other exception is also isolated to this seat.
        """
        ...
