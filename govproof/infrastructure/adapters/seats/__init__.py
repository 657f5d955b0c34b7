"""Seat adapters for model providers."""

from govproof.infrastructure.adapters.seats.provider_seat import (
    BallotPayload,
    ProviderSeat,
    ProviderSeatConfig,
)

__all__ = ["BallotPayload", "ProviderSeat", "ProviderSeatConfig"]
