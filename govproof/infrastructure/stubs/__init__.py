"""Stub implementations for development, testing and load simulation."""

from govproof.infrastructure.stubs.synthetic_seat_stub import (
    SyntheticSeatStub,
    build_synthetic_roster,
)

__all__ = ["SyntheticSeatStub", "build_synthetic_roster"]
