"""Test helpers for govproof tests.

Helpers:
    FakeTimeAuthority: Controllable time authority for deterministic tests
    make_request: GovernanceRequest factory with a fixed timestamp
    scripted_roster: Synthetic seats with per-seat scripted stances

Usage:
    from tests.helpers import FakeTimeAuthority
"""

from tests.helpers.builders import make_ballot, make_outcome, make_request, scripted_roster
from tests.helpers.fake_time_authority import FakeTimeAuthority

__all__ = [
    "FakeTimeAuthority",
    "make_ballot",
    "make_outcome",
    "make_request",
    "scripted_roster",
]
