"""Unit tests for ContestationDetector.

Rules are reported in fixed order: block/approve split, score spread,
stance tie. Detection must not depend on ballot order.
"""

from __future__ import annotations

import itertools

import pytest

from govproof.domain.models.seat import Stance
from govproof.domain.services.contestation_detector import ContestationDetector
from tests.helpers import make_ballot


@pytest.fixture
def detector() -> ContestationDetector:
    return ContestationDetector(variance_band=20.0)


class TestContestationRules:
    def test_unanimous_approval_not_contested(self, detector: ContestationDetector) -> None:
        ballots = [make_ballot(i, Stance.APPROVE, score=88) for i in range(1, 8)]
        result = detector.detect(ballots)
        assert not result.contested
        assert result.reasons == ()
        assert result.score_stdev == 0.0

    def test_block_with_approve_is_contested(self, detector: ContestationDetector) -> None:
        ballots = [make_ballot(i, Stance.APPROVE, score=85) for i in range(1, 6)]
        ballots += [make_ballot(6, Stance.BLOCK, score=80), make_ballot(7, Stance.BLOCK, score=80)]
        result = detector.detect(ballots)
        assert result.contested
        assert result.reasons[0] == "2 seats blocked while 5 approved"

    def test_score_spread_above_band(self, detector: ContestationDetector) -> None:
        ballots = [
            make_ballot(1, Stance.REVISE, score=10),
            make_ballot(2, Stance.REVISE, score=90),
            make_ballot(3, Stance.REVISE, score=95),
        ]
        result = detector.detect(ballots)
        assert result.contested
        assert result.score_stdev > 20.0
        assert result.reasons == (
            f"score spread {result.score_stdev:.1f} exceeds variance band 20.0",
        )

    def test_stance_tie(self, detector: ContestationDetector) -> None:
        ballots = [
            make_ballot(1, Stance.APPROVE, score=80),
            make_ballot(2, Stance.REVISE, score=75),
        ]
        result = detector.detect(ballots)
        assert result.reasons == ("stance tie at 1 votes each between revise, approve",)

    def test_reasons_in_rule_order(self) -> None:
        detector = ContestationDetector(variance_band=5.0)
        ballots = [
            make_ballot(1, Stance.APPROVE, score=95),
            make_ballot(2, Stance.BLOCK, score=10),
        ]
        result = detector.detect(ballots)
        assert len(result.reasons) == 3
        assert result.reasons[0].startswith("1 seats blocked")
        assert result.reasons[1].startswith("score spread")
        assert result.reasons[2].startswith("stance tie")

    def test_abstentions_ignored(self, detector: ContestationDetector) -> None:
        ballots = [
            make_ballot(1, Stance.APPROVE, score=90),
            make_ballot(2, Stance.ABSTAIN, score=0, confidence=0.0),
            make_ballot(3, Stance.APPROVE, score=92),
        ]
        assert not detector.detect(ballots).contested

    def test_single_voter_never_contested(self, detector: ContestationDetector) -> None:
        assert not detector.detect([make_ballot(1, Stance.BLOCK, score=0)]).contested

    def test_empty_ballots(self, detector: ContestationDetector) -> None:
        result = detector.detect([])
        assert not result.contested

    def test_negative_band_rejected(self) -> None:
        with pytest.raises(ValueError):
            ContestationDetector(variance_band=-1)


class TestContestationOrderIndependence:
    def test_permutations_give_identical_result(self, detector: ContestationDetector) -> None:
        ballots = [
            make_ballot(1, Stance.APPROVE, score=95),
            make_ballot(2, Stance.BLOCK, score=20),
            make_ballot(3, Stance.REVISE, score=60),
            make_ballot(4, Stance.APPROVE, score=85),
        ]
        expected = detector.detect(ballots)
        for permutation in itertools.permutations(ballots):
            assert detector.detect(permutation) == expected
