"""Unit tests for JudgeSynthesizer."""

from __future__ import annotations

import itertools

import pytest

from govproof.domain.models.judge_output import RiskLevel, SeatInfluence
from govproof.domain.models.seat import DEFAULT_ROSTER, SeatOutcome, SeatStatus, Stance
from govproof.domain.services.contestation_detector import ContestationDetector
from govproof.domain.services.judge_synthesizer import (
    INSUFFICIENT_EVIDENCE_ANSWER,
    JudgeSynthesizer,
    classify_flag,
)
from tests.helpers import make_ballot, make_outcome


@pytest.fixture
def judge() -> JudgeSynthesizer:
    return JudgeSynthesizer()


@pytest.fixture
def detector() -> ContestationDetector:
    return ContestationDetector()


def _synthesize(judge, detector, outcomes):
    ballots = [o.ballot for o in outcomes if o.ballot is not None]
    return judge.synthesize(outcomes, detector.detect(ballots))


class TestMajority:
    def test_majority_stance_wins(self, judge, detector) -> None:
        outcomes = [make_outcome(make_ballot(i, Stance.APPROVE)) for i in range(1, 6)]
        outcomes += [make_outcome(make_ballot(6, Stance.REVISE, score=70))]
        output = _synthesize(judge, detector, outcomes)
        assert output.final_stance is Stance.APPROVE
        assert not output.insufficient_evidence

    def test_tie_resolved_conservatively(self, judge, detector) -> None:
        outcomes = [
            make_outcome(make_ballot(1, Stance.APPROVE)),
            make_outcome(make_ballot(2, Stance.APPROVE)),
            make_outcome(make_ballot(3, Stance.APPROVE)),
            make_outcome(make_ballot(4, Stance.REVISE, score=70)),
            make_outcome(make_ballot(5, Stance.REVISE, score=70)),
            make_outcome(make_ballot(6, Stance.REVISE, score=70)),
            make_outcome(make_ballot(7, Stance.BLOCK, score=20)),
        ]
        output = _synthesize(judge, detector, outcomes)
        assert output.final_stance is Stance.REVISE
        assert any("tie resolved conservatively" in line for line in output.rationale)

    def test_three_approve_three_block_one_abstain(self, judge, detector) -> None:
        outcomes = [make_outcome(make_ballot(i, Stance.APPROVE)) for i in (1, 2, 3)]
        outcomes += [make_outcome(make_ballot(i, Stance.BLOCK, score=20)) for i in (4, 5, 6)]
        outcomes.append(make_outcome(make_ballot(7, Stance.ABSTAIN, score=0, confidence=0)))

        output = _synthesize(judge, detector, outcomes)

        assert output.final_stance is Stance.BLOCK
        assert output.rationale[0] == "6 of 7 seats voted: 3 approve, 0 revise, 3 block"
        assert output.rationale[1] == "Majority stance: block (tie resolved conservatively)"
        assert output.seat_influence[7] is SeatInfluence.NONE

    def test_block_beats_approve_on_tie(self, judge, detector) -> None:
        outcomes = [
            make_outcome(make_ballot(1, Stance.APPROVE)),
            make_outcome(make_ballot(2, Stance.BLOCK, score=10)),
        ]
        assert _synthesize(judge, detector, outcomes).final_stance is Stance.BLOCK

    def test_abstentions_do_not_vote(self, judge, detector) -> None:
        outcomes = [
            make_outcome(make_ballot(1, Stance.REVISE, score=70)),
            make_outcome(make_ballot(2, Stance.ABSTAIN, score=0, confidence=0)),
            make_outcome(make_ballot(3, Stance.ABSTAIN, score=0, confidence=0)),
        ]
        output = _synthesize(judge, detector, outcomes)
        assert output.final_stance is Stance.REVISE
        assert output.seat_influence[2] is SeatInfluence.NONE


class TestAggregates:
    def test_confidence_weighted_score(self, judge, detector) -> None:
        outcomes = [
            make_outcome(make_ballot(1, Stance.APPROVE, score=100, confidence=0.75)),
            make_outcome(make_ballot(2, Stance.APPROVE, score=80, confidence=0.25)),
        ]
        output = _synthesize(judge, detector, outcomes)
        assert output.aggregate_score == pytest.approx(95.0)
        assert output.aggregate_confidence == pytest.approx(0.5)

    def test_zero_confidence_falls_back_to_mean(self, judge, detector) -> None:
        outcomes = [
            make_outcome(make_ballot(1, Stance.APPROVE, score=90, confidence=0.0)),
            make_outcome(make_ballot(2, Stance.APPROVE, score=70, confidence=0.0)),
        ]
        assert _synthesize(judge, detector, outcomes).aggregate_score == pytest.approx(80.0)


class TestRisk:
    def test_no_flags_is_low(self, judge, detector) -> None:
        outcomes = [make_outcome(make_ballot(1))]
        assert _synthesize(judge, detector, outcomes).risk_verdict.level is RiskLevel.LOW

    def test_highest_flag_wins(self, judge, detector) -> None:
        outcomes = [
            make_outcome(make_ballot(1, risk_flags=["tone"])),
            make_outcome(make_ballot(2, risk_flags=["pii_exposure"])),
        ]
        verdict = _synthesize(judge, detector, outcomes).risk_verdict
        assert verdict.level is RiskLevel.HIGH
        assert any("pii_exposure (high) raised by seats 2" == note for note in verdict.notes)

    def test_unknown_flag_is_medium(self) -> None:
        assert classify_flag("something_new") is RiskLevel.MEDIUM
        assert classify_flag(" Violence ") is RiskLevel.HIGH


class TestInsufficientEvidence:
    def test_no_ballots(self, judge, detector) -> None:
        outcomes = [
            SeatOutcome(descriptor=d, status=SeatStatus.TIMEOUT, error="timeout")
            for d in DEFAULT_ROSTER
        ]
        output = _synthesize(judge, detector, outcomes)
        assert output.insufficient_evidence
        assert output.final_stance is Stance.ABSTAIN
        assert output.risk_verdict.level is RiskLevel.MEDIUM
        assert output.final_answer == INSUFFICIENT_EVIDENCE_ANSWER
        assert set(output.seat_influence.values()) == {SeatInfluence.NONE}

    def test_all_abstain_keeps_high_risk(self, judge, detector) -> None:
        outcomes = [
            make_outcome(
                make_ballot(1, Stance.ABSTAIN, score=0, confidence=0, risk_flags=["violence"])
            )
        ]
        output = _synthesize(judge, detector, outcomes)
        assert output.insufficient_evidence
        assert output.risk_verdict.level is RiskLevel.HIGH


class TestContestedRationale:
    def test_minority_positions_restated(self, judge, detector) -> None:
        outcomes = [make_outcome(make_ballot(i, Stance.APPROVE)) for i in range(1, 6)]
        outcomes += [
            make_outcome(
                make_ballot(6, Stance.BLOCK, score=30, key_points=["Cites an unverified statistic"])
            ),
            make_outcome(make_ballot(7, Stance.BLOCK, score=30)),
        ]
        output = _synthesize(judge, detector, outcomes)
        assert output.final_stance is Stance.APPROVE
        assert any(line.startswith("Contested: ") for line in output.rationale)
        assert (
            "Minority position (block) from seats 6, 7: Cites an unverified statistic"
            in output.rationale
        )
        assert output.seat_influence[6] is SeatInfluence.MEDIUM
        assert output.seat_influence[1] is SeatInfluence.HIGH


class TestSeatInfluence:
    def test_default_weights(self, judge, detector) -> None:
        outcomes = [make_outcome(make_ballot(i, Stance.APPROVE)) for i in range(1, 8)]
        influence = _synthesize(judge, detector, outcomes).seat_influence
        assert influence == {
            1: SeatInfluence.HIGH,
            2: SeatInfluence.HIGH,
            3: SeatInfluence.HIGH,
            4: SeatInfluence.MEDIUM,
            5: SeatInfluence.MEDIUM,
            6: SeatInfluence.MEDIUM,
            7: SeatInfluence.MEDIUM,
        }

    def test_configured_weights(self, detector) -> None:
        judge = JudgeSynthesizer(seat_weights={1: 40.0, 2: 10.0, 3: 9.5})
        outcomes = [
            make_outcome(make_ballot(1, Stance.APPROVE)),
            make_outcome(make_ballot(2, Stance.BLOCK, score=20)),
            make_outcome(make_ballot(3, Stance.APPROVE)),
            make_outcome(make_ballot(4, Stance.APPROVE)),
            make_outcome(make_ballot(5, Stance.ABSTAIN, score=0, confidence=0)),
        ]
        influence = _synthesize(judge, detector, outcomes).seat_influence
        assert influence == {
            1: SeatInfluence.HIGH,
            2: SeatInfluence.MEDIUM,
            3: SeatInfluence.LOW,
            4: SeatInfluence.LOW,
            5: SeatInfluence.NONE,
        }

    def test_weights_do_not_move_aggregate_score(self, detector) -> None:
        outcomes = [
            make_outcome(make_ballot(1, Stance.APPROVE, score=100, confidence=0.75)),
            make_outcome(make_ballot(2, Stance.APPROVE, score=80, confidence=0.25)),
        ]
        skewed = JudgeSynthesizer(seat_weights={1: 0.0, 2: 100.0})
        assert _synthesize(skewed, detector, outcomes).aggregate_score == pytest.approx(95.0)


class TestDeterminism:
    def test_output_independent_of_outcome_order(self, judge, detector) -> None:
        outcomes = [
            make_outcome(make_ballot(1, Stance.APPROVE, score=91, risk_flags=["tone"])),
            make_outcome(make_ballot(2, Stance.REVISE, score=64, confidence=0.6)),
            make_outcome(make_ballot(3, Stance.BLOCK, score=22, risk_flags=["bias"])),
            make_outcome(make_ballot(4, Stance.APPROVE, score=83, confidence=0.5)),
        ]
        expected = _synthesize(judge, detector, outcomes)
        for permutation in itertools.permutations(outcomes):
            assert _synthesize(judge, detector, list(permutation)) == expected
