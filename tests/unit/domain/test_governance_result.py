"""Unit tests for GovernanceResult, Decision and ProofRecord invariants."""

from __future__ import annotations

from datetime import timedelta

import pytest

from govproof.domain.models.decision import Decision
from govproof.domain.models.governance_result import (
    GovernanceResult,
    Grade,
    ParticipationSummary,
    Verdict,
)
from govproof.domain.models.pipeline import AdmissionDecision, RiskDecision
from govproof.domain.models.proof_record import (
    ProofRecord,
    ProofStatus,
    ProofVerification,
)
from govproof.domain.models.seat import DEFAULT_ROSTER, SeatOutcome, SeatStatus
from govproof.domain.signing import format_timestamp
from tests.helpers import make_ballot, make_outcome
from tests.helpers.fake_time_authority import DEFAULT_FROZEN_AT


def _proof(**overrides) -> ProofRecord:
    fields = {
        "proof_id": "prf_abc",
        "input_hash": "sha256:00",
        "issued_at": DEFAULT_FROZEN_AT,
        "expires_at": DEFAULT_FROZEN_AT + timedelta(days=7),
        "policy_pack_version": "2026.01",
        "signature": "c2ln",
    }
    fields.update(overrides)
    return ProofRecord(**fields)


def _result(**overrides) -> GovernanceResult:
    fields = {
        "trace_id": "trc_1",
        "request_id": "req_1",
        "domain": "qna",
        "created_at": DEFAULT_FROZEN_AT,
        "request_created_at": DEFAULT_FROZEN_AT - timedelta(seconds=2),
        "admission": AdmissionDecision(risk_decision=RiskDecision.ALLOW),
        "verdict": Verdict.CERTIFIED,
        "grade": Grade.GREEN,
        "policy_pack_version": "2026.01",
    }
    fields.update(overrides)
    return GovernanceResult(**fields)


class TestGovernanceResultInvariants:
    def test_contested_never_green(self) -> None:
        with pytest.raises(ValueError, match="never be graded green"):
            _result(verdict=Verdict.HUMAN_REVIEW_REQUIRED, contested=True)

    def test_certified_requires_green(self) -> None:
        with pytest.raises(ValueError, match="certified"):
            _result(grade=Grade.YELLOW)

    def test_seats_must_be_sorted(self) -> None:
        seats = (make_outcome(make_ballot(2)), make_outcome(make_ballot(1)))
        with pytest.raises(ValueError, match="sorted"):
            _result(seats=seats)

    def test_seats_must_be_unique(self) -> None:
        outcome = make_outcome(make_ballot(1))
        with pytest.raises(ValueError, match="one outcome per seat"):
            _result(seats=(outcome, outcome))

    def test_to_dict_shape(self) -> None:
        result = _result().with_proof(_proof())
        data = result.to_dict()
        assert list(data) == [
            "trace_id",
            "request_id",
            "domain",
            "created_at",
            "request",
            "admission",
            "seats",
            "judge",
            "contested",
            "contested_reasons",
            "verdict",
            "grade",
            "reasons",
            "trace_steps",
            "participation_summary",
            "policy_pack_version",
            "redaction_count",
            "proof_record",
            "degraded",
        ]
        assert data["proof_record"]["proof_id"] == "prf_abc"
        assert result.proof_id == "prf_abc"

    def test_request_block_carries_submission_time(self) -> None:
        data = _result().to_dict()
        assert data["request"] == {
            "request_id": "req_1",
            "domain": "qna",
            "created_at": format_timestamp(DEFAULT_FROZEN_AT - timedelta(seconds=2)),
        }
        assert data["created_at"] == format_timestamp(DEFAULT_FROZEN_AT)


class TestParticipationSummary:
    def test_groups_seats_by_status(self) -> None:
        outcomes = (
            make_outcome(make_ballot(1)),
            SeatOutcome(descriptor=DEFAULT_ROSTER[1], status=SeatStatus.OFFLINE),
            SeatOutcome(descriptor=DEFAULT_ROSTER[2], status=SeatStatus.TIMEOUT),
            make_outcome(make_ballot(4, stance="abstain", score=0, confidence=0)),
        )
        summary = ParticipationSummary.from_outcomes(outcomes)
        assert summary.voted == (1,)
        assert summary.offline == (2,)
        assert summary.timed_out == (3,)
        assert summary.abstained == (4,)
        assert summary.errored == ()


class TestProofRecord:
    def test_wire_shape_has_exactly_six_fields(self) -> None:
        assert sorted(_proof().to_dict()) == [
            "expires_at",
            "input_hash",
            "issued_at",
            "policy_pack_version",
            "proof_id",
            "signature",
        ]

    def test_expiry_must_follow_issuance(self) -> None:
        with pytest.raises(ValueError, match="must be after"):
            _proof(expires_at=DEFAULT_FROZEN_AT)

    def test_input_hash_prefix_required(self) -> None:
        with pytest.raises(ValueError, match="sha256:"):
            _proof(input_hash="md5:00")

    def test_verification_valid_flag_matches_status(self) -> None:
        with pytest.raises(ValueError):
            ProofVerification(
                valid=True,
                status=ProofStatus.EXPIRED,
                message="expired",
                proof_id="prf_abc",
            )


class TestDecision:
    def test_from_result_uses_first_reason(self) -> None:
        result = _result(
            verdict=Verdict.HUMAN_REVIEW_REQUIRED,
            grade=Grade.YELLOW,
            reasons=("JUDGE:CONTESTED", "JUDGE:RESTRICTED"),
        ).with_proof(_proof())
        decision = Decision.from_result(result, 12.5, DEFAULT_FROZEN_AT)
        assert decision.reason == "JUDGE:CONTESTED"
        assert decision.proof_id == "prf_abc"
        assert decision.decision_id.startswith("dec_")
        assert not decision.certified

    def test_from_result_falls_back_to_verdict(self) -> None:
        decision = Decision.from_result(
            _result().with_proof(_proof()), 1.0, DEFAULT_FROZEN_AT
        )
        assert decision.reason == "CERTIFIED"
        assert decision.certified

    def test_result_without_proof_rejected(self) -> None:
        with pytest.raises(ValueError, match="no proof record"):
            Decision.from_result(_result(), 1.0, DEFAULT_FROZEN_AT)
