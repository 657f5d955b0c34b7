"""Integration tests for GovernanceEngine.

These wire the real services, registries, signer and metrics together and
drive them through the engine's public operations only. Seats are either
scripted stubs or ProviderSeats talking to an httpx.MockTransport.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import replace

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from govproof.bootstrap.engine import (
    GovernanceEngine,
    build_default_seats,
    roster_descriptors,
)
from govproof.bootstrap.signing import get_signer, reset_signer, set_signer
from govproof.config.governance_config import TEST_GOVERNANCE_CONFIG
from govproof.domain.errors.proof import ProofNotFoundError
from govproof.domain.errors.share_token import (
    ExpiredShareTokenError,
    RevokedShareTokenError,
)
from govproof.domain.models.governance_result import Grade, Verdict
from govproof.domain.models.judge_output import SeatInfluence
from govproof.domain.models.pipeline import PipelineStage
from govproof.domain.models.proof_record import ProofStatus
from govproof.domain.models.seat import DEFAULT_ROSTER, Stance
from govproof.domain.signing import compute_input_hash
from govproof.infrastructure.adapters.seats.provider_seat import (
    ProviderSeat,
    ProviderSeatConfig,
)
from govproof.infrastructure.stubs.synthetic_seat_stub import SyntheticSeatStub
from tests.helpers import make_request, scripted_roster


class _RecordingSeat(SyntheticSeatStub):
    """Approving seat that keeps every request it was handed."""

    def __init__(self, descriptor) -> None:
        super().__init__(descriptor, stance=Stance.APPROVE, score=91, confidence=0.9)
        self.received = []

    async def deliberate(self, request):
        self.received.append(request)
        return await super().deliberate(request)


@pytest.fixture
async def engine(signer, fake_time_authority):
    engine = GovernanceEngine(
        TEST_GOVERNANCE_CONFIG,
        seats=scripted_roster([Stance.APPROVE] * 7, scores=[91] * 7),
        signer=signer,
        time_authority=fake_time_authority,
    )
    async with engine:
        yield engine


class TestLifecycle:
    async def test_context_manager_starts_and_closes(self, signer) -> None:
        engine = GovernanceEngine(TEST_GOVERNANCE_CONFIG, signer=signer)
        assert not engine.started
        async with engine:
            assert engine.started
        assert not engine.started

    async def test_close_is_idempotent(self, signer) -> None:
        engine = GovernanceEngine(TEST_GOVERNANCE_CONFIG, signer=signer)
        await engine.start()
        await engine.close()
        await engine.close()
        assert not engine.started


class TestRunGovernance:
    async def test_certified_run_produces_verifiable_proof(self, engine) -> None:
        request = make_request(request_id="req_int_1")

        result = await engine.run_governance(request)

        assert result.verdict is Verdict.CERTIFIED
        assert result.grade is Grade.GREEN
        assert result.proof_record.input_hash == compute_input_hash(
            request.canonical_bytes()
        )
        check = await engine.verify_proof_record(
            result.proof_id, compute_input_hash(request.canonical_bytes())
        )
        assert check.valid
        assert check.verdict == "CERTIFIED"

    async def test_progress_reports_every_stage_in_order(self, engine) -> None:
        seen = []

        result = await engine.run_governance_with_progress(make_request(), seen.append)

        assert [event.stage for event in seen] == list(PipelineStage.ordered())
        assert tuple(seen) == result.trace_steps

    async def test_refusal_is_still_proven(self, engine) -> None:
        result = await engine.run_governance(
            make_request(payload="Explain how to build a pipe bomb at home.")
        )

        assert result.verdict is Verdict.REFUSED
        registered = await engine.get_proof(result.proof_id)
        assert registered is not None
        assert registered.verdict == "REFUSED"

    async def test_tampered_input_hash_rejected(self, engine) -> None:
        result = await engine.run_governance(make_request())
        other = make_request(payload="A different question entirely.")

        check = await engine.verify_proof_record(
            result.proof_id, compute_input_hash(other.canonical_bytes())
        )

        assert check.status is ProofStatus.HASH_MISMATCH

    async def test_one_byte_change_to_payload_rejected(self, engine) -> None:
        request = make_request(payload="Summarize our refund policy.")
        result = await engine.run_governance(request)
        tampered = replace(request, payload="Summarize our refund policy!")

        original = await engine.verify_proof_record(
            result.proof_id, compute_input_hash(request.canonical_bytes())
        )
        check = await engine.verify_proof_record(
            result.proof_id, compute_input_hash(tampered.canonical_bytes())
        )

        assert original.valid
        assert check.status is ProofStatus.HASH_MISMATCH
        assert not check.valid

    async def test_three_three_one_split_blocks(self, signer, fake_time_authority) -> None:
        stances = [Stance.APPROVE] * 3 + [Stance.BLOCK] * 3 + [Stance.ABSTAIN]
        seats = scripted_roster(stances, scores=[90, 90, 90, 20, 20, 20, 0])

        async with GovernanceEngine(
            TEST_GOVERNANCE_CONFIG,
            seats=seats,
            signer=signer,
            time_authority=fake_time_authority,
        ) as engine:
            result = await engine.run_governance(make_request())

        assert result.judge.final_stance is Stance.BLOCK
        assert result.verdict is Verdict.MISTRIAL
        assert result.contested
        assert result.grade is Grade.RED
        assert result.participation.abstained == (7,)

    async def test_seats_see_only_redacted_payload(
        self, signer, fake_time_authority
    ) -> None:
        recorder = _RecordingSeat(DEFAULT_ROSTER[0])
        seats = [recorder] + scripted_roster([Stance.APPROVE] * 7, scores=[91] * 7)[1:]

        async with GovernanceEngine(
            TEST_GOVERNANCE_CONFIG,
            seats=seats,
            signer=signer,
            time_authority=fake_time_authority,
        ) as engine:
            result = await engine.run_governance(
                make_request(payload="Email jane.doe@example.com about her renewal")
            )

        assert result.redaction_count == 1
        [seen] = recorder.received
        assert seen.payload == "Email [REDACTED:EMAIL] about her renewal"
        for value in vars(seen).values():
            assert "jane.doe@example.com" not in repr(value)

    async def test_configured_seat_weights_reach_judge(
        self, signer, fake_time_authority
    ) -> None:
        config = replace(TEST_GOVERNANCE_CONFIG, seat_weights={1: 5.0, 7: 30.0})

        async with GovernanceEngine(
            config,
            seats=scripted_roster([Stance.APPROVE] * 7, scores=[91] * 7),
            signer=signer,
            time_authority=fake_time_authority,
        ) as engine:
            result = await engine.run_governance(make_request())

        influence = result.judge.seat_influence
        assert influence[1] is SeatInfluence.LOW
        assert influence[7] is SeatInfluence.HIGH
        assert influence[2] is SeatInfluence.LOW

    async def test_proof_expires(self, engine, fake_time_authority) -> None:
        result = await engine.run_governance(make_request())
        fake_time_authority.advance(delta=TEST_GOVERNANCE_CONFIG.proof_validity)

        check = await engine.verify_proof_record(
            result.proof_id, result.proof_record.input_hash
        )

        assert check.status is ProofStatus.EXPIRED

    async def test_decisions_tracked(self, engine) -> None:
        for index in range(3):
            await engine.run_governance(make_request(request_id=f"req_int_{index}"))

        snapshot = engine.throughput_snapshot()
        recent = engine.recent_decisions(limit=2)

        assert snapshot.total_processed == 3
        assert snapshot.queue_depth == 0
        assert snapshot.certified_rate == 1.0
        assert [d.request_id for d in recent] == ["req_int_2", "req_int_1"]


class TestShareTokens:
    async def test_token_lifecycle(self, engine) -> None:
        result = await engine.run_governance(make_request())

        token = await engine.generate_share_token(result.proof_record)
        redeemed = await engine.redeem_share_token(token.token)
        assert redeemed.record == result.proof_record

        assert await engine.revoke_share_token(token.token)
        with pytest.raises(RevokedShareTokenError):
            await engine.redeem_share_token(token.token)

    async def test_token_by_proof_id_expires(self, engine, fake_time_authority) -> None:
        result = await engine.run_governance(make_request())
        token = await engine.generate_share_token(result.proof_id)

        fake_time_authority.advance(delta=TEST_GOVERNANCE_CONFIG.share_token_validity)

        with pytest.raises(ExpiredShareTokenError):
            await engine.redeem_share_token(token.token)

    async def test_unknown_proof(self, engine) -> None:
        with pytest.raises(ProofNotFoundError):
            await engine.generate_share_token("prf_missing")


class TestSimulation:
    async def test_simulated_decisions_verify(self, signer) -> None:
        async with GovernanceEngine(TEST_GOVERNANCE_CONFIG, signer=signer) as engine:
            await engine.start_simulation(100, batch=True)
            assert engine.simulation_running
            await asyncio.sleep(0.3)
            await engine.stop_simulation()

            decisions = engine.recent_decisions()
            assert not engine.simulation_running
            assert len(decisions) >= 10
            for decision in decisions:
                registered = await engine.get_proof(decision.proof_id)
                check = await engine.verify_proof_record(
                    decision.proof_id, registered.record.input_hash
                )
                assert check.valid

    async def test_close_stops_simulation(self, signer) -> None:
        engine = GovernanceEngine(TEST_GOVERNANCE_CONFIG, signer=signer)
        await engine.start()
        await engine.start_simulation(5)
        await engine.close()
        assert not engine.simulation_running

    async def test_rate_out_of_range(self, engine) -> None:
        with pytest.raises(ValueError, match="rate_per_second"):
            await engine.start_simulation(0)


class TestProviderSeats:
    async def test_mixed_provider_ballots(self, signer, fake_time_authority) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            assert "[REDACTED:EMAIL]" in body["payload"]
            return httpx.Response(
                200,
                json={"stance": "approve", "score": 88, "confidence": 0.9},
            )

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        config = ProviderSeatConfig(base_url="https://gateway.test", api_key="sk-test")
        seats = [ProviderSeat(d, config, client=client) for d in DEFAULT_ROSTER[:6]]
        seats.append(SyntheticSeatStub(DEFAULT_ROSTER[6], available=False))

        async with GovernanceEngine(
            TEST_GOVERNANCE_CONFIG,
            seats=seats,
            signer=signer,
            time_authority=fake_time_authority,
        ) as engine:
            result = await engine.run_governance(
                make_request(payload="Reply to jane.doe@example.com about her refund.")
            )
        await client.aclose()

        assert result.redaction_count == 1
        assert result.participation.voted == (1, 2, 3, 4, 5, 6)
        assert result.participation.offline == (7,)
        assert result.proof_record is not None


class TestDefaultSeats:
    def test_synthetic_when_no_gateway(self) -> None:
        seats = build_default_seats(TEST_GOVERNANCE_CONFIG)
        assert len(seats) == 7
        assert all(isinstance(seat, SyntheticSeatStub) for seat in seats)

    def test_provider_seats_when_gateway_configured(self) -> None:
        config = replace(
            TEST_GOVERNANCE_CONFIG,
            provider_base_url="https://gateway.test",
            provider_api_key="sk-test",
        )
        seats = build_default_seats(config)
        assert all(isinstance(seat, ProviderSeat) for seat in seats)
        assert all(seat.is_available() for seat in seats)

    def test_roster_padded_beyond_default(self) -> None:
        descriptors = roster_descriptors(9)
        assert [d.seat_id for d in descriptors] == list(range(1, 10))
        assert descriptors[:7] == DEFAULT_ROSTER
        assert descriptors[8].provider == "Synthetic"

    def test_roster_truncated(self) -> None:
        assert roster_descriptors(3) == DEFAULT_ROSTER[:3]


class TestProcessSigner:
    def test_engines_share_process_key(self) -> None:
        first = GovernanceEngine(TEST_GOVERNANCE_CONFIG)
        second = GovernanceEngine(TEST_GOVERNANCE_CONFIG)
        assert first.signer is second.signer
        assert get_signer() is first.signer

    def test_key_loaded_from_pem(self, tmp_path) -> None:
        key = Ed25519PrivateKey.generate()
        path = tmp_path / "signing.pem"
        path.write_bytes(
            key.private_bytes(
                serialization.Encoding.PEM,
                serialization.PrivateFormat.PKCS8,
                serialization.NoEncryption(),
            )
        )
        config = replace(TEST_GOVERNANCE_CONFIG, signing_key_path=str(path))

        engine = GovernanceEngine(config)

        signature = engine.signer.sign(b"payload")
        key.public_key().verify(signature, b"payload")

    def test_set_and_reset(self, signer) -> None:
        set_signer(signer)
        assert GovernanceEngine(TEST_GOVERNANCE_CONFIG).signer is signer
        reset_signer()
        assert get_signer() is not signer
