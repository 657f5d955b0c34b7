"""Governance engine - composition root.

Wires configuration, seats, registries, the signing key, metrics and the
application services into one object exposing the engine's operations:

    engine = GovernanceEngine(config)
    await engine.start()
    result = await engine.run_governance(request)
    check = await engine.verify_proof_record(result.proof_id, hash)
    await engine.close()

All mutable state (registries, decision window, simulation task) belongs to
the engine instance. The only process-wide state is the signing key.
"""

from __future__ import annotations

from typing import Sequence

from govproof.application.ports.proof_registry import (
    ProofRegistryProtocol,
    RegisteredProof,
)
from govproof.application.ports.proof_signer import ProofSignerProtocol
from govproof.application.ports.seat import SeatProtocol
from govproof.application.ports.share_token_registry import (
    ShareTokenRegistryProtocol,
)
from govproof.application.ports.time_authority import TimeAuthorityProtocol
from govproof.application.services.admission_classifier_service import (
    AdmissionClassifierService,
)
from govproof.application.services.base import LoggingMixin
from govproof.application.services.debate_orchestrator_service import (
    DebateOrchestratorService,
)
from govproof.application.services.governance_pipeline_service import (
    GovernancePipelineService,
    StageObserver,
)
from govproof.application.services.load_simulation_service import (
    LoadSimulationService,
)
from govproof.application.services.proof_issuer_service import ProofIssuerService
from govproof.application.services.proof_verifier_service import (
    ProofVerifierService,
)
from govproof.application.services.share_token_service import ShareTokenService
from govproof.application.services.throughput_monitor_service import (
    ThroughputMonitorService,
)
from govproof.bootstrap.signing import get_signer
from govproof.config.governance_config import GovernanceConfig
from govproof.domain.models.decision import Decision
from govproof.domain.models.governance_result import GovernanceResult
from govproof.domain.models.proof_record import ProofRecord, ProofVerification
from govproof.domain.models.request import GovernanceRequest
from govproof.domain.models.seat import DEFAULT_ROSTER, SeatDescriptor
from govproof.domain.models.share_token import ShareToken
from govproof.domain.models.throughput_snapshot import ThroughputSnapshot
from govproof.domain.services.contestation_detector import ContestationDetector
from govproof.domain.services.grading import GradingPolicy
from govproof.domain.services.judge_synthesizer import JudgeSynthesizer
from govproof.infrastructure.adapters.persistence.in_memory_proof_registry import (
    InMemoryProofRegistry,
)
from govproof.infrastructure.adapters.persistence.in_memory_share_token_registry import (
    InMemoryShareTokenRegistry,
)
from govproof.infrastructure.adapters.seats.provider_seat import (
    ProviderSeat,
    ProviderSeatConfig,
)
from govproof.infrastructure.adapters.time.system_time_authority import (
    SystemTimeAuthority,
)
from govproof.infrastructure.monitoring.metrics import GovernanceMetricsCollector
from govproof.infrastructure.stubs.synthetic_seat_stub import build_synthetic_roster

# Simulated seats answer quickly but not instantly
SIMULATION_SEAT_LATENCY_MS = 2.0
SIMULATION_SEAT_JITTER_MS = 8.0


def roster_descriptors(size: int) -> tuple[SeatDescriptor, ...]:
    """The first size seats of the default roster, padded with synthetic seats."""
    descriptors = list(DEFAULT_ROSTER[:size])
    for seat_id in range(len(descriptors) + 1, size + 1):
        descriptors.append(
            SeatDescriptor(seat_id=seat_id, provider="Synthetic", model=f"synthetic-{seat_id}")
        )
    return tuple(descriptors)


def build_default_seats(config: GovernanceConfig) -> list[SeatProtocol]:
    """Provider seats when a gateway is configured, synthetic seats otherwise."""
    descriptors = roster_descriptors(config.roster_size)
    if config.provider_base_url:
        provider_config = ProviderSeatConfig(
            base_url=config.provider_base_url,
            api_key=config.provider_api_key or "",
            timeout_seconds=config.seat_timeout_seconds,
        )
        return [ProviderSeat(descriptor, provider_config) for descriptor in descriptors]
    return list(build_synthetic_roster(descriptors))


class GovernanceEngine(LoggingMixin):
    """Composition root for the governance engine.

    Attributes:
        config: Active configuration.
        metrics: Metrics collector shared by every service.
        monitor: Throughput monitor holding the decision window.
        pipeline: Pipeline serving run_governance().
        simulation: Background load generator.
    """

    def __init__(
        self,
        config: GovernanceConfig | None = None,
        *,
        seats: Sequence[SeatProtocol] | None = None,
        signer: ProofSignerProtocol | None = None,
        time_authority: TimeAuthorityProtocol | None = None,
        proof_registry: ProofRegistryProtocol | None = None,
        token_registry: ShareTokenRegistryProtocol | None = None,
        metrics: GovernanceMetricsCollector | None = None,
    ) -> None:
        """Wire the engine.

        Args:
            config: Configuration; read from the environment when omitted.
            seats: Roster; built from config when omitted.
            signer: Proof signer; the process signing key when omitted.
            time_authority: Clock; system time when omitted.
            proof_registry: Proof store; in-memory when omitted.
            token_registry: Share token store; in-memory when omitted.
            metrics: Metrics sink; a private Prometheus collector when omitted.

        Raises:
            DuplicateSeatError: If the roster repeats a seat_id.
            ConfigurationError: If the configured signing key cannot be loaded.
        """
        self.config = config or GovernanceConfig.from_environment()
        self._time = time_authority or SystemTimeAuthority()
        self._signer = signer or get_signer(self.config.signing_key_path)
        self._proofs = proof_registry or InMemoryProofRegistry()
        self._tokens = token_registry or InMemoryShareTokenRegistry()
        self.metrics = metrics or GovernanceMetricsCollector()
        self._init_logger(component="engine")

        self.monitor = ThroughputMonitorService(
            self._time, window_size=self.config.decision_window, metrics=self.metrics
        )
        self._issuer = ProofIssuerService(
            signer=self._signer,
            time_authority=self._time,
            policy_pack_version=self.config.policy_pack_version,
            validity=self.config.proof_validity,
        )
        self._verifier = ProofVerifierService(
            registry=self._proofs,
            signer=self._signer,
            time_authority=self._time,
            metrics=self.metrics,
        )
        self._share_tokens = ShareTokenService(
            token_registry=self._tokens,
            proof_registry=self._proofs,
            time_authority=self._time,
            validity=self.config.share_token_validity,
        )

        roster = list(seats) if seats is not None else build_default_seats(self.config)
        self.pipeline = self._build_pipeline(roster)

        simulation_seats = build_synthetic_roster(
            [seat.descriptor for seat in roster],
            latency_ms=SIMULATION_SEAT_LATENCY_MS,
            jitter_ms=SIMULATION_SEAT_JITTER_MS,
        )
        self.simulation = LoadSimulationService(
            self._build_pipeline(simulation_seats), self._time
        )
        self._started = False

    def _build_pipeline(self, seats: Sequence[SeatProtocol]) -> GovernancePipelineService:
        orchestrator = DebateOrchestratorService(
            seats=seats,
            time_authority=self._time,
            seat_timeout_seconds=self.config.seat_timeout_seconds,
            debate_deadline_seconds=self.config.debate_deadline_seconds,
            metrics=self.metrics,
        )
        return GovernancePipelineService(
            classifier=AdmissionClassifierService(self.config.max_payload_chars),
            orchestrator=orchestrator,
            detector=ContestationDetector(self.config.score_variance_band),
            judge=JudgeSynthesizer(self.config.seat_weights),
            grading=GradingPolicy(
                pass_threshold=self.config.pass_threshold,
                review_threshold=self.config.review_threshold,
                restrict_caps_grade=self.config.restrict_caps_grade,
            ),
            issuer=self._issuer,
            verifier=self._verifier,
            registry=self._proofs,
            monitor=self.monitor,
            time_authority=self._time,
        )

    @property
    def started(self) -> bool:
        return self._started

    @property
    def time_authority(self) -> TimeAuthorityProtocol:
        return self._time

    @property
    def signer(self) -> ProofSignerProtocol:
        return self._signer

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self) -> None:
        """Mark the engine as serving. Idempotent."""
        if self._started:
            return
        self._started = True
        self._log_operation("start").info(
            "governance_engine_started",
            roster_size=len(self.pipeline.roster),
            policy_pack_version=self.config.policy_pack_version,
            signing_key_id=self._signer.key_id,
        )

    async def close(self) -> None:
        """Stop background work. Idempotent."""
        await self.simulation.stop()
        if self._started:
            self._started = False
            self._log_operation("close").info(
                "governance_engine_stopped",
                total_processed=self.monitor.snapshot().total_processed,
            )

    async def __aenter__(self) -> GovernanceEngine:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # =========================================================================
    # Governance
    # =========================================================================

    async def run_governance(self, request: GovernanceRequest) -> GovernanceResult:
        """Run a request through the pipeline."""
        return await self.pipeline.run(request)

    async def run_governance_with_progress(
        self, request: GovernanceRequest, on_step: StageObserver
    ) -> GovernanceResult:
        """Run a request, reporting each pipeline stage to on_step in order."""
        return await self.pipeline.run_with_progress(request, on_step)

    # =========================================================================
    # Proofs and share tokens
    # =========================================================================

    async def verify_proof_record(
        self, proof_id: str, input_hash: str
    ) -> ProofVerification:
        return await self._verifier.verify(proof_id, input_hash)

    async def get_proof(self, proof_id: str) -> RegisteredProof | None:
        return await self._proofs.get(proof_id)

    async def generate_share_token(self, proof: ProofRecord | str) -> ShareToken:
        """Issue a share token for a proof record or proof id.

        Raises:
            ProofNotFoundError: If the proof is not registered.
        """
        proof_id = proof.proof_id if isinstance(proof, ProofRecord) else proof
        return await self._share_tokens.issue(proof_id)

    async def redeem_share_token(self, token: str) -> RegisteredProof:
        """Resolve a share token to its proof.

        Raises:
            ShareTokenError: If the token is unknown, revoked or expired.
        """
        return await self._share_tokens.redeem(token)

    async def revoke_share_token(self, token: str) -> bool:
        return await self._share_tokens.revoke(token)

    # =========================================================================
    # Throughput
    # =========================================================================

    def throughput_snapshot(self) -> ThroughputSnapshot:
        return self.monitor.snapshot()

    def recent_decisions(self, limit: int | None = None) -> tuple[Decision, ...]:
        return self.monitor.recent(limit)

    async def start_simulation(self, rate_per_second: float, batch: bool = False) -> None:
        """Start synthetic load.

        Raises:
            ValueError: If the rate is out of range.
        """
        await self.simulation.start(rate_per_second, batch=batch)

    async def stop_simulation(self) -> None:
        await self.simulation.stop()

    @property
    def simulation_running(self) -> bool:
        return self.simulation.running
