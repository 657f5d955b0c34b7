"""Governance pipeline service.

Drives a request through the eight pipeline stages and returns a complete
GovernanceResult. Every call terminates in exactly one verdict.

Architecture Pattern:
    run(request, observer):
      ├─ INTERCEPT       structural checks       -> refused: jump to VERIFY
      ├─ CLASSIFY_RISK   ALLOW/RESTRICT/BLOCK    -> BLOCK: jump to VERIFY
      ├─ SANITIZE        one-way redaction
      ├─ DEBATE          concurrent seat fan-out
      ├─ JUDGE           contestation + synthesis + grading
      ├─ VERIFY          issue proof, register, self-verify
      ├─ LOG             record Decision in the throughput window
      └─ RELEASE         return the result

Stage events:
- Exactly one StageEvent per stage, in pipeline order, for every run
- Stages passed over by an early exit are reported as skipped
- LOG and RELEASE are only reached once VERIFY has produced a registered,
  self-verified proof; otherwise they are reported as skipped
- Observer failures are logged and never affect the run

Fault handling:
Any unexpected exception inside a stage degrades the run to
HUMAN_REVIEW_REQUIRED with reason "PIPELINE_FAULT:<STAGE>". The caller
always receives a complete result.
"""

from __future__ import annotations

import inspect
from dataclasses import replace
from typing import Awaitable, Callable
from uuid import uuid4

import structlog

from govproof.application.ports.proof_registry import (
    ProofRegistryProtocol,
    RegisteredProof,
)
from govproof.application.ports.time_authority import TimeAuthorityProtocol
from govproof.application.services.admission_classifier_service import (
    AdmissionClassifierService,
)
from govproof.application.services.base import LoggingMixin
from govproof.application.services.debate_orchestrator_service import (
    DebateOrchestratorService,
    DebateResult,
)
from govproof.application.services.proof_issuer_service import ProofIssuerService
from govproof.application.services.proof_verifier_service import (
    ProofVerifierService,
)
from govproof.application.services.throughput_monitor_service import (
    ThroughputMonitorService,
)
from govproof.domain.errors.proof import ProofError
from govproof.domain.models.decision import Decision
from govproof.domain.models.governance_result import (
    GovernanceResult,
    Grade,
    ParticipationSummary,
    Verdict,
)
from govproof.domain.models.judge_output import JudgeOutput
from govproof.domain.models.pipeline import (
    PIPELINE_ORDER,
    AdmissionDecision,
    PipelineStage,
    RiskDecision,
    StageEvent,
    StageStatus,
)
from govproof.domain.models.request import GovernanceRequest, SanitizedRequest
from govproof.domain.models.seat import SeatDescriptor
from govproof.domain.services.contestation_detector import (
    ContestationDetector,
    ContestationResult,
)
from govproof.domain.services.grading import GradeOutcome, GradingPolicy
from govproof.domain.services.judge_synthesizer import JudgeSynthesizer
from govproof.infrastructure.observability.correlation import correlation_scope

# Callback invoked once per stage; may be sync or async
StageObserver = Callable[[StageEvent], "Awaitable[None] | None"]


def pipeline_fault_reason(stage: PipelineStage) -> str:
    return f"PIPELINE_FAULT:{stage.value}"


class _StageTrace:
    """Collects stage events in order and forwards them to an observer."""

    def __init__(
        self,
        time_authority: TimeAuthorityProtocol,
        observer: StageObserver | None,
        log: structlog.BoundLogger,
    ) -> None:
        self._time = time_authority
        self._observer = observer
        self._log = log
        self.events: list[StageEvent] = []

    def start(self) -> float:
        return self._time.monotonic()

    @property
    def next_stage(self) -> PipelineStage | None:
        position = len(self.events)
        return PIPELINE_ORDER[position] if position < len(PIPELINE_ORDER) else None

    async def emit(
        self,
        stage: PipelineStage,
        status: StageStatus,
        started: float | None = None,
        detail: str = "",
    ) -> None:
        """Emit an event for stage, first reporting any passed-over stages as skipped."""
        await self.skip_until(stage)
        elapsed_ms = (self._time.monotonic() - started) * 1000 if started is not None else 0.0
        await self._publish(StageEvent(stage, status, elapsed_ms, detail))

    async def skip_until(self, stage: PipelineStage) -> None:
        while self.next_stage is not None and self.next_stage is not stage:
            await self._publish(StageEvent(self.next_stage, StageStatus.SKIPPED))

    async def skip_rest(self) -> None:
        while self.next_stage is not None:
            await self._publish(StageEvent(self.next_stage, StageStatus.SKIPPED))

    async def _publish(self, event: StageEvent) -> None:
        self.events.append(event)
        self._log.debug(
            "pipeline_stage",
            stage=event.stage.value,
            status=event.status.value,
            elapsed_ms=round(event.elapsed_ms, 3),
        )
        if self._observer is None:
            return
        try:
            outcome = self._observer(event)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            # The observer is the caller's code; its failures never alter the run
            self._log.warning(
                "stage_observer_failed",
                stage=event.stage.value,
                error_type=type(e).__name__,
                error=str(e),
            )


class GovernancePipelineService(LoggingMixin):
    """Runs governance requests end to end.

    Attributes:
        _classifier: Intercept, risk classification and sanitization.
        _orchestrator: Seat debate fan-out.
        _detector: Contestation detection.
        _judge: Judge synthesis.
        _grading: Grade and verdict policy.
        _issuer: Proof issuance.
        _verifier: Proof self-verification.
        _registry: Proof registry.
        _monitor: Throughput monitor.
        _time: Time authority.
    """

    def __init__(
        self,
        classifier: AdmissionClassifierService,
        orchestrator: DebateOrchestratorService,
        detector: ContestationDetector,
        judge: JudgeSynthesizer,
        grading: GradingPolicy,
        issuer: ProofIssuerService,
        verifier: ProofVerifierService,
        registry: ProofRegistryProtocol,
        monitor: ThroughputMonitorService,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        self._classifier = classifier
        self._orchestrator = orchestrator
        self._detector = detector
        self._judge = judge
        self._grading = grading
        self._issuer = issuer
        self._verifier = verifier
        self._registry = registry
        self._monitor = monitor
        self._time = time_authority
        self._init_logger(component="pipeline")

    @property
    def roster(self) -> tuple[SeatDescriptor, ...]:
        return self._orchestrator.roster

    async def run(
        self,
        request: GovernanceRequest,
        observer: StageObserver | None = None,
    ) -> GovernanceResult:
        """Run a request through the pipeline.

        Args:
            request: The request to govern.
            observer: Optional callback receiving one StageEvent per stage.

        Returns:
            A complete GovernanceResult carrying its proof record (unless
            proof issuance itself failed, in which case the result is
            degraded and has no proof).
        """
        trace_id = f"trc_{uuid4().hex}"
        with correlation_scope(trace_id):
            log = self._log_operation(
                "run", request_id=request.request_id, trace_id=trace_id
            )
            started = self._time.monotonic()
            log.info("governance_run_started", domain=request.domain)

            self._monitor.begin()
            try:
                result = await self._execute(request, trace_id, observer, log, started)
            finally:
                self._monitor.end()

            log.info(
                "governance_run_completed",
                verdict=result.verdict.value,
                grade=result.grade.value,
                contested=result.contested,
                degraded=result.degraded,
                proof_id=result.proof_id,
                elapsed_ms=round((self._time.monotonic() - started) * 1000, 3),
            )
        return result

    async def run_with_progress(
        self,
        request: GovernanceRequest,
        on_step: StageObserver,
    ) -> GovernanceResult:
        """Run a request, invoking on_step once per stage in pipeline order."""
        return await self.run(request, observer=on_step)

    async def _execute(
        self,
        request: GovernanceRequest,
        trace_id: str,
        observer: StageObserver | None,
        log: structlog.BoundLogger,
        started: float,
    ) -> GovernanceResult:
        trace = _StageTrace(self._time, observer, log)
        admission: AdmissionDecision | None = None
        sanitized: SanitizedRequest | None = None
        debate: DebateResult | None = None
        contestation: ContestationResult | None = None
        judge: JudgeOutput | None = None
        grading: GradeOutcome | None = None
        fault: PipelineStage | None = None

        stage = PipelineStage.INTERCEPT
        t = trace.start()
        try:
            admission = self._classifier.intercept(request)
            if admission is not None:
                await trace.emit(
                    stage, StageStatus.SHORT_CIRCUITED, t, ",".join(admission.reason_codes)
                )
            else:
                await trace.emit(stage, StageStatus.COMPLETE, t)

                stage = PipelineStage.CLASSIFY_RISK
                t = trace.start()
                admission = self._classifier.classify(request)
                await trace.emit(
                    stage,
                    StageStatus.COMPLETE if admission.admitted else StageStatus.SHORT_CIRCUITED,
                    t,
                    admission.risk_decision.value,
                )

            if admission.admitted:
                stage = PipelineStage.SANITIZE
                t = trace.start()
                sanitized = self._classifier.sanitize(request)
                await trace.emit(
                    stage, StageStatus.COMPLETE, t, f"{sanitized.redaction_total} redactions"
                )

                stage = PipelineStage.DEBATE
                t = trace.start()
                debate = await self._orchestrator.run_debate(sanitized)
                participation = ParticipationSummary.from_outcomes(debate.outcomes)
                await trace.emit(
                    stage,
                    StageStatus.COMPLETE,
                    t,
                    f"{len(participation.voted)}/{len(debate.outcomes)} seats voted",
                )

                stage = PipelineStage.JUDGE
                t = trace.start()
                contestation = self._detector.detect(debate.ballots)
                judge = self._judge.synthesize(debate.outcomes, contestation)
                grading = self._grading.grade(
                    judge, contestation.contested, restricted=admission.restricted
                )
                await trace.emit(stage, StageStatus.COMPLETE, t, grading.verdict.value)
        except Exception as e:
            fault = stage
            log.exception(
                "pipeline_stage_failed", stage=stage.value, error_type=type(e).__name__
            )
            await trace.emit(stage, StageStatus.FAILED, t, type(e).__name__)

        result = self._compose(
            request=request,
            trace_id=trace_id,
            admission=admission,
            sanitized=sanitized,
            debate=debate,
            contestation=contestation,
            judge=judge,
            grading=grading,
            fault=fault,
        )

        # VERIFY
        stage = PipelineStage.VERIFY
        t = trace.start()
        try:
            result = await self._issue_and_register(request, result)
            await trace.emit(stage, StageStatus.COMPLETE, t, result.proof_id or "")
        except Exception as e:
            log.exception(
                "pipeline_stage_failed", stage=stage.value, error_type=type(e).__name__
            )
            await trace.emit(stage, StageStatus.FAILED, t, type(e).__name__)
            result = self._degrade(result, stage)
            await trace.skip_rest()
            return result.with_trace(tuple(trace.events))

        # LOG
        stage = PipelineStage.LOG
        t = trace.start()
        try:
            decision = Decision.from_result(
                result,
                latency_ms=(self._time.monotonic() - started) * 1000,
                timestamp=self._time.now(),
            )
            self._monitor.record(decision)
            log.info(
                "governance_decision_logged",
                decision_id=decision.decision_id,
                verdict=decision.verdict.value,
                grade=decision.grade.value,
                reason=decision.reason,
                proof_id=decision.proof_id,
            )
            await trace.emit(stage, StageStatus.COMPLETE, t, decision.decision_id)
        except Exception as e:
            # The proof exists; the decision is simply missing from the window
            log.exception(
                "pipeline_stage_failed", stage=stage.value, error_type=type(e).__name__
            )
            await trace.emit(stage, StageStatus.FAILED, t, type(e).__name__)

        # RELEASE
        await trace.emit(
            PipelineStage.RELEASE, StageStatus.COMPLETE, trace.start(), result.verdict.value
        )
        return result.with_trace(tuple(trace.events))

    def _compose(
        self,
        request: GovernanceRequest,
        trace_id: str,
        admission: AdmissionDecision | None,
        sanitized: SanitizedRequest | None,
        debate: DebateResult | None,
        contestation: ContestationResult | None,
        judge: JudgeOutput | None,
        grading: GradeOutcome | None,
        fault: PipelineStage | None,
    ) -> GovernanceResult:
        """Assemble the provisional (unproven) result from whatever stages ran."""
        if admission is None:
            # Intercept itself faulted; nothing is known about the request
            admission = AdmissionDecision(
                risk_decision=RiskDecision.BLOCK,
                reason_codes=(pipeline_fault_reason(PipelineStage.INTERCEPT),),
                refused_at=PipelineStage.INTERCEPT,
            )

        outcomes = debate.outcomes if debate is not None else ()
        base = GovernanceResult(
            trace_id=trace_id,
            request_id=request.request_id,
            domain=request.domain,
            created_at=self._time.now(),
            request_created_at=request.created_at,
            admission=admission,
            verdict=Verdict.REFUSED,
            grade=Grade.RED,
            policy_pack_version=self._issuer.policy_pack_version,
            seats=outcomes,
            judge=judge,
            contested=contestation.contested if contestation else False,
            contested_reasons=contestation.reasons if contestation else (),
            reasons=admission.reason_codes,
            participation=ParticipationSummary.from_outcomes(outcomes),
            redaction_count=sanitized.redaction_total if sanitized else 0,
        )

        if fault is not None:
            return self._degrade(base, fault)
        if not admission.admitted:
            return base
        if grading is None:
            # Admitted, fault-free runs are always graded during JUDGE
            return self._degrade(base, PipelineStage.JUDGE)
        return replace(
            base,
            verdict=grading.verdict,
            grade=grading.grade,
            reasons=admission.reason_codes + grading.reasons,
        )

    @staticmethod
    def _degrade(result: GovernanceResult, stage: PipelineStage) -> GovernanceResult:
        return replace(
            result,
            verdict=Verdict.HUMAN_REVIEW_REQUIRED,
            grade=Grade.RED,
            reasons=(pipeline_fault_reason(stage),) + result.reasons,
            proof_record=None,
            degraded=True,
        )

    async def _issue_and_register(
        self, request: GovernanceRequest, result: GovernanceResult
    ) -> GovernanceResult:
        """Issue, register and self-verify the proof for a result.

        Raises:
            ProofError: If the freshly registered proof does not verify.
        """
        record = self._issuer.issue(request, result.verdict)
        await self._registry.register(
            RegisteredProof(
                record=record,
                verdict=result.verdict.value,
                request_id=request.request_id,
            )
        )
        check = await self._verifier.verify(record.proof_id, record.input_hash)
        if not check.valid:
            raise ProofError(
                f"Proof {record.proof_id} failed self-verification: {check.status.value}"
            )
        return result.with_proof(record)
