"""Load simulation service.

Runs a background loop that generates synthetic governance requests at a
fixed rate and drives each one through a full pipeline. Every simulated
request is intercepted, debated, judged and proven exactly like a real
one, so the throughput window fills with Decisions whose proofs verify.

Pacing:
- Steady mode: one request every 1/rate seconds
- Batch mode: ceil(rate/10) requests per 1 second tick

Runs are spawned as background tasks and never awaited by the loop, so a
slow debate does not hold back the next tick. When the loop falls behind
schedule it submits the missed requests on the next tick.

Note:
    The loop is started and stopped independently of the engine. Stopping
    lets in-flight runs finish for up to STOP_DRAIN_SECONDS, then cancels
    the rest. Decisions already in the window are left untouched.
"""

from __future__ import annotations

import asyncio
import math
from itertools import count
from typing import Optional

import structlog

from govproof.application.ports.time_authority import TimeAuthorityProtocol
from govproof.application.services.governance_pipeline_service import (
    GovernancePipelineService,
)
from govproof.domain.models.request import GovernanceRequest, RequestDomain

MIN_RATE_PER_SECOND = 0.1
MAX_RATE_PER_SECOND = 1000.0
BATCH_TICK_SECONDS = 1.0
STOP_DRAIN_SECONDS = 5.0

# Rotating payloads; a few carry identifiers so redaction is exercised
SIMULATED_PAYLOADS: tuple[tuple[RequestDomain, str], ...] = (
    (RequestDomain.QNA, "Summarize the refund policy for annual subscriptions."),
    (RequestDomain.QNA, "What documents are needed to open a business account?"),
    (RequestDomain.UPLOAD, "Quarterly vendor report attached for compliance review."),
    (RequestDomain.CONDUIT, "Route this eligibility check to the partner verifier."),
    (RequestDomain.GENERAL, "Draft a customer reply about delayed shipping."),
    (RequestDomain.QNA, "Contact jane.doe@example.com about the renewal terms."),
    (RequestDomain.UPLOAD, "Lab intake form, patient MRN 12345678, for triage."),
    (RequestDomain.GENERAL, "Explain the difference between the basic and pro plans."),
)


class LoadSimulationService:
    """Background synthetic load generator.

    Attributes:
        running: Whether the simulation loop is active.
        rate_per_second: Configured request rate.
        batch: Whether batch pacing is used.
        submitted: Requests submitted since the last start.
        in_flight: Submitted runs that have not finished yet.
    """

    def __init__(
        self,
        pipeline: GovernancePipelineService,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        self._pipeline = pipeline
        self._time = time_authority
        self._rate = 0.0
        self._batch = False
        self._running = False
        self._task: Optional[asyncio.Task[None]] = None
        self._runs: set[asyncio.Task[None]] = set()
        self._sequence = count()
        self.submitted = 0
        self._log = structlog.get_logger().bind(service="load_simulation")

    @property
    def running(self) -> bool:
        return self._running

    @property
    def rate_per_second(self) -> float:
        return self._rate

    @property
    def batch(self) -> bool:
        return self._batch

    @property
    def in_flight(self) -> int:
        return len(self._runs)

    async def start(self, rate_per_second: float, batch: bool = False) -> None:
        """Start the simulation loop.

        Calling start while running restarts the loop with the new rate.

        Raises:
            ValueError: If rate_per_second is outside the supported range.
        """
        if not MIN_RATE_PER_SECOND <= rate_per_second <= MAX_RATE_PER_SECOND:
            raise ValueError(
                f"rate_per_second must be between {MIN_RATE_PER_SECOND} "
                f"and {MAX_RATE_PER_SECOND}, got {rate_per_second}"
            )
        if self._running:
            await self.stop()

        self._rate = rate_per_second
        self._batch = batch
        self.submitted = 0
        self._running = True
        self._task = asyncio.create_task(self._run_loop(), name="load-simulation")
        self._log.info(
            "load_simulation_started", rate_per_second=rate_per_second, batch=batch
        )

    async def stop(self, drain_seconds: float = STOP_DRAIN_SECONDS) -> None:
        """Stop the loop and settle every in-flight run.

        Runs still going after drain_seconds are cancelled and awaited, so
        no run is left half-way through when stop returns. Safe to call
        when not running.
        """
        self._running = False
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

        cancelled = 0
        if self._runs:
            runs = set(self._runs)
            _, pending = await asyncio.wait(runs, timeout=drain_seconds)
            for run in pending:
                run.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            cancelled = len(pending)
        self._log.info(
            "load_simulation_stopped", submitted=self.submitted, cancelled=cancelled
        )

    def next_request(self) -> GovernanceRequest:
        """Build the next synthetic request in the rotation."""
        sequence = next(self._sequence)
        domain, payload = SIMULATED_PAYLOADS[sequence % len(SIMULATED_PAYLOADS)]
        return GovernanceRequest.create(
            payload=f"{payload} (sim #{sequence})",
            created_at=self._time.now(),
            domain=domain.value,
            metadata={"source": "load_simulation"},
        )

    def submit(self, size: int) -> None:
        """Spawn size runs in the background without waiting for them."""
        for _ in range(size):
            run = asyncio.create_task(self._run_one(self.next_request()))
            self._runs.add(run)
            run.add_done_callback(self._runs.discard)
        self.submitted += size

    async def _run_one(self, request: GovernanceRequest) -> None:
        try:
            await self._pipeline.run(request)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._log.error(
                "load_simulation_run_failed",
                request_id=request.request_id,
                error_type=type(e).__name__,
                error=str(e),
            )

    async def _run_loop(self) -> None:
        # Paced on the event loop clock, which is what asyncio.sleep measures
        loop = asyncio.get_running_loop()
        if self._batch:
            interval = BATCH_TICK_SECONDS
            size = math.ceil(self._rate / 10)
        else:
            interval = 1.0 / self._rate
            size = 1

        started = loop.time()
        ticks = 0
        while self._running:
            due = int((loop.time() - started) / interval) + 1
            if due > ticks:
                self.submit((due - ticks) * size)
                ticks = due
            await asyncio.sleep(max(0.0, started + ticks * interval - loop.time()))
