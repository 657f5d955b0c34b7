"""Debate Orchestrator Service.

Fans a sanitized request out to every seat on the roster concurrently and
joins the results under a global deadline.

Architecture Pattern:
    run_debate(request):
      ├─ for each seat (sorted by seat_id):
      │   ├─ unavailable         -> OFFLINE (never called)
      │   └─ available           -> task: wait_for(seat.deliberate, seat_timeout)
      ├─ asyncio.wait(tasks, timeout=debate_deadline)
      ├─ still pending           -> cancel, TIMEOUT
      └─ return one SeatOutcome per roster seat, sorted by seat_id

Rules:
1. One seat's exception, timeout or malformed ballot never affects another seat
2. Every roster seat gets exactly one terminal outcome
3. Seat failures are statuses, never raised to the caller
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Sequence
from uuid import uuid4

from structlog import get_logger

from govproof.application.ports.governance_metrics import GovernanceMetricsProtocol
from govproof.application.ports.seat import SeatProtocol
from govproof.application.ports.time_authority import TimeAuthorityProtocol
from govproof.domain.errors.seat import DuplicateSeatError
from govproof.domain.models.request import SanitizedRequest
from govproof.domain.models.seat import (
    Ballot,
    SeatDescriptor,
    SeatOutcome,
    SeatStatus,
)

logger = get_logger()


@dataclass(frozen=True)
class DebateResult:
    """Outcome of one debate.

    Attributes:
        debate_id: Unique identifier for this debate.
        outcomes: One outcome per roster seat, sorted by seat_id.
        total_ms: Wall time of the debate in milliseconds.
    """

    debate_id: str
    outcomes: tuple[SeatOutcome, ...]
    total_ms: float

    @property
    def ballots(self) -> tuple[Ballot, ...]:
        """Ballots from seats that voted or abstained."""
        return tuple(o.ballot for o in self.outcomes if o.ballot is not None)

    def count(self, status: SeatStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is status)


class DebateOrchestratorService:
    """Runs a panel debate across the seat roster.

    Attributes:
        _seats: Roster seats sorted by seat_id.
        _time: Time authority used to measure seat latency.
        _seat_timeout: Per-seat timeout in seconds.
        _deadline: Global debate deadline in seconds.
    """

    def __init__(
        self,
        seats: Sequence[SeatProtocol],
        time_authority: TimeAuthorityProtocol,
        seat_timeout_seconds: float,
        debate_deadline_seconds: float,
        metrics: GovernanceMetricsProtocol | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            seats: The roster. seat_ids must be unique.
            time_authority: Clock for latency measurement.
            seat_timeout_seconds: Time a single seat may take.
            debate_deadline_seconds: Upper bound on the whole debate.
            metrics: Optional metrics sink for seat outcomes.

        Raises:
            DuplicateSeatError: If two seats share a seat_id.
            ValueError: If a timeout is not positive.
        """
        seat_ids = [seat.descriptor.seat_id for seat in seats]
        duplicates = sorted({sid for sid in seat_ids if seat_ids.count(sid) > 1})
        if duplicates:
            raise DuplicateSeatError(duplicates)
        if seat_timeout_seconds <= 0 or debate_deadline_seconds <= 0:
            raise ValueError("seat timeout and debate deadline must be positive")

        self._seats = tuple(sorted(seats, key=lambda seat: seat.descriptor.seat_id))
        self._time = time_authority
        self._seat_timeout = seat_timeout_seconds
        self._deadline = debate_deadline_seconds
        self._metrics = metrics

    @property
    def roster(self) -> tuple[SeatDescriptor, ...]:
        """Descriptors of all roster seats, sorted by seat_id."""
        return tuple(seat.descriptor for seat in self._seats)

    async def run_debate(self, request: SanitizedRequest) -> DebateResult:
        """Run one debate.

        Args:
            request: Sanitized request to put before the panel.

        Returns:
            DebateResult with exactly one outcome per roster seat.
        """
        debate_id = f"dbt_{uuid4().hex[:16]}"
        start = self._time.monotonic()
        log = logger.bind(debate_id=debate_id, request_id=request.request_id)

        outcomes: dict[int, SeatOutcome] = {}
        tasks: dict[asyncio.Task[SeatOutcome], SeatProtocol] = {}

        for seat in self._seats:
            descriptor = seat.descriptor
            offline_reason = self._offline_reason(seat)
            if offline_reason is not None:
                outcomes[descriptor.seat_id] = SeatOutcome(
                    descriptor=descriptor,
                    status=SeatStatus.OFFLINE,
                    error=offline_reason,
                )
                continue
            task = asyncio.create_task(
                self._invoke_seat(seat, request),
                name=f"seat-{descriptor.seat_id}-{debate_id}",
            )
            tasks[task] = seat

        log.info(
            "debate_started",
            roster_size=len(self._seats),
            invoked=len(tasks),
            offline=len(outcomes),
        )

        if tasks:
            try:
                done, pending = await asyncio.wait(tasks, timeout=self._deadline)
            except asyncio.CancelledError:
                for task in tasks:
                    task.cancel()
                raise
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

            elapsed_ms = (self._time.monotonic() - start) * 1000
            for task in pending:
                descriptor = tasks[task].descriptor
                log.warning("seat_cut_off_at_deadline", seat_id=descriptor.seat_id)
                outcomes[descriptor.seat_id] = SeatOutcome(
                    descriptor=descriptor,
                    status=SeatStatus.TIMEOUT,
                    latency_ms=elapsed_ms,
                    error=f"debate deadline of {self._deadline}s exceeded",
                )
            for task in done:
                outcome = task.result()
                outcomes[outcome.seat_id] = outcome

        ordered = tuple(outcomes[seat_id] for seat_id in sorted(outcomes))
        if self._metrics is not None:
            for outcome in ordered:
                self._metrics.record_seat_outcome(
                    outcome.descriptor.provider, outcome.status.value
                )

        result = DebateResult(
            debate_id=debate_id,
            outcomes=ordered,
            total_ms=(self._time.monotonic() - start) * 1000,
        )
        log.info(
            "debate_completed",
            voted=result.count(SeatStatus.VOTED),
            abstained=result.count(SeatStatus.ABSTAIN),
            offline=result.count(SeatStatus.OFFLINE),
            timed_out=result.count(SeatStatus.TIMEOUT),
            errored=result.count(SeatStatus.ERROR),
            total_ms=round(result.total_ms, 3),
        )
        return result

    @staticmethod
    def _offline_reason(seat: SeatProtocol) -> str | None:
        """Why a seat is skipped, or None when it should be invoked."""
        try:
            available = seat.is_available()
        except Exception as e:
            logger.error(
                "seat_availability_check_failed",
                seat_id=seat.descriptor.seat_id,
                error_type=type(e).__name__,
                error=str(e),
            )
            return f"availability check failed: {type(e).__name__}: {e}"
        return None if available else "seat unavailable"

    async def _invoke_seat(
        self, seat: SeatProtocol, request: SanitizedRequest
    ) -> SeatOutcome:
        """Invoke a single seat, converting every failure into a status."""
        descriptor = seat.descriptor
        start = self._time.monotonic()
        try:
            ballot = await asyncio.wait_for(
                seat.deliberate(request), timeout=self._seat_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "seat_timed_out",
                seat_id=descriptor.seat_id,
                provider=descriptor.provider,
                timeout_seconds=self._seat_timeout,
            )
            return SeatOutcome(
                descriptor=descriptor,
                status=SeatStatus.TIMEOUT,
                latency_ms=(self._time.monotonic() - start) * 1000,
                error=f"seat timeout of {self._seat_timeout}s exceeded",
            )
        except Exception as e:
            # Never silently drop a failing seat
            logger.error(
                "seat_invocation_failed",
                seat_id=descriptor.seat_id,
                provider=descriptor.provider,
                error_type=type(e).__name__,
                error=str(e),
            )
            return SeatOutcome(
                descriptor=descriptor,
                status=SeatStatus.ERROR,
                latency_ms=(self._time.monotonic() - start) * 1000,
                error=f"{type(e).__name__}: {e}",
            )

        latency_ms = (self._time.monotonic() - start) * 1000
        if not isinstance(ballot, Ballot):
            logger.error(
                "seat_returned_non_ballot",
                seat_id=descriptor.seat_id,
                returned_type=type(ballot).__name__,
            )
            return SeatOutcome(
                descriptor=descriptor,
                status=SeatStatus.ERROR,
                latency_ms=latency_ms,
                error=f"seat returned {type(ballot).__name__}, not a Ballot",
            )
        if ballot.seat_id != descriptor.seat_id:
            logger.error(
                "seat_ballot_mismatch",
                seat_id=descriptor.seat_id,
                ballot_seat_id=ballot.seat_id,
            )
            return SeatOutcome(
                descriptor=descriptor,
                status=SeatStatus.ERROR,
                latency_ms=latency_ms,
                error=f"ballot claims seat {ballot.seat_id}",
            )

        status = SeatStatus.VOTED if ballot.is_voting else SeatStatus.ABSTAIN
        return SeatOutcome(
            descriptor=descriptor,
            status=status,
            ballot=ballot,
            latency_ms=latency_ms,
        )
