"""HTTP provider seat adapter.

Calls a provider's ballot endpoint over HTTP and decodes the JSON
response into a Ballot through a pydantic boundary model. Anything that
does not validate is rejected here; the orchestrator only ever sees a
well-formed Ballot or a SeatError.

Wire format (request):
    POST {base_url}/v1/ballot
    {"request_id": ..., "domain": ..., "payload": ..., "seat_id": ..., "model": ...}

Wire format (response):
    {"stance": "approve|revise|block|abstain", "score": 0-100,
     "confidence": 0-1, "risk_flags": [...], "key_points": [...],
     "counterpoints": [...], "recommended_edits": [...]}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from govproof.application.ports.seat import SeatProtocol
from govproof.domain.errors.seat import (
    BallotDecodeError,
    SeatError,
    SeatUnavailableError,
)
from govproof.domain.models.request import SanitizedRequest
from govproof.domain.models.seat import Ballot, SeatDescriptor, Stance

BALLOT_ENDPOINT = "/v1/ballot"


class BallotPayload(BaseModel):
    """Provider ballot response, validated at the boundary."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    stance: Literal["approve", "revise", "block", "abstain"]
    score: float = Field(ge=0, le=100)
    confidence: float = Field(ge=0, le=1)
    risk_flags: list[str] = Field(default_factory=list)
    key_points: list[str] = Field(default_factory=list)
    counterpoints: list[str] = Field(default_factory=list)
    recommended_edits: list[str] = Field(default_factory=list)

    def to_ballot(self, seat_id: int) -> Ballot:
        return Ballot(
            seat_id=seat_id,
            stance=Stance(self.stance),
            score=self.score,
            confidence=self.confidence,
            risk_flags=tuple(self.risk_flags),
            key_points=tuple(self.key_points),
            counterpoints=tuple(self.counterpoints),
            recommended_edits=tuple(self.recommended_edits),
        )


@dataclass(frozen=True)
class ProviderSeatConfig:
    """Connection settings for one provider seat.

    Attributes:
        base_url: Provider gateway base URL. Empty means the seat is offline.
        api_key: Bearer credential. Empty means the seat is offline.
        timeout_seconds: HTTP timeout; the orchestrator's seat timeout
            still applies on top.
    """

    base_url: str = ""
    api_key: str = ""
    timeout_seconds: float = 10.0


class ProviderSeat(SeatProtocol):
    """Seat backed by a provider's HTTP ballot endpoint."""

    def __init__(
        self,
        descriptor: SeatDescriptor,
        config: ProviderSeatConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the seat.

        Args:
            descriptor: Seat identity.
            config: Connection settings.
            client: Optional shared client (injected in tests). When omitted
                a client is created per call.
        """
        self._descriptor = descriptor
        self._config = config
        self._client = client

    @property
    def descriptor(self) -> SeatDescriptor:
        return self._descriptor

    def is_available(self) -> bool:
        return bool(self._config.base_url and self._config.api_key)

    async def deliberate(self, request: SanitizedRequest) -> Ballot:
        """Request a ballot from the provider.

        Raises:
            SeatUnavailableError: On transport failure or a 5xx response.
            SeatError: On any other non-success HTTP status.
            BallotDecodeError: If the response body is not a valid ballot.
        """
        seat_id = self._descriptor.seat_id
        url = f"{self._config.base_url.rstrip('/')}{BALLOT_ENDPOINT}"
        body: dict[str, Any] = {
            "request_id": request.request_id,
            "domain": request.domain,
            "payload": request.payload,
            "seat_id": seat_id,
            "model": self._descriptor.model,
        }
        headers = {"Authorization": f"Bearer {self._config.api_key}"}

        try:
            if self._client is not None:
                response = await self._client.post(url, json=body, headers=headers)
            else:
                async with httpx.AsyncClient(
                    timeout=self._config.timeout_seconds
                ) as client:
                    response = await client.post(url, json=body, headers=headers)
        except httpx.RequestError as e:
            raise SeatUnavailableError(seat_id, self._descriptor.provider) from e

        if response.status_code >= 500:
            raise SeatUnavailableError(seat_id, self._descriptor.provider)
        if response.status_code != 200:
            raise SeatError(seat_id, f"provider returned HTTP {response.status_code}")

        try:
            payload = BallotPayload.model_validate(response.json())
        except (ValidationError, ValueError) as e:
            raise BallotDecodeError(seat_id, str(e)) from e
        return payload.to_ballot(seat_id)
