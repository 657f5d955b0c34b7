"""Governance request domain models.

A GovernanceRequest is the immutable unit of work entering the pipeline.
Its canonical byte form is what the proof's input_hash commits to, so the
hash can be re-derived bit-for-bit by any verifier holding the request.

A SanitizedRequest is produced only by the sanitize stage. It carries the
redacted payload and a tally of what was redacted, never the original
values, so redaction cannot be reversed from anything the pipeline keeps.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from uuid import uuid4

from govproof.domain.signing import canonical_json_bytes, format_timestamp


class RequestDomain(str, Enum):
    """Product surface a request originated from."""

    QNA = "qna"
    UPLOAD = "upload"
    CONDUIT = "conduit"
    GENERAL = "general"

    @classmethod
    def is_known(cls, value: str) -> bool:
        return value in {member.value for member in cls}


def generate_request_id() -> str:
    """Generate a new request identifier."""
    return f"req_{uuid4().hex}"


@dataclass(frozen=True)
class GovernanceRequest:
    """An AI request submitted for governance.

    Domain is kept as a plain string so that unknown domains can be
    represented and refused at intercept rather than failing construction.

    Attributes:
        request_id: Unique identifier of the request.
        domain: Originating surface (see RequestDomain).
        payload: The content under review.
        created_at: Submission time (timezone-aware).
        metadata: Free-form string annotations. Not hashed.
    """

    request_id: str
    domain: str
    payload: str
    created_at: datetime
    metadata: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate request fields."""
        if not self.request_id:
            raise ValueError("request_id must be non-empty")
        if self.created_at.tzinfo is None:
            raise ValueError("created_at must be timezone-aware")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @classmethod
    def create(
        cls,
        payload: str,
        created_at: datetime,
        domain: str = RequestDomain.GENERAL.value,
        request_id: str | None = None,
        metadata: Mapping[str, str] | None = None,
    ) -> GovernanceRequest:
        """Create a request, generating an id when none is given."""
        return cls(
            request_id=request_id or generate_request_id(),
            domain=domain.value if isinstance(domain, RequestDomain) else domain,
            payload=payload,
            created_at=created_at,
            metadata=metadata or {},
        )

    def canonical_bytes(self) -> bytes:
        """Canonical byte form hashed into a proof's input_hash.

        Returns:
            Canonical JSON of request_id, domain, payload and created_at.
        """
        return canonical_json_bytes(
            {
                "created_at": format_timestamp(self.created_at),
                "domain": self.domain,
                "payload": self.payload,
                "request_id": self.request_id,
            }
        )


@dataclass(frozen=True)
class SanitizedRequest:
    """A request whose payload has had PII/PHI redacted exactly once.

    Only identity fields are copied from the original. Neither the
    original payload nor its metadata is reachable from here, so a seat
    handed a SanitizedRequest cannot recover what was redacted.

    Attributes:
        request_id: Id of the original request.
        domain: Originating surface of the original request.
        created_at: Submission time of the original request.
        payload: Payload with sensitive spans replaced by typed placeholders.
        redaction_counts: Number of redactions per category, e.g. {"EMAIL": 2}.
    """

    request_id: str
    domain: str
    created_at: datetime
    payload: str
    redaction_counts: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "redaction_counts", MappingProxyType(dict(self.redaction_counts))
        )

    @classmethod
    def from_request(
        cls,
        request: GovernanceRequest,
        payload: str,
        redaction_counts: Mapping[str, int] | None = None,
    ) -> SanitizedRequest:
        """Build from an original request, keeping only its identity fields."""
        return cls(
            request_id=request.request_id,
            domain=request.domain,
            created_at=request.created_at,
            payload=payload,
            redaction_counts=redaction_counts or {},
        )

    @property
    def redaction_total(self) -> int:
        return sum(self.redaction_counts.values())
