"""Share token domain model.

A share token is an opaque bearer credential that lets a third party look
up one proof without any other access. It never encodes the proof: it is
resolved only by registry lookup.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta

SHARE_TOKEN_PREFIX = "vld_"

# Random bytes drawn per token (43 url-safe characters)
SHARE_TOKEN_ENTROPY_BYTES = 32

MASK_HEAD = 8
MASK_TAIL = 4
MASK_ELLIPSIS = "…"


def mask_token(token: str) -> str:
    """Render a token for display: first 8 + ellipsis + last 4.

    Tokens too short to mask without revealing most of them render as the
    ellipsis alone.

    Example:
        >>> mask_token("abcdefghijklmnop")
        'abcdefgh…mnop'
    """
    if len(token) <= MASK_HEAD + MASK_TAIL:
        return MASK_ELLIPSIS
    return f"{token[:MASK_HEAD]}{MASK_ELLIPSIS}{token[-MASK_TAIL:]}"


def generate_token_value() -> str:
    """Generate a new opaque token value from the OS CSPRNG."""
    return SHARE_TOKEN_PREFIX + secrets.token_urlsafe(SHARE_TOKEN_ENTROPY_BYTES)


@dataclass(frozen=True)
class ShareToken:
    """Bearer credential for a single proof.

    The token value is excluded from repr so it never lands in logs.

    Attributes:
        token: Opaque bearer value.
        proof_id: The proof this token grants access to.
        issued_at: Issuance time.
        expires_at: End of validity.
    """

    token: str = field(repr=False)
    proof_id: str
    issued_at: datetime
    expires_at: datetime

    def __post_init__(self) -> None:
        if not self.token:
            raise ValueError("token must be non-empty")
        if self.expires_at <= self.issued_at:
            raise ValueError("expires_at must be after issued_at")

    @classmethod
    def issue(cls, proof_id: str, issued_at: datetime, validity: timedelta) -> ShareToken:
        """Issue a fresh token for a proof."""
        return cls(
            token=generate_token_value(),
            proof_id=proof_id,
            issued_at=issued_at,
            expires_at=issued_at + validity,
        )

    @property
    def masked(self) -> str:
        return mask_token(self.token)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def __str__(self) -> str:
        return self.masked
