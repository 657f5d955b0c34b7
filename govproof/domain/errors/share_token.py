"""Share token domain errors.

Messages never include the full token value; only the masked form is
ever rendered.
"""

from __future__ import annotations

from datetime import datetime

from govproof.domain.exceptions import GovProofError


class ShareTokenError(GovProofError):
    """Base class for share token errors.

    Attributes:
        masked_token: Display-safe form of the offending token.
    """

    def __init__(self, masked_token: str, message: str) -> None:
        self.masked_token = masked_token
        super().__init__(message)


class InvalidShareTokenError(ShareTokenError):
    """Raised when a token is unknown or malformed."""

    def __init__(self, masked_token: str) -> None:
        super().__init__(masked_token, f"Invalid share token: {masked_token}")


class ExpiredShareTokenError(ShareTokenError):
    """Raised when a token is past its expiry.

    Attributes:
        expired_at: When the token expired.
    """

    def __init__(self, masked_token: str, expired_at: datetime) -> None:
        self.expired_at = expired_at
        super().__init__(
            masked_token,
            f"Share token {masked_token} expired at {expired_at.isoformat()}",
        )


class RevokedShareTokenError(ShareTokenError):
    """Raised when a token has been revoked."""

    def __init__(self, masked_token: str) -> None:
        super().__init__(masked_token, f"Share token {masked_token} was revoked")
