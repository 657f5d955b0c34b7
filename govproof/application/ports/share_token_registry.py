"""Share token registry port definition.

Tokens are resolved only by lookup; the token value itself carries no
information about the proof it grants access to.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from govproof.domain.models.share_token import ShareToken


class ShareTokenRegistryProtocol(ABC):
    """Abstract interface for share token storage."""

    @abstractmethod
    async def save(self, token: ShareToken) -> None:
        """Store a newly issued token."""
        ...

    @abstractmethod
    async def get(self, token_value: str) -> ShareToken | None:
        """Look up a token by its value."""
        ...

    @abstractmethod
    async def revoke(self, token_value: str) -> bool:
        """Revoke a token. Returns False if the token is unknown."""
        ...

    @abstractmethod
    async def is_revoked(self, token_value: str) -> bool:
        """Whether the token has been revoked."""
        ...
