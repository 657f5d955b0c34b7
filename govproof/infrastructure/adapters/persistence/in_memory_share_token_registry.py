"""In-memory implementation of ShareTokenRegistryProtocol."""

from __future__ import annotations

from govproof.application.ports.share_token_registry import (
    ShareTokenRegistryProtocol,
)
from govproof.domain.models.share_token import ShareToken


class InMemoryShareTokenRegistry(ShareTokenRegistryProtocol):
    """Dictionary-backed share token registry keyed by token value."""

    def __init__(self) -> None:
        self._tokens: dict[str, ShareToken] = {}
        self._revoked: set[str] = set()

    async def save(self, token: ShareToken) -> None:
        self._tokens[token.token] = token

    async def get(self, token_value: str) -> ShareToken | None:
        return self._tokens.get(token_value)

    async def revoke(self, token_value: str) -> bool:
        if token_value not in self._tokens:
            return False
        self._revoked.add(token_value)
        return True

    async def is_revoked(self, token_value: str) -> bool:
        return token_value in self._revoked
