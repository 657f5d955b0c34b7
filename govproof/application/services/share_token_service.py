"""Share token service.

Issues and redeems opaque bearer tokens granting read access to a single
proof. Tokens are resolved only by registry lookup and are rendered
masked in every log line and error message.
"""

from __future__ import annotations

from datetime import timedelta

from govproof.application.ports.proof_registry import (
    ProofRegistryProtocol,
    RegisteredProof,
)
from govproof.application.ports.share_token_registry import (
    ShareTokenRegistryProtocol,
)
from govproof.application.ports.time_authority import TimeAuthorityProtocol
from govproof.application.services.base import LoggingMixin
from govproof.domain.errors.proof import ProofNotFoundError
from govproof.domain.errors.share_token import (
    ExpiredShareTokenError,
    InvalidShareTokenError,
    RevokedShareTokenError,
)
from govproof.domain.models.share_token import ShareToken, mask_token


class ShareTokenService(LoggingMixin):
    """Issues, redeems and revokes share tokens."""

    def __init__(
        self,
        token_registry: ShareTokenRegistryProtocol,
        proof_registry: ProofRegistryProtocol,
        time_authority: TimeAuthorityProtocol,
        validity: timedelta,
    ) -> None:
        if validity <= timedelta(0):
            raise ValueError(f"validity must be positive, got {validity}")
        self._tokens = token_registry
        self._proofs = proof_registry
        self._time = time_authority
        self._validity = validity
        self._init_logger(component="share_token")

    async def issue(self, proof_id: str) -> ShareToken:
        """Issue a token for a registered proof.

        Raises:
            ProofNotFoundError: If the proof is not registered.
        """
        if await self._proofs.get(proof_id) is None:
            raise ProofNotFoundError(proof_id)

        token = ShareToken.issue(
            proof_id=proof_id,
            issued_at=self._time.now(),
            validity=self._validity,
        )
        await self._tokens.save(token)
        self._log_operation("issue", proof_id=proof_id).info(
            "share_token_issued",
            token=token.masked,
            expires_at=token.expires_at.isoformat(),
        )
        return token

    async def redeem(self, token_value: str) -> RegisteredProof:
        """Resolve a token to the proof it grants access to.

        Raises:
            InvalidShareTokenError: If the token is unknown or its proof is gone.
            RevokedShareTokenError: If the token was revoked.
            ExpiredShareTokenError: If the token is past its expiry.
        """
        masked = mask_token(token_value)
        log = self._log_operation("redeem", token=masked)

        token = await self._tokens.get(token_value)
        if token is None:
            log.warning("share_token_unknown")
            raise InvalidShareTokenError(masked)
        if await self._tokens.is_revoked(token_value):
            log.warning("share_token_revoked")
            raise RevokedShareTokenError(masked)
        if token.is_expired(self._time.now()):
            log.warning("share_token_expired", expired_at=token.expires_at.isoformat())
            raise ExpiredShareTokenError(masked, token.expires_at)

        entry = await self._proofs.get(token.proof_id)
        if entry is None:
            log.error("share_token_orphaned", proof_id=token.proof_id)
            raise InvalidShareTokenError(masked)

        log.info("share_token_redeemed", proof_id=token.proof_id)
        return entry

    async def revoke(self, token_value: str) -> bool:
        """Revoke a token. Returns False when the token is unknown."""
        revoked = await self._tokens.revoke(token_value)
        self._log_operation("revoke", token=mask_token(token_value)).info(
            "share_token_revocation", revoked=revoked
        )
        return revoked
