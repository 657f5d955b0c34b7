"""Signing key adapters."""

from govproof.infrastructure.adapters.security.ed25519_signer import (
    Ed25519ProofSigner,
)

__all__ = ["Ed25519ProofSigner"]
