"""Bootstrap wiring for the process-wide proof signing key.

The signing key is created once per process, is read-only afterwards and
is never handed to seats. Tests replace it with set_signer().
"""

from __future__ import annotations

from govproof.application.ports.proof_signer import ProofSignerProtocol
from govproof.infrastructure.adapters.security.ed25519_signer import (
    Ed25519ProofSigner,
)

_signer: ProofSignerProtocol | None = None


def get_signer(key_path: str | None = None) -> ProofSignerProtocol:
    """Get the process signing key, creating it on first use.

    Args:
        key_path: PEM file to load on first use. When None an ephemeral key
            is generated. Ignored once the signer exists.

    Raises:
        ConfigurationError: If key_path cannot be loaded.
    """
    global _signer
    if _signer is None:
        if key_path:
            _signer = Ed25519ProofSigner.from_pem_file(key_path)
        else:
            _signer = Ed25519ProofSigner.generate()
    return _signer


def set_signer(signer: ProofSignerProtocol) -> None:
    """Set a custom signer (testing/override)."""
    global _signer
    _signer = signer


def reset_signer() -> None:
    """Reset the signer singleton (testing cleanup)."""
    global _signer
    _signer = None
