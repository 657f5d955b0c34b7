"""Proof signer port definition.

The signer holds the process-wide Ed25519 signing key. It is created once
at startup, is read-only afterwards, and is only ever handed to the proof
issuer and verifier.
"""

from abc import ABC, abstractmethod


class ProofSignerProtocol(ABC):
    """Abstract protocol for proof signing and verification."""

    @property
    @abstractmethod
    def key_id(self) -> str:
        """Stable identifier of the signing key (fingerprint)."""
        ...

    @abstractmethod
    def public_key_bytes(self) -> bytes:
        """Raw public key bytes, for publishing to external verifiers."""
        ...

    @abstractmethod
    def sign(self, content: bytes) -> bytes:
        """Sign content and return the raw signature bytes.

        Raises:
            ProofSigningError: If the key cannot produce a signature.
        """
        ...

    @abstractmethod
    def verify(self, content: bytes, signature: bytes) -> bool:
        """Return True only if signature is valid for content."""
        ...
