"""Ed25519 proof signer adapter.

Holds the process-wide signing key. The key is loaded from a PEM file when
one is configured, otherwise generated in memory at startup; in the latter
case proofs cannot be verified after a restart, which is logged loudly.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from structlog import get_logger

from govproof.application.ports.proof_signer import ProofSignerProtocol
from govproof.domain.errors.admission import ConfigurationError

logger = get_logger()


class Ed25519ProofSigner(ProofSignerProtocol):
    """Signs and verifies proof content with an Ed25519 key pair.

    Attributes:
        _private_key: The signing key. Never exposed.
        _public_key: Corresponding public key.
        _key_id: "ed25519:" + first 16 hex chars of sha256(public key).
    """

    def __init__(self, private_key: Ed25519PrivateKey) -> None:
        self._private_key = private_key
        self._public_key: Ed25519PublicKey = private_key.public_key()
        fingerprint = hashlib.sha256(self.public_key_bytes()).hexdigest()[:16]
        self._key_id = f"ed25519:{fingerprint}"

    @classmethod
    def generate(cls) -> Ed25519ProofSigner:
        """Create a signer with a freshly generated ephemeral key."""
        signer = cls(Ed25519PrivateKey.generate())
        logger.warning(
            "ephemeral_signing_key_generated",
            key_id=signer.key_id,
            message="Proofs signed with this key cannot be verified after restart",
        )
        return signer

    @classmethod
    def from_pem_file(cls, path: str | Path) -> Ed25519ProofSigner:
        """Load an unencrypted PKCS8 PEM Ed25519 private key.

        Raises:
            ConfigurationError: If the file is missing or not an Ed25519 key.
        """
        key_path = Path(path)
        try:
            key = serialization.load_pem_private_key(
                key_path.read_bytes(), password=None
            )
        except (OSError, ValueError, TypeError) as e:
            raise ConfigurationError(
                f"Cannot load signing key from {key_path}: {e}"
            ) from e
        if not isinstance(key, Ed25519PrivateKey):
            raise ConfigurationError(f"Signing key at {key_path} is not Ed25519")
        signer = cls(key)
        logger.info("signing_key_loaded", key_id=signer.key_id, path=str(key_path))
        return signer

    @property
    def key_id(self) -> str:
        return self._key_id

    def public_key_bytes(self) -> bytes:
        return self._public_key.public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    def sign(self, content: bytes) -> bytes:
        return self._private_key.sign(content)

    def verify(self, content: bytes, signature: bytes) -> bool:
        try:
            self._public_key.verify(signature, content)
        except InvalidSignature:
            return False
        return True
