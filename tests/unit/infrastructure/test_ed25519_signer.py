"""Unit tests for Ed25519ProofSigner."""

from __future__ import annotations

from pathlib import Path

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ec import SECP256R1, generate_private_key
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from govproof.domain.errors.admission import ConfigurationError
from govproof.infrastructure.adapters.security.ed25519_signer import (
    Ed25519ProofSigner,
)


def _write_pem(path: Path, key) -> Path:
    path.write_bytes(
        key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    return path


class TestSignAndVerify:
    def test_signature_verifies(self, signer) -> None:
        signature = signer.sign(b"content")
        assert len(signature) == 64
        assert signer.verify(b"content", signature)

    def test_modified_content_rejected(self, signer) -> None:
        signature = signer.sign(b"content")
        assert not signer.verify(b"content!", signature)

    def test_other_key_rejected(self, signer) -> None:
        other = Ed25519ProofSigner.generate()
        assert not other.verify(b"content", signer.sign(b"content"))

    def test_key_id_is_public_key_fingerprint(self, signer) -> None:
        assert signer.key_id.startswith("ed25519:")
        assert len(signer.key_id) == len("ed25519:") + 16
        assert len(signer.public_key_bytes()) == 32


class TestLoadFromPem:
    def test_loaded_key_matches(self, tmp_path: Path) -> None:
        key = Ed25519PrivateKey.generate()
        path = _write_pem(tmp_path / "signing.pem", key)

        first = Ed25519ProofSigner.from_pem_file(path)
        second = Ed25519ProofSigner.from_pem_file(str(path))
        assert first.key_id == second.key_id
        assert second.verify(b"x", first.sign(b"x"))

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Cannot load signing key"):
            Ed25519ProofSigner.from_pem_file(tmp_path / "missing.pem")

    def test_wrong_key_type(self, tmp_path: Path) -> None:
        path = _write_pem(tmp_path / "ec.pem", generate_private_key(SECP256R1()))
        with pytest.raises(ConfigurationError, match="not Ed25519"):
            Ed25519ProofSigner.from_pem_file(path)
