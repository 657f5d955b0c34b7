"""Proof signing utilities.

Computes the exact byte strings that are hashed and signed for a proof
record, and converts signatures between bytes and base64.

Guarantees:
- Canonical JSON (sorted keys, no whitespace) is the only serialization
  that is ever hashed or signed
- The signature covers the verdict, so a stored record cannot be
  re-attached to a different outcome
"""

from __future__ import annotations

import base64
import hashlib
import json
from datetime import datetime
from typing import Any

SIG_ALG_NAME: str = "Ed25519"
HASH_PREFIX: str = "sha256:"


def canonical_json_bytes(value: dict[str, Any]) -> bytes:
    """Serialize a mapping as canonical JSON bytes.

    Args:
        value: JSON-compatible mapping.

    Returns:
        UTF-8 bytes with sorted keys and compact separators.
    """
    canonical = json.dumps(value, sort_keys=True, separators=(",", ":"))
    return canonical.encode("utf-8")


def compute_input_hash(canonical_bytes: bytes) -> str:
    """Hash canonical request bytes into the proof's input_hash form.

    Example:
        >>> compute_input_hash(b"{}")
        'sha256:44136fa355b3678a1146ad16f7e8649e94fb4fc21fe77e8310c060f61caaff8a'
    """
    return HASH_PREFIX + hashlib.sha256(canonical_bytes).hexdigest()


def format_timestamp(moment: datetime) -> str:
    """Render a timezone-aware timestamp as ISO-8601."""
    return moment.isoformat()


def compute_proof_signable_content(
    proof_id: str,
    input_hash: str,
    verdict: str,
    policy_pack_version: str,
    issued_at: datetime,
    expires_at: datetime,
) -> bytes:
    """Compute the bytes to be signed for a proof record.

    Args:
        proof_id: Identifier of the proof.
        input_hash: "sha256:" prefixed hash of the canonical request.
        verdict: Verdict value the proof attests to.
        policy_pack_version: Policy pack in force at issuance.
        issued_at: Issuance time.
        expires_at: Expiry time.

    Returns:
        Canonical bytes representation for signing.
    """
    signable: dict[str, Any] = {
        "expires_at": format_timestamp(expires_at),
        "input_hash": input_hash,
        "issued_at": format_timestamp(issued_at),
        "policy_pack_version": policy_pack_version,
        "proof_id": proof_id,
        "verdict": verdict,
    }
    return canonical_json_bytes(signable)


def signature_to_base64(signature: bytes) -> str:
    """Convert raw signature bytes to base64 string for storage.

    Ed25519 signatures are 64 bytes, which produces 88 base64 characters.
    """
    return base64.b64encode(signature).decode("ascii")


def signature_from_base64(signature_b64: str) -> bytes:
    """Convert base64 signature string back to bytes.

    Raises:
        ValueError: If input is not valid base64.
    """
    return base64.b64decode(signature_b64, validate=True)
