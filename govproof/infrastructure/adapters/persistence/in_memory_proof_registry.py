"""In-memory implementation of ProofRegistryProtocol.

Enforces the one-record-per-proof_id constraint. The registry lives for
the lifetime of the engine; proofs do not survive a restart.
"""

from __future__ import annotations

import asyncio

from govproof.application.ports.proof_registry import (
    ProofRegistryProtocol,
    RegisteredProof,
)
from govproof.domain.errors.proof import DuplicateProofError


class InMemoryProofRegistry(ProofRegistryProtocol):
    """Dictionary-backed proof registry keyed by proof_id."""

    def __init__(self) -> None:
        self._proofs: dict[str, RegisteredProof] = {}
        self._lock = asyncio.Lock()

    async def register(self, entry: RegisteredProof) -> None:
        async with self._lock:
            proof_id = entry.record.proof_id
            if proof_id in self._proofs:
                raise DuplicateProofError(proof_id)
            self._proofs[proof_id] = entry

    async def get(self, proof_id: str) -> RegisteredProof | None:
        return self._proofs.get(proof_id)

    async def count(self) -> int:
        return len(self._proofs)

    def clear(self) -> None:
        """Remove all proofs (test helper)."""
        self._proofs.clear()
