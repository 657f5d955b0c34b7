"""Proof registry port definition.

Stores issued proof records together with the verdict each one attests
to. Each proof_id maps to exactly one record; re-registering an id is an
error.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from govproof.domain.models.proof_record import ProofRecord


@dataclass(frozen=True)
class RegisteredProof:
    """A proof record and the verdict bound into its signature."""

    record: ProofRecord
    verdict: str
    request_id: str


class ProofRegistryProtocol(ABC):
    """Abstract interface for proof record storage."""

    @abstractmethod
    async def register(self, entry: RegisteredProof) -> None:
        """Store a proof.

        Raises:
            DuplicateProofError: If the proof_id is already registered.
        """
        ...

    @abstractmethod
    async def get(self, proof_id: str) -> RegisteredProof | None:
        """Look up a proof by id, returning None when unknown."""
        ...

    @abstractmethod
    async def count(self) -> int:
        """Number of registered proofs."""
        ...
