"""In-memory registries for proofs and share tokens."""

from govproof.infrastructure.adapters.persistence.in_memory_proof_registry import (
    InMemoryProofRegistry,
)
from govproof.infrastructure.adapters.persistence.in_memory_share_token_registry import (
    InMemoryShareTokenRegistry,
)

__all__ = ["InMemoryProofRegistry", "InMemoryShareTokenRegistry"]
