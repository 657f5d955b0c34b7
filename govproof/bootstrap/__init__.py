"""Bootstrap - composition root and process-wide wiring."""

from govproof.bootstrap.engine import (
    GovernanceEngine,
    build_default_seats,
    roster_descriptors,
)
from govproof.bootstrap.signing import get_signer, reset_signer, set_signer

__all__ = [
    "GovernanceEngine",
    "build_default_seats",
    "get_signer",
    "reset_signer",
    "roster_descriptors",
    "set_signer",
]
