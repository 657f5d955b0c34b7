"""Domain errors for govproof.

All exceptions inherit from GovProofError.
"""

from govproof.domain.errors.admission import (
    AdmissionError,
    AlreadySanitizedError,
    ConfigurationError,
)
from govproof.domain.errors.proof import (
    DuplicateProofError,
    ProofError,
    ProofNotFoundError,
    ProofSigningError,
)
from govproof.domain.errors.seat import (
    BallotDecodeError,
    DuplicateSeatError,
    SeatError,
    SeatUnavailableError,
)
from govproof.domain.errors.share_token import (
    ExpiredShareTokenError,
    InvalidShareTokenError,
    RevokedShareTokenError,
    ShareTokenError,
)

__all__: list[str] = [
    "AdmissionError",
    "AlreadySanitizedError",
    "BallotDecodeError",
    "ConfigurationError",
    "DuplicateProofError",
    "DuplicateSeatError",
    "ExpiredShareTokenError",
    "InvalidShareTokenError",
    "ProofError",
    "ProofNotFoundError",
    "ProofSigningError",
    "RevokedShareTokenError",
    "SeatError",
    "SeatUnavailableError",
    "ShareTokenError",
]
