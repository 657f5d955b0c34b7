"""Admission and pipeline domain errors."""

from __future__ import annotations

from govproof.domain.exceptions import GovProofError


class AdmissionError(GovProofError):
    """Raised when a request cannot be constructed or admitted.

    Admission *refusals* (BLOCK, intercept failures) are verdicts, not
    exceptions. This error covers malformed input that never becomes a
    request at all.
    """

    pass


class AlreadySanitizedError(AdmissionError):
    """Raised when a sanitized payload is passed through sanitization again."""

    def __init__(self, request_id: str) -> None:
        self.request_id = request_id
        super().__init__(f"Request {request_id} has already been sanitized")


class ConfigurationError(GovProofError):
    """Raised when the engine is wired with inconsistent configuration."""

    pass
