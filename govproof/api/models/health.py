"""Health check response models."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Health status string (e.g., "healthy").
        policy_pack_version: Policy pack stamped on issued proofs.
        roster_size: Seats convened per debate.
        signing_key_id: Identifier of the active signing key.
    """

    status: str
    policy_pack_version: str
    roster_size: int
    signing_key_id: str
