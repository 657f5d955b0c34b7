"""Governance engine configuration.

This module defines the tunable parameters of the governance pipeline:
seat timeouts, the debate deadline, grading thresholds, proof and share
token lifetimes, and the rolling decision window. Every value can be
overridden through environment variables for production tuning.

Environment Variables:
- GOVPROOF_ROSTER_SIZE: Seats per debate (default: 7, min: 1, max: 15)
- GOVPROOF_SEAT_TIMEOUT_SECONDS: Per-seat timeout (default: 8.0, min: 0.05, max: 120)
- GOVPROOF_DEBATE_DEADLINE_SECONDS: Global debate deadline (default: 20.0, min: 0.05, max: 300)
- GOVPROOF_PROOF_VALIDITY_SECONDS: Proof lifetime (default: 604800, min: 60, max: 31536000)
- GOVPROOF_SHARE_TOKEN_VALIDITY_SECONDS: Share token lifetime (default: 604800)
- GOVPROOF_POLICY_PACK_VERSION: Policy pack stamped on proofs (default: v2.4.1-stable)
- GOVPROOF_PASS_THRESHOLD: Minimum aggregate score for green (default: 80)
- GOVPROOF_REVIEW_THRESHOLD: Minimum aggregate score for yellow (default: 60)
- GOVPROOF_SCORE_VARIANCE_BAND: Score spread that marks a debate contested (default: 20)
- GOVPROOF_DECISION_WINDOW: Rolling decision buffer size (default: 100, min: 10, max: 10000)
- GOVPROOF_SEAT_WEIGHTS: Seat calibration weights as "seat=weight" pairs, e.g. "1=20,7=8"
  (default: 1-3=15, 4-6=14, 7=13; listed seats override the defaults)
- GOVPROOF_MAX_PAYLOAD_CHARS: Largest admissible payload (default: 32000)
- GOVPROOF_SIGNING_KEY_PATH: PEM file holding the Ed25519 signing key (optional)
- GOVPROOF_PROVIDER_BASE_URL: Provider gateway for seat ballots (optional; synthetic seats when unset)
- GOVPROOF_PROVIDER_API_KEY: Bearer credential for the provider gateway (optional)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from types import MappingProxyType

from govproof.domain.models.seat import DEFAULT_SEAT_WEIGHTS


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_seat_weights_env(key: str, default: Mapping[int, float]) -> dict[int, float]:
    """Parse "seat=weight" pairs layered over the default weights.

    Weights are clamped to [MIN_SEAT_WEIGHT, MAX_SEAT_WEIGHT]. Any malformed
    pair makes the whole value fall back to the defaults.
    """
    weights = dict(default)
    value = os.environ.get(key)
    if not value:
        return weights
    try:
        for pair in value.split(","):
            seat, _, weight = pair.partition("=")
            seat_id = int(seat)
            if seat_id < 1:
                return dict(default)
            weights[seat_id] = _clamp(float(weight), MIN_SEAT_WEIGHT, MAX_SEAT_WEIGHT)
    except ValueError:
        return dict(default)
    return weights


def _clamp(value: float, floor: float, ceiling: float) -> float:
    return max(floor, min(value, ceiling))


# =============================================================================
# Roster and Debate Timing
# =============================================================================

DEFAULT_ROSTER_SIZE = 7
MIN_ROSTER_SIZE = 1
MAX_ROSTER_SIZE = 15

DEFAULT_SEAT_TIMEOUT_SECONDS = 8.0
MIN_SEAT_TIMEOUT_SECONDS = 0.05
MAX_SEAT_TIMEOUT_SECONDS = 120.0

DEFAULT_DEBATE_DEADLINE_SECONDS = 20.0
MIN_DEBATE_DEADLINE_SECONDS = 0.05
MAX_DEBATE_DEADLINE_SECONDS = 300.0

# =============================================================================
# Proof and Share Token Lifetimes
# =============================================================================

SEVEN_DAYS_SECONDS = 7 * 24 * 60 * 60

DEFAULT_PROOF_VALIDITY_SECONDS = SEVEN_DAYS_SECONDS
DEFAULT_SHARE_TOKEN_VALIDITY_SECONDS = SEVEN_DAYS_SECONDS
MIN_VALIDITY_SECONDS = 60
MAX_VALIDITY_SECONDS = 365 * 24 * 60 * 60

DEFAULT_POLICY_PACK_VERSION = "v2.4.1-stable"

# =============================================================================
# Grading
# =============================================================================

DEFAULT_PASS_THRESHOLD = 80.0
DEFAULT_REVIEW_THRESHOLD = 60.0
DEFAULT_SCORE_VARIANCE_BAND = 20.0

MIN_SEAT_WEIGHT = 0.0
MAX_SEAT_WEIGHT = 100.0

# =============================================================================
# Admission and Throughput
# =============================================================================

DEFAULT_MAX_PAYLOAD_CHARS = 32_000
MIN_MAX_PAYLOAD_CHARS = 1
MAX_MAX_PAYLOAD_CHARS = 1_000_000

DEFAULT_DECISION_WINDOW = 100
MIN_DECISION_WINDOW = 10
MAX_DECISION_WINDOW = 10_000


@dataclass(frozen=True)
class GovernanceConfig:
    """Configuration for the governance pipeline.

    Attributes:
        roster_size: Number of seats convened per debate.
        seat_timeout_seconds: Time a single seat may take before it is
            marked timeout.
        debate_deadline_seconds: Upper bound on the whole debate. Seats still
            running at the deadline are cancelled and marked timeout.
        proof_validity_seconds: Lifetime of an issued proof record.
        share_token_validity_seconds: Lifetime of a share token.
        policy_pack_version: Policy pack identifier stamped into proofs.
        pass_threshold: Aggregate score at or above which an uncontested
            approval is graded green.
        review_threshold: Aggregate score at or above which a non-green
            outcome is graded yellow rather than red.
        score_variance_band: Population standard deviation of seat scores
            above which a debate is contested.
        seat_weights: Calibration weight per seat_id. A voting seat's
            reported influence is high at 15 or more, medium at 10 or more,
            low otherwise. Seats not listed have weight 0.
        max_payload_chars: Largest payload accepted at intercept.
        decision_window: Size of the rolling decision buffer.
        restrict_caps_grade: When True, RESTRICT admissions are never green.
        signing_key_path: Optional PEM file with the Ed25519 signing key. When
            unset an ephemeral key is generated at startup.
        provider_base_url: Provider gateway for seat ballots. When unset the
            roster is served by synthetic seats.
        provider_api_key: Bearer credential for the provider gateway.
    """

    roster_size: int = DEFAULT_ROSTER_SIZE
    seat_timeout_seconds: float = DEFAULT_SEAT_TIMEOUT_SECONDS
    debate_deadline_seconds: float = DEFAULT_DEBATE_DEADLINE_SECONDS
    proof_validity_seconds: int = DEFAULT_PROOF_VALIDITY_SECONDS
    share_token_validity_seconds: int = DEFAULT_SHARE_TOKEN_VALIDITY_SECONDS
    policy_pack_version: str = DEFAULT_POLICY_PACK_VERSION
    pass_threshold: float = DEFAULT_PASS_THRESHOLD
    review_threshold: float = DEFAULT_REVIEW_THRESHOLD
    score_variance_band: float = DEFAULT_SCORE_VARIANCE_BAND
    seat_weights: Mapping[int, float] = field(
        default_factory=lambda: dict(DEFAULT_SEAT_WEIGHTS)
    )
    max_payload_chars: int = DEFAULT_MAX_PAYLOAD_CHARS
    decision_window: int = DEFAULT_DECISION_WINDOW
    restrict_caps_grade: bool = True
    signing_key_path: str | None = None
    provider_base_url: str | None = None
    provider_api_key: str | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not MIN_ROSTER_SIZE <= self.roster_size <= MAX_ROSTER_SIZE:
            raise ValueError(
                f"roster_size must be between {MIN_ROSTER_SIZE} "
                f"and {MAX_ROSTER_SIZE}, got {self.roster_size}"
            )
        if (
            not MIN_SEAT_TIMEOUT_SECONDS
            <= self.seat_timeout_seconds
            <= MAX_SEAT_TIMEOUT_SECONDS
        ):
            raise ValueError(
                f"seat_timeout_seconds must be between {MIN_SEAT_TIMEOUT_SECONDS} "
                f"and {MAX_SEAT_TIMEOUT_SECONDS}, got {self.seat_timeout_seconds}"
            )
        if (
            not MIN_DEBATE_DEADLINE_SECONDS
            <= self.debate_deadline_seconds
            <= MAX_DEBATE_DEADLINE_SECONDS
        ):
            raise ValueError(
                f"debate_deadline_seconds must be between {MIN_DEBATE_DEADLINE_SECONDS} "
                f"and {MAX_DEBATE_DEADLINE_SECONDS}, got {self.debate_deadline_seconds}"
            )
        for name in ("proof_validity_seconds", "share_token_validity_seconds"):
            value = getattr(self, name)
            if not MIN_VALIDITY_SECONDS <= value <= MAX_VALIDITY_SECONDS:
                raise ValueError(
                    f"{name} must be between {MIN_VALIDITY_SECONDS} "
                    f"and {MAX_VALIDITY_SECONDS}, got {value}"
                )
        if not self.policy_pack_version:
            raise ValueError("policy_pack_version must be non-empty")
        if not 0.0 <= self.review_threshold <= self.pass_threshold <= 100.0:
            raise ValueError(
                "thresholds must satisfy 0 <= review_threshold <= pass_threshold <= 100, "
                f"got review={self.review_threshold}, pass={self.pass_threshold}"
            )
        if self.score_variance_band < 0.0:
            raise ValueError(
                f"score_variance_band must be >= 0, got {self.score_variance_band}"
            )
        for seat_id, weight in self.seat_weights.items():
            if seat_id < 1:
                raise ValueError(f"seat_weights keys must be seat ids >= 1, got {seat_id}")
            if not MIN_SEAT_WEIGHT <= weight <= MAX_SEAT_WEIGHT:
                raise ValueError(
                    f"seat_weights[{seat_id}] must be between {MIN_SEAT_WEIGHT} "
                    f"and {MAX_SEAT_WEIGHT}, got {weight}"
                )
        object.__setattr__(
            self, "seat_weights", MappingProxyType(dict(self.seat_weights))
        )
        if not MIN_MAX_PAYLOAD_CHARS <= self.max_payload_chars <= MAX_MAX_PAYLOAD_CHARS:
            raise ValueError(
                f"max_payload_chars must be between {MIN_MAX_PAYLOAD_CHARS} "
                f"and {MAX_MAX_PAYLOAD_CHARS}, got {self.max_payload_chars}"
            )
        if not MIN_DECISION_WINDOW <= self.decision_window <= MAX_DECISION_WINDOW:
            raise ValueError(
                f"decision_window must be between {MIN_DECISION_WINDOW} "
                f"and {MAX_DECISION_WINDOW}, got {self.decision_window}"
            )

    @property
    def proof_validity(self) -> timedelta:
        """Proof lifetime as a timedelta."""
        return timedelta(seconds=self.proof_validity_seconds)

    @property
    def share_token_validity(self) -> timedelta:
        """Share token lifetime as a timedelta."""
        return timedelta(seconds=self.share_token_validity_seconds)

    @classmethod
    def from_environment(cls) -> GovernanceConfig:
        """Create config from environment variables with defaults.

        Out-of-range numeric values are clamped to their floor or ceiling
        rather than rejected, so a mistyped override degrades to a safe value.

        Returns:
            GovernanceConfig with values from environment or defaults.
        """
        roster_size = int(
            _clamp(
                _get_int_env("GOVPROOF_ROSTER_SIZE", DEFAULT_ROSTER_SIZE),
                MIN_ROSTER_SIZE,
                MAX_ROSTER_SIZE,
            )
        )
        seat_timeout = _clamp(
            _get_float_env(
                "GOVPROOF_SEAT_TIMEOUT_SECONDS", DEFAULT_SEAT_TIMEOUT_SECONDS
            ),
            MIN_SEAT_TIMEOUT_SECONDS,
            MAX_SEAT_TIMEOUT_SECONDS,
        )
        deadline = _clamp(
            _get_float_env(
                "GOVPROOF_DEBATE_DEADLINE_SECONDS", DEFAULT_DEBATE_DEADLINE_SECONDS
            ),
            MIN_DEBATE_DEADLINE_SECONDS,
            MAX_DEBATE_DEADLINE_SECONDS,
        )
        proof_validity = int(
            _clamp(
                _get_int_env(
                    "GOVPROOF_PROOF_VALIDITY_SECONDS", DEFAULT_PROOF_VALIDITY_SECONDS
                ),
                MIN_VALIDITY_SECONDS,
                MAX_VALIDITY_SECONDS,
            )
        )
        token_validity = int(
            _clamp(
                _get_int_env(
                    "GOVPROOF_SHARE_TOKEN_VALIDITY_SECONDS",
                    DEFAULT_SHARE_TOKEN_VALIDITY_SECONDS,
                ),
                MIN_VALIDITY_SECONDS,
                MAX_VALIDITY_SECONDS,
            )
        )
        pass_threshold = _clamp(
            _get_float_env("GOVPROOF_PASS_THRESHOLD", DEFAULT_PASS_THRESHOLD),
            0.0,
            100.0,
        )
        # Review threshold can never exceed the pass threshold
        review_threshold = _clamp(
            _get_float_env("GOVPROOF_REVIEW_THRESHOLD", DEFAULT_REVIEW_THRESHOLD),
            0.0,
            pass_threshold,
        )
        variance_band = max(
            0.0,
            _get_float_env(
                "GOVPROOF_SCORE_VARIANCE_BAND", DEFAULT_SCORE_VARIANCE_BAND
            ),
        )
        max_payload = int(
            _clamp(
                _get_int_env("GOVPROOF_MAX_PAYLOAD_CHARS", DEFAULT_MAX_PAYLOAD_CHARS),
                MIN_MAX_PAYLOAD_CHARS,
                MAX_MAX_PAYLOAD_CHARS,
            )
        )
        window = int(
            _clamp(
                _get_int_env("GOVPROOF_DECISION_WINDOW", DEFAULT_DECISION_WINDOW),
                MIN_DECISION_WINDOW,
                MAX_DECISION_WINDOW,
            )
        )

        return cls(
            roster_size=roster_size,
            seat_timeout_seconds=seat_timeout,
            debate_deadline_seconds=deadline,
            proof_validity_seconds=proof_validity,
            share_token_validity_seconds=token_validity,
            policy_pack_version=os.environ.get(
                "GOVPROOF_POLICY_PACK_VERSION", DEFAULT_POLICY_PACK_VERSION
            )
            or DEFAULT_POLICY_PACK_VERSION,
            pass_threshold=pass_threshold,
            review_threshold=review_threshold,
            score_variance_band=variance_band,
            seat_weights=_get_seat_weights_env(
                "GOVPROOF_SEAT_WEIGHTS", DEFAULT_SEAT_WEIGHTS
            ),
            max_payload_chars=max_payload,
            decision_window=window,
            signing_key_path=os.environ.get("GOVPROOF_SIGNING_KEY_PATH") or None,
            provider_base_url=os.environ.get("GOVPROOF_PROVIDER_BASE_URL") or None,
            provider_api_key=os.environ.get("GOVPROOF_PROVIDER_API_KEY") or None,
        )


# Default configuration
DEFAULT_GOVERNANCE_CONFIG = GovernanceConfig()

# Fast timeouts for unit tests
TEST_GOVERNANCE_CONFIG = GovernanceConfig(
    seat_timeout_seconds=0.5,
    debate_deadline_seconds=1.0,
)
