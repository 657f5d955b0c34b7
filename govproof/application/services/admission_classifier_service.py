"""Admission classifier service.

Runs the first three pipeline stages for a governance request:

1. INTERCEPT - structural checks (non-empty payload, size limit, known domain)
2. CLASSIFY_RISK - deterministic pattern policy assigning ALLOW, RESTRICT or BLOCK
3. SANITIZE - one-way PII/PHI redaction to typed placeholders

Rules:
- Every refusal and restriction carries explicit reason codes
- BLOCK is decided before any seat is invoked
- Classification reads the original payload; seats only ever see the
  sanitized one
- Sanitization happens exactly once and keeps no mapping back to the
  redacted values
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass

from govproof.application.services.base import LoggingMixin
from govproof.domain.errors.admission import AlreadySanitizedError
from govproof.domain.models.pipeline import (
    AdmissionDecision,
    PipelineStage,
    RiskDecision,
)
from govproof.domain.models.request import (
    GovernanceRequest,
    RequestDomain,
    SanitizedRequest,
)


@dataclass(frozen=True)
class RiskPattern:
    """A pattern that triggers a risk decision."""

    code: str
    pattern: re.Pattern[str]
    decision: RiskDecision


@dataclass(frozen=True)
class RedactionPattern:
    """A pattern whose matches are replaced by a typed placeholder."""

    category: str
    pattern: re.Pattern[str]

    @property
    def placeholder(self) -> str:
        return f"[REDACTED:{self.category}]"


def _block(code: str, *patterns: str) -> list[RiskPattern]:
    return [
        RiskPattern(f"BLOCK:{code}", re.compile(p, re.IGNORECASE), RiskDecision.BLOCK)
        for p in patterns
    ]


def _restrict(code: str, *patterns: str) -> list[RiskPattern]:
    return [
        RiskPattern(
            f"RESTRICT:{code}", re.compile(p, re.IGNORECASE), RiskDecision.RESTRICT
        )
        for p in patterns
    ]


# Requests matching any of these never reach the panel
BLOCK_PATTERNS: list[RiskPattern] = [
    *_block(
        "PROMPT_INJECTION",
        r"\bignore\s+(?:all\s+)?(?:previous|prior|above)\s+instructions\b",
        r"\bdisregard\s+(?:your|the|all)\s+(?:system\s+)?(?:prompt|instructions|rules)\b",
        r"\byou\s+are\s+now\s+in\s+(?:developer|jailbreak|dan)\s+mode\b",
        r"\breveal\s+(?:your|the)\s+(?:system\s+prompt|hidden\s+instructions)\b",
    ),
    *_block(
        "CREDENTIAL_EXFILTRATION",
        r"\b(?:send|give|share|tell)\s+me\s+(?:your|the|their)\s+"
        r"(?:passwords?|api\s+keys?|credentials|private\s+keys?)\b",
        r"\bdump\s+(?:all\s+)?(?:user\s+)?(?:passwords|credentials|secrets)\b",
    ),
    *_block(
        "WEAPONS",
        r"\b(?:build|make|assemble)\s+(?:a\s+|an\s+)?(?:bomb|explosive\s+device|pipe\s+bomb)\b",
    ),
]

# Requests matching any of these are admitted but cannot be certified green
RESTRICT_PATTERNS: list[RiskPattern] = [
    *_restrict("MEDICAL_DOSAGE", r"\bdosages?\b", r"\bhipaa\b"),
    *_restrict("GUARANTEE_CLAIM", r"\bguarantee[sd]?\b"),
    *_restrict("IDENTITY_NUMBER", r"\bssn\b", r"\bsocial\s+security\b"),
    *_restrict(
        "FINANCIAL_TRANSFER",
        r"\bwire\s+transfers?\b",
        r"\bbank\s+accounts?\b",
        r"\bcredit\s+cards?\b",
    ),
    *_restrict("CREDENTIAL_REFERENCE", r"\bpasswords?\b"),
    *_restrict("PII_REFERENCE", r"\bpii\b"),
    *_restrict("CONFIDENTIAL_MATERIAL", r"\bconfidential\b", r"\bclassified\b"),
]

# Order matters: more specific numeric shapes are redacted first
REDACTION_PATTERNS: list[RedactionPattern] = [
    RedactionPattern(
        "EMAIL", re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
    ),
    RedactionPattern("SSN", re.compile(r"\b\d{3}-\d{2}-\d{4}\b")),
    RedactionPattern("CARD", re.compile(r"\b(?:\d{4}[ -]?){3}\d{4}\b")),
    RedactionPattern(
        "MRN", re.compile(r"\bMRN[:#\s]*\d{6,10}\b", re.IGNORECASE)
    ),
    RedactionPattern(
        "DOB",
        re.compile(
            r"\b(?:DOB|date\s+of\s+birth)[:\s]*\d{1,2}[/-]\d{1,2}[/-]\d{2,4}\b",
            re.IGNORECASE,
        ),
    ),
    RedactionPattern("IP_ADDRESS", re.compile(r"\b(?:\d{1,3}\.){3}\d{1,3}\b")),
    RedactionPattern(
        "PHONE",
        re.compile(r"(?<![\w-])(?:\+?1[ .-]?)?\(?\d{3}\)?[ .-]?\d{3}[ .-]\d{4}\b"),
    ),
]


class AdmissionClassifierService(LoggingMixin):
    """Intercepts, classifies and sanitizes governance requests.

    The classifier MUST NOT alter the request it classifies; sanitization
    produces a new SanitizedRequest instead.
    """

    def __init__(self, max_payload_chars: int) -> None:
        """Initialize the classifier.

        Args:
            max_payload_chars: Largest payload accepted at intercept.
        """
        if max_payload_chars < 1:
            raise ValueError(f"max_payload_chars must be >= 1, got {max_payload_chars}")
        self._max_payload_chars = max_payload_chars
        self._init_logger(component="admission")

    def intercept(self, request: GovernanceRequest) -> AdmissionDecision | None:
        """Run structural checks.

        Returns:
            A BLOCK AdmissionDecision with INTERCEPT:* codes when the
            request is structurally unacceptable, otherwise None.
        """
        log = self._log_operation("intercept", request_id=request.request_id)
        codes = []
        if not request.payload.strip():
            codes.append("INTERCEPT:EMPTY_PAYLOAD")
        if len(request.payload) > self._max_payload_chars:
            codes.append("INTERCEPT:PAYLOAD_TOO_LARGE")
        if not RequestDomain.is_known(request.domain):
            codes.append("INTERCEPT:UNKNOWN_DOMAIN")

        if not codes:
            return None
        log.warning("request_intercepted", reasons=codes)
        return AdmissionDecision(
            risk_decision=RiskDecision.BLOCK,
            reason_codes=tuple(codes),
            refused_at=PipelineStage.INTERCEPT,
        )

    def classify(self, request: GovernanceRequest) -> AdmissionDecision:
        """Assign ALLOW, RESTRICT or BLOCK using the pattern policy.

        Reason codes are de-duplicated and kept in pattern order.

        Returns:
            AdmissionDecision; BLOCK decisions have refused_at set.
        """
        log = self._log_operation("classify", request_id=request.request_id)
        payload = request.payload

        block_codes = self._matching_codes(BLOCK_PATTERNS, payload)
        if block_codes:
            log.warning("request_blocked", reasons=block_codes)
            return AdmissionDecision(
                risk_decision=RiskDecision.BLOCK,
                reason_codes=tuple(block_codes),
                refused_at=PipelineStage.CLASSIFY_RISK,
            )

        restrict_codes = self._matching_codes(RESTRICT_PATTERNS, payload)
        if restrict_codes:
            log.info("request_restricted", reasons=restrict_codes)
            return AdmissionDecision(
                risk_decision=RiskDecision.RESTRICT,
                reason_codes=tuple(restrict_codes),
            )

        log.debug("request_allowed")
        return AdmissionDecision(risk_decision=RiskDecision.ALLOW)

    def sanitize(self, request: GovernanceRequest | SanitizedRequest) -> SanitizedRequest:
        """Redact PII/PHI from the payload.

        Raises:
            AlreadySanitizedError: If given an already sanitized request.
        """
        if isinstance(request, SanitizedRequest):
            raise AlreadySanitizedError(request.request_id)

        payload = request.payload
        counts: Counter[str] = Counter()
        for redaction in REDACTION_PATTERNS:
            payload, replaced = redaction.pattern.subn(redaction.placeholder, payload)
            if replaced:
                counts[redaction.category] += replaced

        if counts:
            self._log_operation("sanitize", request_id=request.request_id).info(
                "payload_redacted",
                redactions=dict(counts),
                total=sum(counts.values()),
            )
        return SanitizedRequest.from_request(
            request,
            payload=payload,
            redaction_counts=dict(counts),
        )

    @staticmethod
    def _matching_codes(patterns: list[RiskPattern], text: str) -> list[str]:
        codes: list[str] = []
        for risk_pattern in patterns:
            if risk_pattern.code not in codes and risk_pattern.pattern.search(text):
                codes.append(risk_pattern.code)
        return codes
