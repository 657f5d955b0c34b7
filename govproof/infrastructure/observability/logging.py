"""structlog setup for the API and scripts.

Production renders one JSON object per line, anything else a colored
console. Share token values are masked before rendering wherever they
appear in an event, so a token passed as a log field by mistake still
never reaches the log sink.

Environment:
    LOG_LEVEL: Minimum level (default INFO).
    ENVIRONMENT: "production" selects JSON output when no environment is
        passed to configure_structlog().

Example entry (production):
    {"event": "decision_recorded", "level": "info",
     "timestamp": "2026-01-01T00:00:00.000000Z", "correlation_id": "...",
     "service": "ThroughputMonitorService", "verdict": "CERTIFIED"}
"""

import logging
import os
import re
from typing import Any, cast

import structlog
from structlog.typing import Processor

from govproof.domain.models.share_token import SHARE_TOKEN_PREFIX, mask_token
from govproof.infrastructure.observability.correlation import correlation_id_processor

LOG_LEVEL_ENV = "LOG_LEVEL"
ENVIRONMENT_ENV = "ENVIRONMENT"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_ENVIRONMENT = "development"

_SHARE_TOKEN_RE = re.compile(re.escape(SHARE_TOKEN_PREFIX) + r"[A-Za-z0-9_-]{8,}")


def _get_log_level() -> int:
    level_name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, level_name, logging.INFO)


def resolve_environment(environment: str | None = None) -> str:
    """Explicit environment, else $ENVIRONMENT, else development."""
    return environment or os.getenv(ENVIRONMENT_ENV) or DEFAULT_ENVIRONMENT


def mask_share_tokens_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Replace share token values in string fields with their masked form."""
    for key, value in event_dict.items():
        if isinstance(value, str) and SHARE_TOKEN_PREFIX in value:
            event_dict[key] = _SHARE_TOKEN_RE.sub(
                lambda match: mask_token(match.group(0)), value
            )
    return event_dict


def configure_structlog(environment: str | None = None) -> None:
    """Configure structlog once at process startup.

    Args:
        environment: "production" for JSON output, anything else for the
            console renderer. Resolved from $ENVIRONMENT when omitted.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        cast(Processor, correlation_id_processor),
        cast(Processor, mask_share_tokens_processor),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if resolve_environment(environment) == "production":
        final_processor: Processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
