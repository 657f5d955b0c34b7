"""Observability infrastructure: structured logging and correlation ids.

Usage:
    from govproof.infrastructure.observability import configure_structlog

    configure_structlog()  # honours $ENVIRONMENT and $LOG_LEVEL
"""

from govproof.infrastructure.observability.correlation import (
    correlation_id_processor,
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from govproof.infrastructure.observability.logging import (
    configure_structlog,
    mask_share_tokens_processor,
    resolve_environment,
)

__all__: list[str] = [
    "configure_structlog",
    "correlation_id_processor",
    "correlation_scope",
    "generate_correlation_id",
    "get_correlation_id",
    "mask_share_tokens_processor",
    "resolve_environment",
    "set_correlation_id",
]
