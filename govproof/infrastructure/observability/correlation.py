"""Correlation IDs for governance runs.

A correlation ID ties together every log line emitted for one HTTP request
or one pipeline run, including lines from the per-seat tasks the debate
orchestrator spawns (tasks copy the current context on creation).

Sources, in order of precedence:
1. X-Correlation-ID header, set by LoggingMiddleware
2. The pipeline's trace_id, bound by correlation_scope() for direct
   engine calls (scripts, load simulation)

Usage:
    with correlation_scope(trace_id) as correlation_id:
        log = structlog.get_logger().bind(correlation_id=correlation_id)
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any
from uuid import uuid4

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    return str(uuid4())


def get_correlation_id() -> str:
    """Current correlation ID, or "" outside any request or run."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id.set(correlation_id)


@contextmanager
def correlation_scope(fallback: str) -> Iterator[str]:
    """Keep the caller's correlation ID, or use fallback for this block.

    A fallback is removed again on exit, so concurrent runs started from
    the same context never see each other's IDs.

    Args:
        fallback: ID to bind when none is set (usually a trace_id).

    Yields:
        The correlation ID in effect inside the block.
    """
    current = _correlation_id.get()
    if current:
        yield current
        return
    token = _correlation_id.set(fallback)
    try:
        yield fallback
    finally:
        _correlation_id.reset(token)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor stamping the current correlation ID.

    An explicitly bound correlation_id wins over the context value.
    """
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    return event_dict
