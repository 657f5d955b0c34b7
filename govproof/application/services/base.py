"""Service logging mixin.

Every application service logs through a structlog logger bound to its
class name and component. Per-call context (request_id, proof_id, ...)
is bound with _log_operation(), which also stamps the correlation ID of
the HTTP request or pipeline run in progress.

Usage:
    class ProofIssuerService(LoggingMixin):
        def __init__(self, signer: ProofSignerProtocol) -> None:
            self._signer = signer
            self._init_logger(component="proof")

        def issue(self, request: GovernanceRequest) -> ProofRecord:
            log = self._log_operation("issue", request_id=request.request_id)
            log.info("proof_issued")
"""

import structlog

from govproof.infrastructure.observability.correlation import get_correlation_id


class LoggingMixin:
    """Adds a bound structlog logger to a service.

    Attributes:
        _log: Logger bound with service (class name) and component.
    """

    _log: structlog.BoundLogger

    def _init_logger(self, component: str = "governance") -> None:
        """Bind the service logger. Call from __init__.

        Args:
            component: Log category, e.g. "pipeline", "proof", "engine".
        """
        self._log = structlog.get_logger().bind(
            service=self.__class__.__name__,
            component=component,
        )

    def _log_operation(
        self,
        operation: str,
        **context: object,
    ) -> structlog.BoundLogger:
        """Logger for one operation, carrying the current correlation ID.

        Args:
            operation: Operation name, e.g. "run" or "verify".
            **context: Extra fields to bind.
        """
        return self._log.bind(
            operation=operation,
            correlation_id=get_correlation_id(),
            **context,
        )
