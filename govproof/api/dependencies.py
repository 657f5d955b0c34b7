"""FastAPI dependencies for the governance engine."""

from fastapi import HTTPException, Request

from govproof.bootstrap.engine import GovernanceEngine


def get_engine(request: Request) -> GovernanceEngine:
    """Return the engine created by the application lifespan.

    Raises:
        HTTPException: 503 if the engine is not running.
    """
    engine: GovernanceEngine | None = getattr(request.app.state, "engine", None)
    if engine is None or not engine.started:
        raise HTTPException(
            status_code=503,
            detail={
                "type": "urn:govproof:engine:unavailable",
                "title": "Engine Unavailable",
                "status": 503,
                "detail": "The governance engine is not running",
                "instance": str(request.url),
            },
        )
    return engine
