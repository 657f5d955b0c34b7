"""FastAPI application entry point for the governance engine."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI

from govproof import __version__
from govproof.api.middleware.logging_middleware import LoggingMiddleware
from govproof.api.routes import (
    governance_router,
    health_router,
    metrics_router,
    proofs_router,
    throughput_router,
)
from govproof.bootstrap.engine import GovernanceEngine
from govproof.infrastructure.observability.logging import configure_structlog

EngineFactory = Callable[[], GovernanceEngine]


def create_app(engine_factory: EngineFactory | None = None) -> FastAPI:
    """Build the application.

    Args:
        engine_factory: Builds the engine at startup. Defaults to an engine
            configured from the environment.
    """
    factory = engine_factory or GovernanceEngine

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_structlog()
        engine = factory()
        await engine.start()
        app.state.engine = engine
        try:
            yield
        finally:
            await engine.close()
            app.state.engine = None

    app = FastAPI(
        title="Governance Consensus & Proof Engine",
        description="Multi-model panel governance with signed proof records",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(LoggingMiddleware)
    app.include_router(health_router)
    app.include_router(governance_router)
    app.include_router(proofs_router)
    app.include_router(throughput_router)
    app.include_router(metrics_router)
    return app


app = create_app()
