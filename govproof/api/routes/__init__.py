"""API routers."""

from govproof.api.routes.governance import router as governance_router
from govproof.api.routes.health import router as health_router
from govproof.api.routes.metrics import router as metrics_router
from govproof.api.routes.proofs import router as proofs_router
from govproof.api.routes.throughput import router as throughput_router

__all__ = [
    "governance_router",
    "health_router",
    "metrics_router",
    "proofs_router",
    "throughput_router",
]
