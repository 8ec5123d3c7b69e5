"""API route modules."""

from parstock.api.routes.catalog import router as catalog_router
from parstock.api.routes.gate import router as gate_router
from parstock.api.routes.health import router as health_router
from parstock.api.routes.reconcile import router as reconcile_router
from parstock.api.routes.suggestions import router as suggestions_router
from parstock.api.routes.variance import router as variance_router

__all__ = [
    "health_router",
    "reconcile_router",
    "gate_router",
    "suggestions_router",
    "variance_router",
    "catalog_router",
]
