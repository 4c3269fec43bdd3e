"""API routes."""

from vault_llm.api.routes.catalog import router as catalog_router
from vault_llm.api.routes.config import router as config_router
from vault_llm.api.routes.health import router as health_router
from vault_llm.api.routes.notes import router as notes_router
from vault_llm.api.routes.query import router as query_router

__all__ = [
    "health_router",
    "config_router",
    "catalog_router",
    "query_router",
    "notes_router",
]
