"""Model catalog and connection test endpoints."""

import structlog
from fastapi import APIRouter, HTTPException, Request

from vault_llm.api.models.catalog import ModelCatalogResponse, ModelCheckResponse, ModelInfo
from vault_llm.pipeline.service import AssistantService
from vault_llm.providers.catalog import PROVIDER_CATALOGS

router = APIRouter(prefix="/api", tags=["models"])
logger = structlog.get_logger(__name__)


def _catalog(provider: str) -> ModelCatalogResponse:
    models, default_model, _ = PROVIDER_CATALOGS[provider]
    return ModelCatalogResponse(
        provider=provider,
        default_model=default_model,
        models=[ModelInfo.from_descriptor(descriptor) for descriptor in models],
    )


@router.get("/models", response_model=list[ModelCatalogResponse])
async def list_models() -> list[ModelCatalogResponse]:
    """List the hosted model catalogs."""
    return [_catalog(provider) for provider in PROVIDER_CATALOGS]


@router.get("/models/{provider}", response_model=ModelCatalogResponse)
async def get_models(provider: str) -> ModelCatalogResponse:
    if provider not in PROVIDER_CATALOGS:
        raise HTTPException(status_code=404, detail=f"Unknown provider: {provider}")
    return _catalog(provider)


@router.post("/connection/test", response_model=ModelCheckResponse)
async def test_connection(request: Request) -> ModelCheckResponse:
    """Send a minimal request to the configured backend."""
    service: AssistantService = request.app.state.assistant
    check = await service.test_connection()
    logger.info("Connection tested", provider=check.provider, model=check.model, ok=check.ok)
    return ModelCheckResponse.from_check(check)
