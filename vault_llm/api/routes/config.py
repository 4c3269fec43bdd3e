"""Configuration endpoints."""

import structlog
from fastapi import APIRouter, HTTPException, Request

from vault_llm.api.models.config import (
    ApiKeyRequest,
    ConfigResponse,
    ConfigUpdateRequest,
    ExcludeFolderRequest,
    ProviderRequest,
)
from vault_llm.config.assistant import AssistantConfig, Provider
from vault_llm.config.manager import ConfigManager

router = APIRouter(prefix="/api", tags=["config"])
logger = structlog.get_logger(__name__)


def _response(manager: ConfigManager, config: AssistantConfig) -> ConfigResponse:
    return ConfigResponse.from_config(
        config,
        has_openai_key=manager.has_api_key(Provider.GPT),
        has_gemini_key=manager.has_api_key(Provider.GEMINI),
    )


@router.get("/config", response_model=ConfigResponse)
async def get_config(request: Request) -> ConfigResponse:
    """Get assistant configuration."""
    manager: ConfigManager = request.app.state.config_manager
    return _response(manager, manager.config)


@router.patch("/config", response_model=ConfigResponse)
async def update_config(update: ConfigUpdateRequest, request: Request) -> ConfigResponse:
    """Change configuration fields; unsent fields keep their value."""
    manager: ConfigManager = request.app.state.config_manager
    changes = update.model_dump(exclude_unset=True)

    try:
        config = await manager.update(**changes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _response(manager, config)


@router.post("/config/provider", response_model=ConfigResponse)
async def select_provider(selection: ProviderRequest, request: Request) -> ConfigResponse:
    """Select the hosted provider; the model resets when it belongs to the other one."""
    manager: ConfigManager = request.app.state.config_manager
    config = await manager.select_provider(selection.provider)
    logger.info("Provider selected", provider=config.model_provider.value, model=config.model)
    return _response(manager, config)


@router.post("/config/api-key", response_model=ConfigResponse)
async def set_api_key(key_request: ApiKeyRequest, request: Request) -> ConfigResponse:
    """Store a provider credential."""
    manager: ConfigManager = request.app.state.config_manager
    config = await manager.set_api_key(key_request.provider, key_request.api_key)
    logger.info("API key stored", provider=key_request.provider.value)
    return _response(manager, config)


@router.post("/config/exclude-folders", response_model=ConfigResponse)
async def add_exclude_folder(folder_request: ExcludeFolderRequest, request: Request) -> ConfigResponse:
    manager: ConfigManager = request.app.state.config_manager
    config = await manager.add_exclude_folder(folder_request.folder)
    return _response(manager, config)


@router.delete("/config/exclude-folders", response_model=ConfigResponse)
async def remove_exclude_folder(folder_request: ExcludeFolderRequest, request: Request) -> ConfigResponse:
    manager: ConfigManager = request.app.state.config_manager
    config = await manager.remove_exclude_folder(folder_request.folder)
    return _response(manager, config)
