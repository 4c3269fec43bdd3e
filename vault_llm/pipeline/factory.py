"""Wiring of the pipeline service from process settings."""

from pathlib import Path

import structlog

from vault_llm.config.manager import ConfigManager
from vault_llm.config.secrets import PlaintextSecretStore, SecretStore
from vault_llm.config.settings import Settings
from vault_llm.config.store import JsonSettingsStore
from vault_llm.pipeline.service import AssistantService
from vault_llm.providers.factory import ProviderFactory
from vault_llm.providers.transport import HttpTransport
from vault_llm.vault.notes import FileSystemNoteSink
from vault_llm.vault.store import FileSystemDocumentStore

logger = structlog.get_logger(__name__)


def config_path(settings: Settings) -> Path:
    """Configuration record location; relative paths are taken from the vault root."""
    path = Path(settings.config_file)
    if path.is_absolute():
        return path
    return Path(settings.vault_dir) / path


async def create_assistant(
    settings: Settings,
    transport: HttpTransport | None = None,
    secrets: SecretStore | None = None,
) -> AssistantService:
    """
    Build the assistant for a vault.

    Args:
        settings: Process settings
        transport: HTTP transport for provider calls, aiohttp when omitted
        secrets: Credential store, plaintext when omitted

    Returns:
        Assistant service with loaded configuration
    """
    manager = await ConfigManager.load(
        JsonSettingsStore(config_path(settings)),
        secrets or PlaintextSecretStore(),
        settings,
    )

    store = FileSystemDocumentStore(settings.vault_dir)
    sink = FileSystemNoteSink(settings.vault_dir)
    factory = ProviderFactory(manager, settings, transport)

    logger.info(
        "Assistant created",
        vault_dir=str(store.root),
        provider=manager.config.model_provider.value,
        model=manager.config.active_model,
    )
    return AssistantService(manager, store, sink, factory)
