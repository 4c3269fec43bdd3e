"""Factory for creating generation providers."""

import structlog

from vault_llm.config.assistant import AssistantConfig, Provider
from vault_llm.config.manager import ConfigManager
from vault_llm.config.settings import Settings
from vault_llm.providers.base import GenerationProvider
from vault_llm.providers.gemini_provider import GeminiProvider
from vault_llm.providers.lmstudio_provider import LMStudioProvider
from vault_llm.providers.openai_provider import OpenAIProvider
from vault_llm.providers.transport import AiohttpTransport, HttpTransport

logger = structlog.get_logger(__name__)


def create_provider(
    config: AssistantConfig,
    manager: ConfigManager,
    settings: Settings,
    transport: HttpTransport | None = None,
) -> GenerationProvider:
    """
    Create the generation provider selected by a configuration snapshot.

    Args:
        config: Configuration snapshot for the request
        manager: Source of provider credentials
        settings: Process settings (provider hosts)
        transport: HTTP transport, aiohttp when omitted

    Returns:
        Generation provider instance

    Raises:
        ValueError: If the provider is not supported
    """
    transport = transport or AiohttpTransport()

    if config.use_local_llm:
        logger.debug("Creating LM Studio provider", base_url=config.lm_studio_api_url)
        return LMStudioProvider(transport)

    if config.model_provider == Provider.GPT:
        logger.debug("Creating OpenAI provider", model=config.model)
        return OpenAIProvider(
            api_key=manager.get_api_key(Provider.GPT, config),
            transport=transport,
            base_url=settings.openai_base_url,
        )

    elif config.model_provider == Provider.GEMINI:
        logger.debug("Creating Gemini provider", model=config.model)
        return GeminiProvider(
            api_key=manager.get_api_key(Provider.GEMINI, config),
            transport=transport,
            base_url=settings.gemini_base_url,
        )

    else:
        raise ValueError(f"Unsupported model provider: {config.model_provider}")


class ProviderFactory:
    """Binds credentials, settings and transport so callers only pass a snapshot."""

    def __init__(self, manager: ConfigManager, settings: Settings, transport: HttpTransport | None = None):
        self.manager = manager
        self.settings = settings
        self.transport = transport or AiohttpTransport()

    def __call__(self, config: AssistantConfig) -> GenerationProvider:
        return create_provider(config, self.manager, self.settings, self.transport)
