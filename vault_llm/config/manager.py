"""Owner of the configuration record: loading, validated mutation, persistence."""

from typing import Any

import structlog
from pydantic import ValidationError

from vault_llm.config.assistant import AssistantConfig, Mode, Provider
from vault_llm.config.secrets import SecretStore
from vault_llm.config.settings import Settings
from vault_llm.config.store import JsonSettingsStore
from vault_llm.providers.catalog import default_model_for, model_matches_provider

logger = structlog.get_logger(__name__)

_CREDENTIAL_FIELDS = {
    Provider.GPT: "encrypted_openai_api_key",
    Provider.GEMINI: "encrypted_gemini_api_key",
}


def _validate_persisted(data: dict[str, Any]) -> AssistantConfig:
    """Validate a persisted record over the defaults, dropping invalid fields."""
    data = dict(data)
    while True:
        try:
            return AssistantConfig.model_validate(data)
        except ValidationError as e:
            invalid = {error["loc"][0] for error in e.errors() if error["loc"]} & set(data)
            if not invalid:
                logger.warning("Persisted configuration unusable, using defaults", error=str(e))
                return AssistantConfig()
            logger.warning("Ignoring invalid persisted settings", fields=sorted(invalid))
            for name in invalid:
                data.pop(name)


class ConfigManager:
    """Holds the current configuration snapshot and persists every change.

    Callers read ``manager.config`` once at the start of an operation and pass
    the snapshot along; nothing else mutates the record.
    """

    def __init__(
        self,
        config: AssistantConfig,
        store: JsonSettingsStore,
        secrets: SecretStore,
        settings: Settings | None = None,
    ):
        self._config = config
        self.store = store
        self.secrets = secrets
        self.settings = settings

    @classmethod
    async def load(
        cls,
        store: JsonSettingsStore,
        secrets: SecretStore,
        settings: Settings | None = None,
    ) -> "ConfigManager":
        """Merge the persisted record over the defaults."""
        data = await store.load()
        legacy_key = data.pop("api_key", None)
        config = _validate_persisted(data)
        manager = cls(config, store, secrets, settings)

        if legacy_key:
            logger.info("Migrating legacy API key", provider=config.model_provider.value)
            field = _CREDENTIAL_FIELDS[config.model_provider]
            if not getattr(config, field):
                await manager.update(**{field: secrets.conceal(legacy_key)})
            else:
                await manager.save()

        logger.debug("Configuration loaded", provider=config.model_provider.value, model=config.model)
        return manager

    @property
    def config(self) -> AssistantConfig:
        return self._config

    async def save(self) -> None:
        await self.store.save(self._config.to_record())

    async def update(self, **changes: Any) -> AssistantConfig:
        """
        Apply field changes, validate and persist.

        Args:
            **changes: AssistantConfig field values

        Returns:
            The new configuration snapshot

        Raises:
            ValueError: If a field is unknown or a value is invalid
        """
        unknown = set(changes) - set(AssistantConfig.model_fields)
        if unknown:
            raise ValueError(f"Unknown configuration fields: {', '.join(sorted(unknown))}")

        changes = self._align_model(changes)

        record = self._config.to_record()
        record.update(changes)
        self._config = AssistantConfig.model_validate(record)
        await self.save()
        logger.info("Configuration updated", fields=sorted(changes))
        return self._config

    def _align_model(self, changes: dict[str, Any]) -> dict[str, Any]:
        """Keep the hosted model consistent with the provider.

        A provider switch without an explicit model resets a model that
        belongs to the other provider; an explicit model must match.
        """
        if "model_provider" not in changes and "model" not in changes:
            return changes

        changes = dict(changes)
        provider = Provider(changes.get("model_provider", self._config.model_provider))
        if "model_provider" in changes:
            changes["model_provider"] = provider

        if "model" in changes:
            model = str(changes["model"]).strip()
            if not model_matches_provider(model, provider.value):
                raise ValueError(f"Model {model!r} does not belong to provider {provider.value!r}")
            changes["model"] = model
        elif not model_matches_provider(self._config.model, provider.value):
            changes["model"] = default_model_for(provider.value)
        return changes

    async def select_provider(self, provider: Provider | str) -> AssistantConfig:
        """Switch hosted provider, resetting the model when it belongs to another provider."""
        return await self.update(model_provider=Provider(provider))

    async def set_mode(self, mode: Mode | str) -> AssistantConfig:
        return await self.update(mode=Mode(mode))

    async def add_exclude_folder(self, folder: str) -> AssistantConfig:
        folder = folder.strip()
        if not folder or folder in self._config.exclude_folders:
            return self._config
        return await self.update(exclude_folders=[*self._config.exclude_folders, folder])

    async def remove_exclude_folder(self, folder: str) -> AssistantConfig:
        remaining = [f for f in self._config.exclude_folders if f != folder]
        return await self.update(exclude_folders=remaining)

    async def set_api_key(self, provider: Provider | str, secret: str) -> AssistantConfig:
        provider = Provider(provider)
        return await self.update(**{_CREDENTIAL_FIELDS[provider]: self.secrets.conceal(secret.strip())})

    def get_api_key(self, provider: Provider | str, config: AssistantConfig | None = None) -> str:
        """Credential for a provider: the stored token first, then the environment."""
        provider = Provider(provider)
        config = config or self._config
        token = getattr(config, _CREDENTIAL_FIELDS[provider])
        if token:
            secret = self.secrets.reveal(token)
            if secret:
                return secret

        if self.settings is None:
            return ""
        if provider == Provider.GPT:
            return self.settings.openai_api_key or ""
        return self.settings.gemini_api_key or ""

    def has_api_key(self, provider: Provider | str) -> bool:
        return bool(self.get_api_key(provider))
