"""Shared fixtures."""

import pytest

from vault_llm.config.assistant import AssistantConfig
from vault_llm.config.manager import ConfigManager
from vault_llm.config.secrets import PlaintextSecretStore
from vault_llm.config.settings import Settings
from vault_llm.config.store import JsonSettingsStore


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the environment and pointing at a temporary vault."""
    return Settings(
        _env_file=None,
        vault_dir=str(tmp_path),
        openai_api_key=None,
        gemini_api_key=None,
    )


@pytest.fixture
def make_manager(tmp_path, settings):
    """Build a ConfigManager over a temporary JSON file."""

    def _make(**overrides) -> ConfigManager:
        return ConfigManager(
            AssistantConfig(**overrides),
            JsonSettingsStore(tmp_path / ".vault-llm" / "config.json"),
            PlaintextSecretStore(),
            settings,
        )

    return _make
