"""Process settings with environment variable support."""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-level settings loaded from environment variables.

    The assistant's own configuration record (provider, model, filters, mode)
    lives in :class:`vault_llm.config.assistant.AssistantConfig` and is persisted
    separately; these settings only describe where things are.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Settings
    api_host: str = Field(default="127.0.0.1", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Log level")

    # Vault Settings
    vault_dir: str = Field(default=".", description="Root directory of the markdown vault")
    config_file: str = Field(
        default=".vault-llm/config.json", description="Persisted assistant configuration record"
    )

    # Provider credentials, used when the configuration record carries no token
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    gemini_api_key: Optional[str] = Field(default=None, description="Google Gemini API key")

    # Provider endpoints
    openai_base_url: str = Field(default="https://api.openai.com", description="OpenAI API host")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta/models",
        description="Gemini generateContent base URL",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
