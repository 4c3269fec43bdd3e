"""Configuration models."""

from pydantic import BaseModel, ConfigDict, Field

from vault_llm.config.assistant import AssistantConfig, Mode, Provider


class ConfigResponse(BaseModel):
    """Current assistant configuration, credentials reduced to presence flags."""

    model_config = ConfigDict(protected_namespaces=())

    model_provider: Provider
    model: str
    active_model: str = Field(..., description="Model id actually sent to the backend")
    lm_studio_api_url: str
    lm_studio_model: str
    use_local_llm: bool
    max_tokens: int
    temperature: float
    include_current_file_only: bool
    include_folder: str
    exclude_folders: list[str]
    new_note_folder: str
    generate_titles_with_llm: bool
    use_vault_content: bool
    mode: Mode
    has_openai_key: bool = Field(default=False, description="Whether an OpenAI key is available")
    has_gemini_key: bool = Field(default=False, description="Whether a Gemini key is available")

    @classmethod
    def from_config(cls, config: AssistantConfig, has_openai_key: bool, has_gemini_key: bool) -> "ConfigResponse":
        record = config.model_dump(exclude={"encrypted_openai_api_key", "encrypted_gemini_api_key"})
        return cls(
            **record,
            active_model=config.active_model,
            has_openai_key=has_openai_key,
            has_gemini_key=has_gemini_key,
        )


class ConfigUpdateRequest(BaseModel):
    """Partial configuration update; only the fields sent are changed."""

    model_config = ConfigDict(protected_namespaces=())

    model_provider: Provider | None = None
    model: str | None = None
    lm_studio_api_url: str | None = None
    lm_studio_model: str | None = None
    use_local_llm: bool | None = None
    max_tokens: int | None = Field(default=None, gt=0)
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    include_current_file_only: bool | None = None
    include_folder: str | None = None
    exclude_folders: list[str] | None = None
    new_note_folder: str | None = None
    generate_titles_with_llm: bool | None = None
    use_vault_content: bool | None = None
    mode: Mode | None = None


class ProviderRequest(BaseModel):
    """Hosted provider selection."""

    provider: Provider = Field(..., description="gpt or gemini")


class ApiKeyRequest(BaseModel):
    """Credential for a hosted provider."""

    provider: Provider
    api_key: str = Field(..., min_length=1, description="Plain API key, stored through the secret store")


class ExcludeFolderRequest(BaseModel):
    folder: str = Field(..., min_length=1, description="Path prefix to exclude from context")
