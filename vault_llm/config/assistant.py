"""Assistant configuration record."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Mode(str, Enum):
    """Pipeline variant."""

    QUERY = "query"
    CREATE = "create"


class Provider(str, Enum):
    """Hosted provider identity."""

    GPT = "gpt"
    GEMINI = "gemini"


class AssistantConfig(BaseModel):
    """Flat configuration record persisted as JSON.

    Instances are treated as immutable snapshots: the pipeline reads one at the
    start of a run, and :class:`vault_llm.config.manager.ConfigManager` replaces
    the snapshot on every mutation.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, protected_namespaces=())

    encrypted_openai_api_key: str = Field(default="", description="Opaque OpenAI credential token")
    encrypted_gemini_api_key: str = Field(default="", description="Opaque Gemini credential token")
    model_provider: Provider = Field(default=Provider.GEMINI, description="Hosted provider")
    model: str = Field(default="gemini-3-pro-preview", description="Selected hosted model id")
    lm_studio_api_url: str = Field(default="http://localhost:1234/v1", description="Local server base URL")
    lm_studio_model: str = Field(default="local-model", description="Local server model name")
    use_local_llm: bool = Field(default=False, description="Use the local server instead of a hosted provider")
    max_tokens: int = Field(default=2000, gt=0, description="Maximum output length")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")
    include_current_file_only: bool = Field(default=False, description="Restrict context to the current document")
    include_folder: str = Field(default="", description="Only include paths starting with this prefix")
    exclude_folders: list[str] = Field(default_factory=list, description="Exclude paths starting with these prefixes")
    new_note_folder: str = Field(default="", description="Destination folder for generated notes")
    generate_titles_with_llm: bool = Field(default=True, description="Ask the backend for note titles")
    use_vault_content: bool = Field(default=True, description="Include vault documents as context")
    mode: Mode = Field(default=Mode.QUERY, description="query or create")

    @field_validator("exclude_folders")
    @classmethod
    def _dedupe_excludes(cls, value: list[str]) -> list[str]:
        seen: list[str] = []
        for folder in value:
            if folder and folder not in seen:
                seen.append(folder)
        return seen

    @property
    def active_model(self) -> str:
        """Model id actually sent to the backend."""
        return self.lm_studio_model if self.use_local_llm else self.model

    def to_record(self) -> dict:
        """JSON-ready representation used by the settings store."""
        return self.model_dump(mode="json")
