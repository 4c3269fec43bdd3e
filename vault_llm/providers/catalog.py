"""Static catalog of hosted models and their request capabilities."""

from pydantic import BaseModel, ConfigDict, Field

CHAT_COMPLETIONS_ENDPOINT = "/v1/chat/completions"
RESPONSES_ENDPOINT = "/v1/responses"
COMPLETIONS_ENDPOINT = "/v1/completions"


class ModelDescriptor(BaseModel):
    """Catalog entry describing how a model must be called."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Model identifier sent to the provider")
    name: str = Field(..., description="Display name")
    endpoint: str | None = Field(default=None, description="Non-default request endpoint")
    use_max_completion_tokens: bool = Field(
        default=False, description="Send the token limit as max_completion_tokens"
    )

    @property
    def request_endpoint(self) -> str:
        return self.endpoint or CHAT_COMPLETIONS_ENDPOINT

    @property
    def token_limit_field(self) -> str | None:
        """Name of the top-level token-limit field, or None when it must be omitted."""
        if self.use_max_completion_tokens:
            return "max_completion_tokens"
        if self.request_endpoint == RESPONSES_ENDPOINT:
            return None
        return "max_tokens"


OPENAI_MODELS: tuple[ModelDescriptor, ...] = (
    # GPT-5 Series
    ModelDescriptor(id="gpt-5.2-pro", name="GPT-5.2 Pro", endpoint=RESPONSES_ENDPOINT),
    ModelDescriptor(id="gpt-5.2", name="GPT-5.2", use_max_completion_tokens=True),
    ModelDescriptor(id="gpt-5.1", name="GPT-5.1", use_max_completion_tokens=True),
    ModelDescriptor(id="gpt-5-pro", name="GPT-5 Pro", endpoint=RESPONSES_ENDPOINT),
    ModelDescriptor(id="gpt-5", name="GPT-5", use_max_completion_tokens=True),
    ModelDescriptor(id="gpt-5-mini", name="GPT-5 Mini", use_max_completion_tokens=True),
    ModelDescriptor(id="gpt-5-nano", name="GPT-5 Nano", use_max_completion_tokens=True),
    # Reasoning series
    ModelDescriptor(id="o1-pro", name="o1 Pro", endpoint=RESPONSES_ENDPOINT),
    ModelDescriptor(id="o1", name="o1", use_max_completion_tokens=True),
    ModelDescriptor(id="o3", name="o3", use_max_completion_tokens=True),
    ModelDescriptor(id="o3-mini", name="o3 Mini", use_max_completion_tokens=True),
    ModelDescriptor(id="o4-mini", name="o4 Mini", use_max_completion_tokens=True),
    # GPT-4.1 Series
    ModelDescriptor(id="gpt-4.1", name="GPT-4.1"),
    ModelDescriptor(id="gpt-4.1-mini", name="GPT-4.1 Mini"),
    ModelDescriptor(id="gpt-4.1-nano", name="GPT-4.1 Nano"),
    # GPT-4o Series
    ModelDescriptor(id="gpt-4o", name="GPT-4o"),
    ModelDescriptor(id="gpt-4o-mini", name="GPT-4o Mini"),
    # Legacy
    ModelDescriptor(id="gpt-4-turbo", name="GPT-4 Turbo"),
    ModelDescriptor(id="gpt-4", name="GPT-4"),
    ModelDescriptor(id="gpt-3.5-turbo", name="GPT-3.5 Turbo"),
    ModelDescriptor(id="gpt-3.5-turbo-16k", name="GPT-3.5 Turbo 16k"),
)

GEMINI_MODELS: tuple[ModelDescriptor, ...] = (
    ModelDescriptor(id="gemini-3-pro-preview", name="Gemini 3.0 Pro (Preview)"),
    ModelDescriptor(id="gemini-3-flash-preview", name="Gemini 3.0 Flash (Preview)"),
    ModelDescriptor(id="gemini-2.5-pro", name="Gemini 2.5 Pro"),
    ModelDescriptor(id="gemini-2.5-flash", name="Gemini 2.5 Flash"),
    ModelDescriptor(id="gemini-2.5-flash-lite", name="Gemini 2.5 Flash Lite"),
    ModelDescriptor(id="gemini-2.0-flash", name="Gemini 2.0 Flash"),
    ModelDescriptor(id="gemini-2.0-flash-lite", name="Gemini 2.0 Flash Lite"),
    ModelDescriptor(id="gemini-pro-latest", name="Gemini Pro (Latest)"),
    ModelDescriptor(id="gemini-flash-latest", name="Gemini Flash (Latest)"),
    ModelDescriptor(id="gemini-flash-lite-latest", name="Gemini Flash Lite (Latest)"),
)

# Provider id -> (catalog, default model, naming prefix)
PROVIDER_CATALOGS: dict[str, tuple[tuple[ModelDescriptor, ...], str, str]] = {
    "gpt": (OPENAI_MODELS, "gpt-4o-mini", "gpt"),
    "gemini": (GEMINI_MODELS, "gemini-3-pro-preview", "gemini"),
}


def find_model(model_id: str, models: tuple[ModelDescriptor, ...] = OPENAI_MODELS) -> ModelDescriptor | None:
    """Look up a catalog entry by id."""
    for descriptor in models:
        if descriptor.id == model_id:
            return descriptor
    return None


def default_model_for(provider: str) -> str:
    return PROVIDER_CATALOGS[provider][1]


def model_matches_provider(model_id: str, provider: str) -> bool:
    """True when the model belongs to the provider's catalog or naming convention."""
    models, _, prefix = PROVIDER_CATALOGS[provider]
    return model_id.startswith(prefix) or find_model(model_id, models) is not None
