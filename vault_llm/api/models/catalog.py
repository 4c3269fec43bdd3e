"""Model catalog and connection check models."""

from pydantic import BaseModel, Field

from vault_llm.providers.catalog import ModelDescriptor
from vault_llm.providers.validation import ModelCheck


class ModelInfo(BaseModel):
    """Catalog entry."""

    id: str
    name: str
    endpoint: str
    token_limit_field: str | None = None

    @classmethod
    def from_descriptor(cls, descriptor: ModelDescriptor) -> "ModelInfo":
        return cls(
            id=descriptor.id,
            name=descriptor.name,
            endpoint=descriptor.request_endpoint,
            token_limit_field=descriptor.token_limit_field,
        )


class ModelCatalogResponse(BaseModel):
    """Models offered by one hosted provider."""

    provider: str
    default_model: str
    models: list[ModelInfo] = Field(default_factory=list)


class ModelCheckResponse(BaseModel):
    """Result of a minimal request against one model."""

    provider: str
    model: str
    ok: bool
    error: str | None = None

    @classmethod
    def from_check(cls, check: ModelCheck) -> "ModelCheckResponse":
        return cls(provider=check.provider, model=check.model, ok=check.ok, error=check.error)
