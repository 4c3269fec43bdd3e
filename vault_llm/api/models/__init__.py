"""API request and response models."""

from vault_llm.api.models.catalog import ModelCatalogResponse, ModelCheckResponse, ModelInfo
from vault_llm.api.models.config import (
    ApiKeyRequest,
    ConfigResponse,
    ConfigUpdateRequest,
    ExcludeFolderRequest,
    ProviderRequest,
)
from vault_llm.api.models.health import HealthResponse
from vault_llm.api.models.notes import NoteCreateRequest, NoteResponse, NoteSaveRequest
from vault_llm.api.models.query import (
    ErrorDetail,
    LinkNormalizeRequest,
    LinkNormalizeResponse,
    QueryRequest,
    QueryResponse,
    ReferenceModel,
)

__all__ = [
    # Health
    "HealthResponse",
    # Config
    "ConfigResponse",
    "ConfigUpdateRequest",
    "ProviderRequest",
    "ApiKeyRequest",
    "ExcludeFolderRequest",
    # Catalog
    "ModelInfo",
    "ModelCatalogResponse",
    "ModelCheckResponse",
    # Query
    "QueryRequest",
    "QueryResponse",
    "ErrorDetail",
    "ReferenceModel",
    "LinkNormalizeRequest",
    "LinkNormalizeResponse",
    # Notes
    "NoteSaveRequest",
    "NoteCreateRequest",
    "NoteResponse",
]
