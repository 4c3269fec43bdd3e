"""Query and link models."""

from pydantic import BaseModel, Field

from vault_llm.citations.normalizer import LinkReference
from vault_llm.config.assistant import Mode
from vault_llm.pipeline.models import QueryResult
from vault_llm.providers.errors import ProviderError


class QueryRequest(BaseModel):
    """Question (or note topic) to run through the pipeline."""

    query: str = Field(..., min_length=1, description="Question or topic")
    current_file: str | None = Field(default=None, description="Vault path of the open document")
    extra_context: str = Field(default="", description="Text placed before the vault notes")
    mode: Mode | None = Field(default=None, description="Overrides the configured mode")


class ErrorDetail(BaseModel):
    """Structured provider failure."""

    provider: str
    kind: str
    status: int | None = None
    message: str
    server_message: str | None = None
    detail: str = Field(..., description="Rendered error string")

    @classmethod
    def from_error(cls, error: ProviderError) -> "ErrorDetail":
        return cls(**error.to_dict())


class ReferenceModel(BaseModel):
    """Reference found in generated text."""

    path: str
    fragment: str | None = None
    target: str
    broken: bool = False

    @classmethod
    def from_reference(cls, reference: LinkReference) -> "ReferenceModel":
        return cls(
            path=reference.path,
            fragment=reference.fragment,
            target=reference.target,
            broken=reference.broken,
        )


class QueryResponse(BaseModel):
    """Pipeline outcome: text with references, or an error."""

    query: str
    mode: Mode
    model: str
    sources: list[str] = Field(default_factory=list)
    text: str | None = None
    references: list[ReferenceModel] = Field(default_factory=list)
    error: ErrorDetail | None = None

    @classmethod
    def from_result(cls, result: QueryResult, references: list[LinkReference]) -> "QueryResponse":
        return cls(
            query=result.query,
            mode=result.mode,
            model=result.model,
            sources=result.sources,
            text=result.text,
            references=[ReferenceModel.from_reference(r) for r in references],
            error=ErrorDetail.from_error(result.error) if result.error else None,
        )


class LinkNormalizeRequest(BaseModel):
    text: str = Field(..., description="Generated text to scan for references")


class LinkNormalizeResponse(BaseModel):
    """References found in a text and the text with canonical wiki links."""

    references: list[ReferenceModel]
    text: str
