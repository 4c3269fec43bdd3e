"""Pipeline result types."""

from dataclasses import dataclass, field

from vault_llm.config.assistant import Mode
from vault_llm.providers.errors import ProviderError


@dataclass
class QueryResult:
    """Outcome of one pipeline run: generated text or a provider error, never both."""

    query: str
    mode: Mode
    model: str
    sources: list[str] = field(default_factory=list)
    text: str | None = None
    error: ProviderError | None = None
    current_path: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PipelineBusyError(RuntimeError):
    """Raised when a run is requested while another one is in flight."""

    def __init__(self, message: str = "Already processing a query. Please wait."):
        super().__init__(message)


class NoteGenerationError(RuntimeError):
    """Raised when note creation cannot proceed because generation failed."""

    def __init__(self, error: ProviderError):
        self.error = error
        super().__init__(f"Failed to create note: {error.message}")
