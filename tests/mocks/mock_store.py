"""Mock document store and note sink for testing."""

from pathlib import Path

from vault_llm.vault.notes import NoteExistsError
from vault_llm.vault.store import DocumentRef, DocumentStore


class MockDocumentStore(DocumentStore):
    """In-memory document store; paths listed in ``failing`` raise on read."""

    def __init__(self, documents: dict[str, str] | None = None, failing: set[str] | None = None):
        self.documents = dict(documents or {})
        self.failing = set(failing or ())
        self.reads: list[str] = []

    def list_documents(self) -> list[DocumentRef]:
        return [DocumentRef(path) for path in self.documents]

    async def read(self, path: str) -> str:
        self.reads.append(path)
        if path in self.failing:
            raise PermissionError(f"Permission denied: {path}")
        if path not in self.documents:
            raise FileNotFoundError(f"File not found: {path}")
        return self.documents[path]


class MockNoteSink:
    """Note sink keeping created notes in memory."""

    def __init__(self, root: str = "/vault"):
        self.root = Path(root)
        self.notes: dict[str, str] = {}

    async def create(self, path: str, content: str) -> Path:
        if path in self.notes:
            raise NoteExistsError(f"A note with this title already exists: {path}")
        self.notes[path] = content
        return self.root / path
