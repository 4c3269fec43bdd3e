"""Document store collaborators: the vault as an ordered set of markdown documents."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

import aiofiles
import structlog

logger = structlog.get_logger(__name__)

MARKDOWN_SUFFIX = ".md"


@dataclass(frozen=True)
class DocumentRef:
    """A document addressed by its forward-slash path relative to the vault root."""

    path: str

    @property
    def name(self) -> str:
        return PurePosixPath(self.path).name

    @property
    def stem(self) -> str:
        return PurePosixPath(self.path).stem


@dataclass(frozen=True)
class LoadedDocument:
    """A document together with the text read for it."""

    path: str
    content: str


class DocumentStore(ABC):
    """Abstract base class for document stores."""

    @abstractmethod
    def list_documents(self) -> list[DocumentRef]:
        """
        List every document in a stable order.

        Returns:
            Document references
        """
        pass

    @abstractmethod
    async def read(self, path: str) -> str:
        """
        Read a document's text.

        Args:
            path: Document path

        Returns:
            Document content

        Raises:
            OSError: If the document cannot be read
        """
        pass

    def get(self, path: str) -> DocumentRef | None:
        for document in self.list_documents():
            if document.path == path:
                return document
        return None

    def resolve(self, link: str) -> DocumentRef | None:
        """
        Resolve a link target the way wiki links are resolved.

        Tries the exact path, the path with ``.md`` appended, then the first
        document whose file name (with or without extension) matches.
        """
        link = link.strip().lstrip("/")
        if not link:
            return None

        documents = self.list_documents()
        by_path = {document.path: document for document in documents}
        for candidate in (link, link + MARKDOWN_SUFFIX):
            if candidate in by_path:
                return by_path[candidate]

        for document in documents:
            if link in (document.name, document.stem):
                return document
        return None


class FileSystemDocumentStore(DocumentStore):
    """Markdown files under a directory; dot-directories are skipped."""

    def __init__(self, root: str | Path):
        """
        Initialize file system store.

        Args:
            root: Vault root directory
        """
        self.root = Path(root).resolve()

    def list_documents(self) -> list[DocumentRef]:
        if not self.root.is_dir():
            logger.warning("Vault directory not found", root=str(self.root))
            return []

        documents = []
        for path in self.root.rglob(f"*{MARKDOWN_SUFFIX}"):
            relative = path.relative_to(self.root)
            if any(part.startswith(".") for part in relative.parts):
                continue
            if path.is_file():
                documents.append(DocumentRef(relative.as_posix()))

        return sorted(documents, key=lambda document: document.path)

    def full_path(self, path: str) -> Path:
        """Absolute location of a vault path; paths escaping the root are rejected."""
        full_path = (self.root / path).resolve()
        if full_path != self.root and self.root not in full_path.parents:
            raise PermissionError(f"Path outside the vault: {path}")
        return full_path

    async def read(self, path: str) -> str:
        full_path = self.full_path(path)

        if not full_path.is_file():
            raise FileNotFoundError(f"File not found: {path}")

        async with aiofiles.open(full_path, "r", encoding="utf-8") as f:
            content = await f.read()

        return content
