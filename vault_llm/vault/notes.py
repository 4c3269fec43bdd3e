"""Note sink: writes generated documents into the vault."""

import re
from datetime import date, datetime, timezone
from pathlib import Path

import aiofiles
import structlog

from vault_llm.vault.store import MARKDOWN_SUFFIX

logger = structlog.get_logger(__name__)

_ILLEGAL_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]')


class NoteCreationError(Exception):
    """A note could not be written."""


class NoteExistsError(NoteCreationError):
    """A note already exists at the requested path."""


class NotePermissionError(NoteCreationError):
    """The destination is not writable."""


def default_title(today: date | None = None) -> str:
    """Date-stamped fallback title, e.g. ``LLM response 2024-05-01``."""
    today = today or datetime.now(timezone.utc).date()
    return f"LLM response {today.isoformat()}"


def sanitize_title(title: str, today: date | None = None) -> str:
    """Strip characters that are illegal in file names; fall back to the default title."""
    cleaned = _ILLEGAL_FILENAME_CHARS.sub("", title).strip()
    return cleaned or default_title(today)


def note_path(folder: str, title: str) -> str:
    """Vault path of a note named after a sanitized title."""
    folder = folder.strip()
    if folder and not folder.endswith("/"):
        folder += "/"
    return f"{folder}{sanitize_title(title)}{MARKDOWN_SUFFIX}"


class FileSystemNoteSink:
    """Creates notes as markdown files under the vault root."""

    def __init__(self, root: str | Path):
        """
        Initialize note sink.

        Args:
            root: Vault root directory
        """
        self.root = Path(root).resolve()

    async def create(self, path: str, content: str) -> Path:
        """
        Write a new note, creating missing folders.

        Args:
            path: Vault-relative path
            content: Note content

        Returns:
            Absolute path of the created file

        Raises:
            NoteExistsError: If the file already exists
            NotePermissionError: If the location is not writable or outside the vault
            NoteCreationError: For any other failure
        """
        full_path = (self.root / path).resolve()
        if self.root not in full_path.parents:
            raise NotePermissionError(f"Path outside the vault: {path}")

        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(full_path, "x", encoding="utf-8") as f:
                await f.write(content)
        except FileExistsError as e:
            raise NoteExistsError(f"A note with this title already exists: {path}") from e
        except PermissionError as e:
            raise NotePermissionError(f"Permission denied. Check your folder permissions: {path}") from e
        except OSError as e:
            raise NoteCreationError(str(e)) from e

        logger.info("Note created", path=path, size=len(content))
        return full_path
