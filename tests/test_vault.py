"""Tests for the file system document store and note sink."""

from datetime import date

import pytest

from vault_llm.vault.notes import (
    FileSystemNoteSink,
    NoteExistsError,
    NotePermissionError,
    default_title,
    note_path,
    sanitize_title,
)
from vault_llm.vault.store import FileSystemDocumentStore


@pytest.fixture
def vault(tmp_path):
    (tmp_path / "notes").mkdir()
    (tmp_path / "notes" / "b.md").write_text("Beta", encoding="utf-8")
    (tmp_path / "notes" / "a.md").write_text("Alpha", encoding="utf-8")
    (tmp_path / "top.md").write_text("Top", encoding="utf-8")
    (tmp_path / "image.png").write_bytes(b"\x89PNG")
    (tmp_path / ".obsidian").mkdir()
    (tmp_path / ".obsidian" / "workspace.md").write_text("hidden", encoding="utf-8")
    return tmp_path


class TestFileSystemDocumentStore:
    """Tests for FileSystemDocumentStore."""

    def test_lists_markdown_sorted(self, vault):
        store = FileSystemDocumentStore(vault)
        assert [d.path for d in store.list_documents()] == ["notes/a.md", "notes/b.md", "top.md"]

    def test_missing_root(self, tmp_path):
        assert FileSystemDocumentStore(tmp_path / "nope").list_documents() == []

    @pytest.mark.asyncio
    async def test_read(self, vault):
        store = FileSystemDocumentStore(vault)
        assert await store.read("notes/a.md") == "Alpha"

    @pytest.mark.asyncio
    async def test_read_missing(self, vault):
        with pytest.raises(FileNotFoundError):
            await FileSystemDocumentStore(vault).read("notes/zzz.md")

    @pytest.mark.asyncio
    async def test_read_outside_root(self, vault):
        with pytest.raises(PermissionError):
            await FileSystemDocumentStore(vault / "notes").read("../top.md")

    def test_resolve(self, vault):
        store = FileSystemDocumentStore(vault)
        assert store.resolve("notes/a.md").path == "notes/a.md"
        assert store.resolve("notes/a").path == "notes/a.md"
        assert store.resolve("top").path == "top.md"
        assert store.resolve("b.md").path == "notes/b.md"
        assert store.resolve("missing") is None
        assert store.resolve("") is None


class TestTitles:
    """Tests for title sanitization."""

    def test_default_title(self):
        assert default_title(date(2024, 5, 1)) == "LLM response 2024-05-01"

    def test_sanitize_strips_illegal_characters(self):
        assert sanitize_title('  a\\b/c:d*e?f"g<h>i|j  ') == "abcdefghij"

    def test_sanitize_empty_falls_back(self):
        assert sanitize_title(' :?* ', today=date(2024, 5, 1)) == "LLM response 2024-05-01"

    def test_note_path(self):
        assert note_path("", "My: Title") == "My Title.md"
        assert note_path("Generated", "x") == "Generated/x.md"
        assert note_path("Generated/", "x") == "Generated/x.md"


class TestFileSystemNoteSink:
    """Tests for FileSystemNoteSink."""

    @pytest.mark.asyncio
    async def test_creates_missing_folders(self, tmp_path):
        sink = FileSystemNoteSink(tmp_path)
        path = await sink.create("deep/folder/note.md", "# Note")

        assert path == (tmp_path / "deep" / "folder" / "note.md").resolve()
        assert path.read_text(encoding="utf-8") == "# Note"

    @pytest.mark.asyncio
    async def test_existing_note(self, tmp_path):
        sink = FileSystemNoteSink(tmp_path)
        await sink.create("note.md", "first")

        with pytest.raises(NoteExistsError):
            await sink.create("note.md", "second")
        assert (tmp_path / "note.md").read_text(encoding="utf-8") == "first"

    @pytest.mark.asyncio
    async def test_outside_vault(self, tmp_path):
        sink = FileSystemNoteSink(tmp_path / "vault")
        with pytest.raises(NotePermissionError):
            await sink.create("../escape.md", "nope")
