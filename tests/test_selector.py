"""Tests for corpus selection and document loading."""

import pytest

from vault_llm.config.assistant import AssistantConfig
from vault_llm.context.selector import load_documents, select_documents
from vault_llm.vault.store import DocumentRef

from tests.mocks import MockDocumentStore


def paths(documents):
    return [document.path for document in documents]


@pytest.fixture
def store():
    return MockDocumentStore(
        {
            "notes/a.md": "A",
            "notes/private/b.md": "B",
            "private/x.md": "X",
            "public/y.md": "Y",
            "Notes/upper.md": "U",
        }
    )


def test_context_disabled_selects_nothing(store):
    config = AssistantConfig(use_vault_content=False, include_current_file_only=True)
    assert select_documents(store, config, DocumentRef("notes/a.md")) == []


def test_no_filters_keeps_store_order(store):
    assert paths(select_documents(store, AssistantConfig())) == [
        "notes/a.md",
        "notes/private/b.md",
        "private/x.md",
        "public/y.md",
        "Notes/upper.md",
    ]


def test_include_filter_is_case_sensitive_prefix(store):
    selected = paths(select_documents(store, AssistantConfig(include_folder="notes/")))
    assert selected == ["notes/a.md", "notes/private/b.md"]
    assert all(path.startswith("notes/") for path in selected)


def test_exclude_filter_drops_prefixed_paths(store):
    config = AssistantConfig(exclude_folders=["private/"])
    selected = paths(select_documents(store, config))
    assert "private/x.md" not in selected
    assert "public/y.md" in selected
    assert "notes/private/b.md" in selected


def test_exclude_filter_only_public_remains():
    store = MockDocumentStore({"private/x.md": "X", "public/y.md": "Y"})
    config = AssistantConfig(exclude_folders=["private/"])
    assert paths(select_documents(store, config)) == ["public/y.md"]


def test_include_applied_before_exclude(store):
    config = AssistantConfig(include_folder="notes/", exclude_folders=["notes/private/"])
    assert paths(select_documents(store, config)) == ["notes/a.md"]


def test_current_file_only_bypasses_folder_filters(store):
    config = AssistantConfig(
        include_current_file_only=True,
        include_folder="public/",
        exclude_folders=["private/"],
    )
    current = DocumentRef("private/x.md")
    assert select_documents(store, config, current) == [current]


def test_current_file_only_without_current_uses_filters(store):
    config = AssistantConfig(include_current_file_only=True, include_folder="public/")
    assert paths(select_documents(store, config, None)) == ["public/y.md"]


@pytest.mark.asyncio
async def test_load_documents_skips_unreadable():
    store = MockDocumentStore({"a.md": "A", "b.md": "B", "c.md": "C"}, failing={"b.md"})
    loaded = await load_documents(store, store.list_documents())

    assert [document.path for document in loaded] == ["a.md", "c.md"]
    assert [document.content for document in loaded] == ["A", "C"]
    assert store.reads == ["a.md", "b.md", "c.md"]


@pytest.mark.asyncio
async def test_load_documents_skips_missing():
    store = MockDocumentStore({"a.md": "A"})
    loaded = await load_documents(store, [DocumentRef("gone.md"), DocumentRef("a.md")])
    assert [document.path for document in loaded] == ["a.md"]
