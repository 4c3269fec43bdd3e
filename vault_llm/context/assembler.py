"""Context blob assembly.

Each document becomes ``FILE: <path>\\n\\n<content>\\n\\n``. The ``FILE: `` line
prefix is parsed back by :func:`vault_llm.citations.normalizer.extract_source_paths`.
"""

from typing import Iterable

from vault_llm.config.assistant import AssistantConfig
from vault_llm.context.selector import load_documents, select_documents
from vault_llm.vault.store import DocumentRef, DocumentStore, LoadedDocument

FILE_MARKER = "FILE: "


def format_document(document: LoadedDocument) -> str:
    return f"{FILE_MARKER}{document.path}\n\n{document.content}\n\n"


def assemble_context(documents: Iterable[LoadedDocument], extra: str = "") -> str:
    """Concatenate document blocks, prefixed by ``extra`` and a blank line when given."""
    blob = "".join(format_document(document) for document in documents)
    if extra:
        blob = extra + "\n\n" + blob
    return blob


async def build_context(
    store: DocumentStore,
    config: AssistantConfig,
    current_document: DocumentRef | None = None,
    extra: str = "",
) -> str:
    """Select, read and assemble context; returns just ``extra`` when context is disabled."""
    if not config.use_vault_content:
        return extra or ""

    documents = select_documents(store, config, current_document)
    loaded = await load_documents(store, documents)
    return assemble_context(loaded, extra)
