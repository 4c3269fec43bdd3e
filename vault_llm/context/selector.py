"""Corpus selection: which vault documents become context for a request."""

import structlog

from vault_llm.config.assistant import AssistantConfig
from vault_llm.vault.store import DocumentRef, DocumentStore, LoadedDocument

logger = structlog.get_logger(__name__)


def select_documents(
    store: DocumentStore,
    config: AssistantConfig,
    current_document: DocumentRef | None = None,
) -> list[DocumentRef]:
    """
    Select context documents according to the configuration filters.

    The include prefix is applied first, then every exclude prefix. Prefixes
    are plain case-sensitive string prefixes. The store's order is kept and
    the result is not capped.

    Args:
        store: Document store
        config: Configuration snapshot
        current_document: Document the user is looking at, if any

    Returns:
        Ordered document references
    """
    if not config.use_vault_content:
        return []

    if config.include_current_file_only and current_document is not None:
        return [current_document]

    documents = store.list_documents()

    if config.include_folder:
        documents = [d for d in documents if d.path.startswith(config.include_folder)]

    if config.exclude_folders:
        excluded = tuple(config.exclude_folders)
        documents = [d for d in documents if not d.path.startswith(excluded)]

    logger.debug(
        "Documents selected",
        count=len(documents),
        include_folder=config.include_folder or None,
        exclude_folders=config.exclude_folders or None,
    )
    return documents


async def load_documents(store: DocumentStore, documents: list[DocumentRef]) -> list[LoadedDocument]:
    """Read selected documents in order, skipping any that cannot be read."""
    loaded = []
    for document in documents:
        try:
            content = await store.read(document.path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Error reading file", path=document.path, error=str(e))
            continue
        loaded.append(LoadedDocument(path=document.path, content=content))
    return loaded
