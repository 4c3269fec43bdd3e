"""Query and note-generation pipeline."""

from __future__ import annotations

import asyncio
from pathlib import Path

import structlog

from vault_llm.citations.normalizer import LinkReference, extract_source_paths, normalize
from vault_llm.config.assistant import AssistantConfig, Mode, Provider
from vault_llm.config.manager import ConfigManager
from vault_llm.context.assembler import build_context
from vault_llm.pipeline.models import NoteGenerationError, PipelineBusyError, QueryResult
from vault_llm.pipeline.postprocess import clean_title, postprocess, title_from_query
from vault_llm.prompts.builder import build_prompt, build_title_prompt
from vault_llm.providers.catalog import GEMINI_MODELS, OPENAI_MODELS, ModelDescriptor, find_model
from vault_llm.providers.errors import ProviderError
from vault_llm.providers.factory import ProviderFactory
from vault_llm.providers.validation import (
    OPENAI_PROBE_TOKENS,
    PROBE_PROMPT,
    ModelCheck,
    probe_gemini_model,
    probe_openai_model,
)
from vault_llm.vault.notes import FileSystemNoteSink, default_title, note_path
from vault_llm.vault.store import DocumentRef, DocumentStore

logger = structlog.get_logger(__name__)


class AssistantService:
    """Runs the select → assemble → prompt → generate → clean pipeline.

    Only one run is in flight at a time; a concurrent request is rejected
    with PipelineBusyError instead of being queued.
    """

    def __init__(
        self,
        config_manager: ConfigManager,
        store: DocumentStore,
        note_sink: FileSystemNoteSink,
        provider_factory: ProviderFactory,
    ) -> None:
        self.config_manager = config_manager
        self.store = store
        self.note_sink = note_sink
        self.provider_factory = provider_factory
        self._lock = asyncio.Lock()

    @property
    def is_processing(self) -> bool:
        return self._lock.locked()

    def resolve_current(self, path: str | None) -> DocumentRef | None:
        if not path:
            return None
        return self.store.get(path) or DocumentRef(path)

    async def run(
        self,
        query: str,
        current_document: str | None = None,
        extra_context: str = "",
        mode: Mode | str | None = None,
    ) -> QueryResult:
        """
        Answer a question or generate note content.

        Args:
            query: Question (query mode) or topic (create mode)
            current_document: Vault path of the document the user is looking at
            extra_context: Text placed before the vault notes
            mode: Overrides the configured mode for this run

        Returns:
            QueryResult with text, or with the provider error

        Raises:
            ValueError: If the query is empty
            PipelineBusyError: If another run is in progress
        """
        if not query or not query.strip():
            raise ValueError("Please enter a question")
        if self._lock.locked():
            raise PipelineBusyError()

        async with self._lock:
            config = self.config_manager.config
            if mode is not None:
                config = config.model_copy(update={"mode": Mode(mode)})
            return await self._run(query, config, self.resolve_current(current_document), extra_context)

    async def _run(
        self,
        query: str,
        config: AssistantConfig,
        current: DocumentRef | None,
        extra_context: str,
    ) -> QueryResult:
        log = logger.bind(mode=config.mode.value, model=config.active_model)

        context = await build_context(self.store, config, current, extra_context)
        sources = extract_source_paths(context) if config.use_vault_content else []
        log.info("Context assembled", sources=len(sources), chars=len(context))

        prompt = build_prompt(
            config.mode,
            config.use_vault_content,
            query,
            context,
            current.path if current else None,
        )

        result = QueryResult(
            query=query,
            mode=config.mode,
            model=config.active_model,
            sources=sources,
            current_path=current.path if current else None,
        )

        provider = self.provider_factory(config)
        try:
            text = await provider.generate(prompt, config)
        except ProviderError as e:
            log.error("Generation failed", kind=e.kind.value, status=e.status, error=e.message)
            result.error = e
            return result

        result.text = postprocess(config.mode, text)
        log.info("Generation complete", chars=len(result.text))
        return result

    async def generate_title(self, query: str, response: str, config: AssistantConfig | None = None) -> str:
        """
        Title for a note built from a query and its response.

        With titling disabled the query itself is shortened; otherwise the
        backend is asked, and any failure falls back to the date-stamped default.
        """
        config = config or self.config_manager.config
        if not config.generate_titles_with_llm:
            return title_from_query(query)

        provider = self.provider_factory(config)
        try:
            raw_title = await provider.generate(build_title_prompt(query, response), config)
        except ProviderError as e:
            logger.warning("Title generation failed", kind=e.kind.value, error=e.message)
            return default_title()

        return clean_title(raw_title) or default_title()

    @staticmethod
    def format_note(result: QueryResult, title: str) -> str:
        if result.mode == Mode.QUERY:
            return f"# {title}\n\n> [!info] Query\n> {result.query}\n\n{result.text}"
        return f"# {title}\n\n{result.text}"

    async def save_note(self, result: QueryResult, title: str | None = None) -> Path:
        """
        Write a successful result to a new note.

        Raises:
            NoteGenerationError: If the result carries an error
            NoteCreationError: If the note cannot be written
        """
        if not result.ok:
            raise NoteGenerationError(result.error)

        config = self.config_manager.config
        title = title or await self.generate_title(result.query, result.text or "", config)
        path = note_path(config.new_note_folder, title)
        return await self.note_sink.create(path, self.format_note(result, title))

    async def create_note(self, topic: str, current_document: str | None = None) -> tuple[QueryResult, Path]:
        """Generate a note about a topic and write it in one step."""
        result = await self.run(topic, current_document=current_document, mode=Mode.CREATE)
        if not result.ok:
            raise NoteGenerationError(result.error)

        title = await self.generate_title(topic, result.text or "", self.config_manager.config)
        path = await self.save_note(result, title)
        return result, path

    def references(self, text: str) -> list[LinkReference]:
        """References in generated text, flagged when the vault cannot resolve them."""
        return normalize(text, resolver=self.store)

    async def test_connection(self, config: AssistantConfig | None = None) -> ModelCheck:
        """Send a minimal request for the configured backend and model."""
        config = config or self.config_manager.config
        factory = self.provider_factory

        if config.use_local_llm:
            provider = factory(config)
            probe_config = config.model_copy(update={"max_tokens": OPENAI_PROBE_TOKENS})
            try:
                await provider.generate(PROBE_PROMPT, probe_config)
            except ProviderError as e:
                return ModelCheck(provider.name, config.lm_studio_model, ok=False, error=e.message)
            return ModelCheck(provider.name, config.lm_studio_model, ok=True)

        api_key = self.config_manager.get_api_key(config.model_provider, config)
        if config.model_provider == Provider.GPT:
            descriptor = find_model(config.model, OPENAI_MODELS) or ModelDescriptor(id=config.model, name=config.model)
            return await probe_openai_model(descriptor, api_key, factory.transport, factory.settings.openai_base_url)

        descriptor = find_model(config.model, GEMINI_MODELS) or ModelDescriptor(id=config.model, name=config.model)
        return await probe_gemini_model(descriptor, api_key, factory.transport, factory.settings.gemini_base_url)
