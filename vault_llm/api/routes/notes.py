"""Note creation endpoints."""

from pathlib import PurePosixPath

import structlog
from fastapi import APIRouter, HTTPException, Request

from vault_llm.api.models.notes import NoteCreateRequest, NoteResponse, NoteSaveRequest
from vault_llm.pipeline.models import NoteGenerationError, PipelineBusyError, QueryResult
from vault_llm.pipeline.service import AssistantService
from vault_llm.vault.notes import NoteCreationError, NoteExistsError, NotePermissionError

router = APIRouter(prefix="/api", tags=["notes"])
logger = structlog.get_logger(__name__)


def _note_response(service: AssistantService, path) -> NoteResponse:
    relative = path.relative_to(service.note_sink.root).as_posix()
    return NoteResponse(path=relative, title=PurePosixPath(relative).stem)


def _note_error(e: NoteCreationError) -> HTTPException:
    if isinstance(e, NoteExistsError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, NotePermissionError):
        return HTTPException(status_code=403, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


@router.post("/notes", response_model=NoteResponse, status_code=201)
async def save_note(note_request: NoteSaveRequest, request: Request) -> NoteResponse:
    """Save a generated response as a new note."""
    service: AssistantService = request.app.state.assistant
    result = QueryResult(
        query=note_request.query,
        mode=note_request.mode,
        model=note_request.model,
        text=note_request.text,
    )

    try:
        path = await service.save_note(result, note_request.title)
    except NoteCreationError as e:
        logger.warning("Note not saved", error=str(e))
        raise _note_error(e)

    logger.info("Note saved", path=str(path))
    return _note_response(service, path)


@router.post("/notes/generate", response_model=NoteResponse, status_code=201)
async def generate_note(note_request: NoteCreateRequest, request: Request) -> NoteResponse:
    """Generate a note about a topic and save it."""
    service: AssistantService = request.app.state.assistant
    logger.info("Note generation request", topic=note_request.topic[:100])

    try:
        _, path = await service.create_note(note_request.topic, current_document=note_request.current_file)
    except PipelineBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except NoteGenerationError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except NoteCreationError as e:
        logger.warning("Note not saved", error=str(e))
        raise _note_error(e)

    logger.info("Note generated", path=str(path))
    return _note_response(service, path)
