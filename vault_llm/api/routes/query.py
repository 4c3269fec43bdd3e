"""Query and link endpoints."""

import structlog
from fastapi import APIRouter, HTTPException, Request

from vault_llm.api.models.query import (
    LinkNormalizeRequest,
    LinkNormalizeResponse,
    QueryRequest,
    QueryResponse,
    ReferenceModel,
)
from vault_llm.citations.normalizer import rewrite
from vault_llm.pipeline.models import PipelineBusyError
from vault_llm.pipeline.service import AssistantService

router = APIRouter(prefix="/api", tags=["query"])
logger = structlog.get_logger(__name__)


@router.post("/query", response_model=QueryResponse)
async def run_query(query_request: QueryRequest, request: Request) -> QueryResponse:
    """
    Run a question or note topic through the pipeline.

    Provider failures are returned in the ``error`` field with status 200;
    a concurrent request is rejected with 409.
    """
    service: AssistantService = request.app.state.assistant
    logger.info("Query request", query=query_request.query[:100], current_file=query_request.current_file)

    try:
        result = await service.run(
            query_request.query,
            current_document=query_request.current_file,
            extra_context=query_request.extra_context,
            mode=query_request.mode,
        )
    except PipelineBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Query failed", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail=f"Query failed: {str(e)}")

    references = service.references(result.text) if result.text else []
    return QueryResponse.from_result(result, references)


@router.post("/links/normalize", response_model=LinkNormalizeResponse)
async def normalize_links(link_request: LinkNormalizeRequest, request: Request) -> LinkNormalizeResponse:
    """Extract references from text and rewrite them as canonical wiki links."""
    service: AssistantService = request.app.state.assistant
    references = service.references(link_request.text)
    return LinkNormalizeResponse(
        references=[ReferenceModel.from_reference(r) for r in references],
        text=rewrite(link_request.text),
    )
