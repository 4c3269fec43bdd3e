"""Health check endpoint."""

from fastapi import APIRouter, Request

from vault_llm.api.models.health import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Check API health status."""
    service = getattr(request.app.state, "assistant", None)
    return HealthResponse(status="healthy", processing=bool(service and service.is_processing))
