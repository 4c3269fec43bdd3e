"""Health check models."""

from pydantic import BaseModel, Field

from vault_llm import __version__


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy", description="Service health status")
    version: str = Field(default=__version__, description="API version")
    processing: bool = Field(default=False, description="Whether a query is in flight")
