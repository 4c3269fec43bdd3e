"""Note creation models."""

from pydantic import BaseModel, Field

from vault_llm.config.assistant import Mode


class NoteSaveRequest(BaseModel):
    """Save an already generated response as a note."""

    query: str = Field(..., min_length=1)
    text: str = Field(..., description="Generated response")
    mode: Mode = Field(default=Mode.QUERY)
    model: str = Field(default="")
    title: str | None = Field(default=None, description="Explicit title; generated when omitted")


class NoteCreateRequest(BaseModel):
    """Generate a note about a topic and save it."""

    topic: str = Field(..., min_length=1)
    current_file: str | None = None


class NoteResponse(BaseModel):
    """Created note."""

    path: str = Field(..., description="Vault-relative path of the new note")
    title: str
