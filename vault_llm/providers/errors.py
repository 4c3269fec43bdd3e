"""Structured provider failures."""

from enum import Enum


class ErrorKind(str, Enum):
    """Failure classes shared by all providers."""

    TRANSPORT = "transport"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    UPSTREAM_SERVER_ERROR = "upstream_server_error"
    MALFORMED_REQUEST = "malformed_request"
    CONNECTION_REFUSED = "connection_refused"
    UNCLASSIFIED = "unclassified"


class ProviderError(Exception):
    """A generation request that did not produce text.

    ``status`` is the HTTP status, or None when no response was received.
    ``render()`` gives the legacy single-string form (``"Error querying OpenAI: ..."``)
    for display and logs.
    """

    def __init__(
        self,
        provider: str,
        kind: ErrorKind,
        message: str,
        status: int | None = None,
        server_message: str | None = None,
        prefix: str | None = None,
    ):
        self.provider = provider
        self.kind = kind
        self.message = message
        self.status = status
        self.server_message = server_message
        self.prefix = prefix or f"Error querying {provider}: "
        super().__init__(self.render())

    def render(self) -> str:
        return f"{self.prefix}{self.message}"

    def to_dict(self) -> dict:
        return {
            "provider": self.provider,
            "kind": self.kind.value,
            "status": self.status,
            "message": self.message,
            "server_message": self.server_message,
            "detail": self.render(),
        }


class TransportError(Exception):
    """Raised by a transport when no HTTP response was received."""
