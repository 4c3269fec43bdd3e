"""Base class for text-generation providers."""

from abc import ABC, abstractmethod
from typing import Any

import structlog

from vault_llm.config.assistant import AssistantConfig
from vault_llm.providers.errors import ErrorKind, ProviderError, TransportError
from vault_llm.providers.transport import HttpResponse, HttpTransport

logger = structlog.get_logger(__name__)

NO_RESPONSE_MESSAGE = "No response generated."

_SERVER_ERROR_STATUSES = (500, 502, 503, 504)


class GenerationProvider(ABC):
    """Abstract base class for generation providers.

    Subclasses build the provider-specific request, send it through the
    transport and either return the generated text or raise ProviderError.
    """

    #: Display name used in error prefixes and logs
    name: str = ""
    #: Whether a JSON ``error.message`` in a failed response is reported verbatim
    parse_error_body: bool = True
    #: Status code -> (kind, fixed message)
    status_messages: dict[int, tuple[ErrorKind, str]] = {}

    def __init__(self, transport: HttpTransport):
        self.transport = transport

    @abstractmethod
    async def generate(self, prompt: str, config: AssistantConfig) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: Full instruction text
            config: Configuration snapshot for this request

        Returns:
            Generated text

        Raises:
            ProviderError: If the request failed or produced no text
        """
        pass

    async def _post(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        """Send the request and return the parsed body of a successful response."""
        try:
            response = await self.transport.post_json(url, payload, headers=headers, params=params)
        except TransportError as e:
            raise self._transport_error(e) from e

        if not response.ok:
            error = self._http_error(response)
            logger.error(
                "Provider request failed",
                provider=self.name,
                status=response.status,
                kind=error.kind.value,
                error=error.message,
            )
            raise error

        data = response.json()
        if data is None:
            raise self._error(
                ErrorKind.UNCLASSIFIED,
                "Response body is not valid JSON.",
                status=response.status,
            )
        return data

    def _error(
        self,
        kind: ErrorKind,
        message: str,
        status: int | None = None,
        server_message: str | None = None,
        prefix: str | None = None,
    ) -> ProviderError:
        return ProviderError(
            provider=self.name,
            kind=kind,
            message=message,
            status=status,
            server_message=server_message,
            prefix=prefix,
        )

    def _http_error(self, response: HttpResponse) -> ProviderError:
        kind, message = self.classify_status(response.status)
        server_message = self.server_message(response) if self.parse_error_body else None

        if server_message:
            message = f"Server message: {server_message}"
        elif message is None:
            message = f"Status {response.status}: {response.reason or 'Unknown error'}"

        return self._error(kind, message, status=response.status, server_message=server_message)

    def _transport_error(self, error: TransportError) -> ProviderError:
        logger.error("Provider unreachable", provider=self.name, error=str(error))
        return self._error(ErrorKind.TRANSPORT, str(error) or "Unknown error occurred")

    def classify_status(self, status: int) -> tuple[ErrorKind, str | None]:
        """Map a status code to its failure class and fixed message."""
        if status in self.status_messages:
            return self.status_messages[status]
        if status in _SERVER_ERROR_STATUSES:
            return ErrorKind.UPSTREAM_SERVER_ERROR, None
        return ErrorKind.UNCLASSIFIED, None

    @staticmethod
    def server_message(response: HttpResponse) -> str | None:
        """Extract ``error.message`` from a JSON error body."""
        data = response.json()
        if not isinstance(data, dict):
            return None
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return None


def hosted_status_messages(provider_label: str, quota_hint: str) -> dict[int, tuple[ErrorKind, str]]:
    """Fixed messages shared by the hosted providers."""
    server_error = (ErrorKind.UPSTREAM_SERVER_ERROR, f"{provider_label} server error. Please try again later.")
    return {
        401: (ErrorKind.AUTHENTICATION, "Authentication error. Please check your API key."),
        403: (
            ErrorKind.AUTHORIZATION,
            "Permission denied. Your API key may not have access to this model.",
        ),
        404: (
            ErrorKind.NOT_FOUND,
            "The specified model was not found. It might be deprecated or unavailable.",
        ),
        429: (
            ErrorKind.RATE_LIMITED,
            f"Rate limit exceeded or quota exceeded. Please check your {quota_hint}.",
        ),
        **{status: server_error for status in _SERVER_ERROR_STATUSES},
    }
