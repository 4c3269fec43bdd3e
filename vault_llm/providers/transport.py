"""HTTP transport used by the generation providers."""

import asyncio
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import aiohttp
import structlog

from vault_llm.providers.errors import TransportError

logger = structlog.get_logger(__name__)


@dataclass
class HttpResponse:
    """Status and raw body of a completed request."""

    status: int
    text: str
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        """Parsed body, or None when the body is not JSON."""
        if not self.text:
            return None
        try:
            return json.loads(self.text)
        except ValueError:
            return None


class HttpTransport(ABC):
    """Abstract base class for HTTP transports."""

    @abstractmethod
    async def post_json(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> HttpResponse:
        """
        POST a JSON body.

        Args:
            url: Request URL
            payload: JSON body
            headers: Extra request headers
            params: Query string parameters

        Returns:
            HttpResponse for any status code

        Raises:
            TransportError: If no response was received
        """
        pass


class AiohttpTransport(HttpTransport):
    """aiohttp-backed transport.

    Opens one session per request; timeouts are aiohttp's defaults.
    """

    async def post_json(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> HttpResponse:
        request_headers = {"Content-Type": "application/json"}
        if headers:
            request_headers.update(headers)

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(url, json=payload, headers=request_headers, params=params) as response:
                    text = await response.text()
                    logger.debug("HTTP response received", url=url, status=response.status, length=len(text))
                    return HttpResponse(status=response.status, text=text, reason=response.reason)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            message = str(e) or e.__class__.__name__
            logger.warning("HTTP request failed", url=url, error=message)
            raise TransportError(message) from e
