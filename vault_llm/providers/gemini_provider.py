"""Google Gemini generation provider."""

from typing import Any

import structlog

from vault_llm.config.assistant import AssistantConfig
from vault_llm.providers.base import NO_RESPONSE_MESSAGE, GenerationProvider, hosted_status_messages
from vault_llm.providers.errors import ErrorKind
from vault_llm.providers.transport import HttpTransport

logger = structlog.get_logger(__name__)

INLINE_ERROR_PREFIX = "Gemini API Error: "


def build_gemini_payload(prompt: str, max_tokens: int, temperature: float | None = None) -> dict[str, Any]:
    """Single-part generateContent body."""
    generation_config: dict[str, Any] = {"maxOutputTokens": max_tokens}
    if temperature is not None:
        generation_config["temperature"] = temperature
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": generation_config,
    }


def extract_gemini_text(data: Any) -> str | None:
    """Text of the first part of the first candidate."""
    if not isinstance(data, dict):
        return None
    candidates = data.get("candidates") or []
    if not candidates:
        return None
    parts = ((candidates[0] or {}).get("content") or {}).get("parts") or []
    if not parts:
        return None
    return parts[0].get("text")


class GeminiProvider(GenerationProvider):
    """Gemini generateContent endpoint; the key travels in the query string."""

    name = "Gemini"
    status_messages = {
        400: (ErrorKind.MALFORMED_REQUEST, "Bad request. Check your model name and request format."),
        **hosted_status_messages("Gemini", "Google AI Studio quota"),
    }

    def __init__(
        self,
        api_key: str,
        transport: HttpTransport,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta/models",
    ):
        """
        Initialize Gemini provider.

        Args:
            api_key: API key sent as the ``key`` query parameter
            transport: HTTP transport
            base_url: Models collection URL
        """
        super().__init__(transport)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    def model_url(self, model_id: str) -> str:
        return f"{self.base_url}/{model_id}:generateContent"

    async def generate(self, prompt: str, config: AssistantConfig) -> str:
        body = build_gemini_payload(prompt, max_tokens=config.max_tokens, temperature=config.temperature)

        if not self.api_key:
            logger.warning("Gemini API key is not configured")

        logger.info("Querying Gemini", model=config.model)
        data = await self._post(self.model_url(config.model), body, params={"key": self.api_key})

        text = extract_gemini_text(data)
        if text is not None:
            return text

        error = data.get("error") if isinstance(data, dict) else None
        if error:
            error = error if isinstance(error, dict) else {}
            message = error.get("message") or "Unknown error"
            code = error.get("code")
            kind = self.classify_status(code)[0] if isinstance(code, int) else ErrorKind.UNCLASSIFIED
            logger.error("Gemini returned an inline error", model=config.model, error=message, code=code)
            raise self._error(
                kind,
                message,
                status=200,
                server_message=message,
                prefix=INLINE_ERROR_PREFIX,
            )

        raise self._error(ErrorKind.UNCLASSIFIED, NO_RESPONSE_MESSAGE, status=200)
