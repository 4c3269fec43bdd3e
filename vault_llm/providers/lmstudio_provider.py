"""LM Studio (local OpenAI-compatible server) generation provider."""

import structlog

from vault_llm.config.assistant import AssistantConfig
from vault_llm.prompts.builder import LOCAL_SYSTEM_PROMPT
from vault_llm.providers.base import NO_RESPONSE_MESSAGE, GenerationProvider
from vault_llm.providers.errors import ErrorKind, TransportError
from vault_llm.providers.openai_provider import extract_openai_text

logger = structlog.get_logger(__name__)

CHAT_COMPLETIONS_PATH = "chat/completions"
CONNECTION_FAILED_MESSAGE = "Connection failed. Is LM Studio running and the server started?"

# Substrings of transport errors that mean nothing is listening
_REFUSED_PATTERNS = (
    "connection refused",
    "failed to fetch",
    "cannot connect to host",
    "connect call failed",
)


def chat_completions_url(base_url: str) -> str:
    """Append the chat-completions path to a base URL unless already present."""
    url = base_url.strip()
    if url.endswith("/" + CHAT_COMPLETIONS_PATH):
        return url
    if url.endswith("/"):
        return url + CHAT_COMPLETIONS_PATH
    return url + "/" + CHAT_COMPLETIONS_PATH


class LMStudioProvider(GenerationProvider):
    """Local server speaking the OpenAI chat-completions protocol, without auth."""

    name = "LM Studio"
    parse_error_body = False
    status_messages = {
        0: (ErrorKind.CONNECTION_REFUSED, CONNECTION_FAILED_MESSAGE),
        404: (ErrorKind.NOT_FOUND, "Endpoint not found. Check your LM Studio URL setting."),
        500: (ErrorKind.UPSTREAM_SERVER_ERROR, "Server error. Check LM Studio logs."),
    }

    async def generate(self, prompt: str, config: AssistantConfig) -> str:
        url = chat_completions_url(config.lm_studio_api_url)
        body = {
            "model": config.lm_studio_model,
            "messages": [
                {"role": "system", "content": LOCAL_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": config.max_tokens,
            "temperature": config.temperature,
        }

        logger.info("Querying LM Studio", url=url, model=config.lm_studio_model)
        data = await self._post(url, body)

        text = extract_openai_text(data)
        if text is None:
            raise self._error(ErrorKind.UNCLASSIFIED, NO_RESPONSE_MESSAGE, status=200)
        return text

    def _transport_error(self, error: TransportError):
        message = str(error)
        if any(pattern in message.lower() for pattern in _REFUSED_PATTERNS):
            logger.error("LM Studio is not reachable", error=message)
            return self._error(ErrorKind.CONNECTION_REFUSED, CONNECTION_FAILED_MESSAGE)
        return super()._transport_error(error)
