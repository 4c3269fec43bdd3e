"""OpenAI generation provider."""

from typing import Any

import structlog

from vault_llm.config.assistant import AssistantConfig
from vault_llm.prompts.builder import CHAT_SYSTEM_PROMPT, COMPLETION_SYSTEM_PROMPT
from vault_llm.providers.base import NO_RESPONSE_MESSAGE, GenerationProvider, hosted_status_messages
from vault_llm.providers.catalog import (
    COMPLETIONS_ENDPOINT,
    OPENAI_MODELS,
    RESPONSES_ENDPOINT,
    ModelDescriptor,
    find_model,
)
from vault_llm.providers.errors import ErrorKind
from vault_llm.providers.transport import HttpTransport

logger = structlog.get_logger(__name__)


def build_openai_payload(
    descriptor: ModelDescriptor,
    prompt: str,
    max_tokens: int,
    temperature: float | None = None,
    system_prompt: str | None = CHAT_SYSTEM_PROMPT,
) -> dict[str, Any]:
    """
    Build the request body for a catalog model.

    Args:
        descriptor: Catalog entry (endpoint shape, token-limit field)
        prompt: User prompt
        max_tokens: Output limit, sent under the model's token-limit field
        temperature: Sampling temperature, omitted when None
        system_prompt: System instruction, omitted when None

    Returns:
        JSON body for ``descriptor.request_endpoint``
    """
    body: dict[str, Any] = {"model": descriptor.id}
    if temperature is not None:
        body["temperature"] = temperature

    messages = [{"role": "user", "content": prompt}]
    if system_prompt:
        messages.insert(0, {"role": "system", "content": system_prompt})

    endpoint = descriptor.request_endpoint
    if endpoint == RESPONSES_ENDPOINT:
        body["input"] = messages
    elif endpoint == COMPLETIONS_ENDPOINT:
        if system_prompt:
            body["prompt"] = f"System: {COMPLETION_SYSTEM_PROMPT}\nUser: {prompt}\nAssistant:"
        else:
            body["prompt"] = prompt
    else:
        body["messages"] = messages

    token_field = descriptor.token_limit_field
    if token_field:
        body[token_field] = max_tokens
    return body


def extract_openai_text(data: Any) -> str | None:
    """Generated text from a chat, completion or responses body."""
    if not isinstance(data, dict):
        return None

    choices = data.get("choices")
    if choices:
        choice = choices[0] or {}
        message = choice.get("message") or {}
        if message.get("content") is not None:
            return message["content"]
        if choice.get("text") is not None:
            return choice["text"]
        return None

    if data.get("output_text"):
        return data["output_text"]

    parts = []
    for item in data.get("output") or []:
        for content in item.get("content") or []:
            if content.get("type") == "output_text" and content.get("text"):
                parts.append(content["text"])
    return "".join(parts) if parts else None


class OpenAIProvider(GenerationProvider):
    """OpenAI chat, completion and responses endpoints."""

    name = "OpenAI"
    status_messages = hosted_status_messages("OpenAI", "OpenAI plan and limits")

    def __init__(self, api_key: str, transport: HttpTransport, base_url: str = "https://api.openai.com"):
        """
        Initialize OpenAI provider.

        Args:
            api_key: Bearer credential
            transport: HTTP transport
            base_url: API host without the endpoint path
        """
        super().__init__(transport)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    def describe(self, model_id: str) -> ModelDescriptor:
        """Catalog entry for a model; unknown ids get the default chat shape."""
        return find_model(model_id, OPENAI_MODELS) or ModelDescriptor(id=model_id, name=model_id)

    async def generate(self, prompt: str, config: AssistantConfig) -> str:
        descriptor = self.describe(config.model)
        body = build_openai_payload(
            descriptor,
            prompt,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )
        url = f"{self.base_url}{descriptor.request_endpoint}"

        if not self.api_key:
            logger.warning("OpenAI API key is not configured")

        logger.info("Querying OpenAI", model=descriptor.id, endpoint=descriptor.request_endpoint)
        data = await self._post(url, body, headers={"Authorization": f"Bearer {self.api_key}"})

        text = extract_openai_text(data)
        if text is None:
            raise self._error(ErrorKind.UNCLASSIFIED, NO_RESPONSE_MESSAGE, status=200)
        return text
