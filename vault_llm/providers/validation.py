"""Minimal per-model requests used to check credentials and model availability."""

from dataclasses import dataclass
from typing import AsyncIterator, Iterable

import structlog

from vault_llm.providers.base import GenerationProvider
from vault_llm.providers.catalog import GEMINI_MODELS, OPENAI_MODELS, ModelDescriptor
from vault_llm.providers.errors import TransportError
from vault_llm.providers.gemini_provider import GeminiProvider, build_gemini_payload
from vault_llm.providers.openai_provider import build_openai_payload
from vault_llm.providers.transport import HttpResponse, HttpTransport

logger = structlog.get_logger(__name__)

PROBE_PROMPT = "Hi"
# Reasoning models reject very small limits, so OpenAI probes ask for 50 tokens
OPENAI_PROBE_TOKENS = 50
GEMINI_PROBE_TOKENS = 1


@dataclass
class ModelCheck:
    """Outcome of probing one model."""

    provider: str
    model: str
    ok: bool
    error: str | None = None


def _failure_message(response: HttpResponse) -> str:
    return GenerationProvider.server_message(response) or f"Status {response.status}"


async def probe_openai_model(
    descriptor: ModelDescriptor,
    api_key: str,
    transport: HttpTransport,
    base_url: str = "https://api.openai.com",
) -> ModelCheck:
    """Send a one-message request to an OpenAI model."""
    body = build_openai_payload(descriptor, PROBE_PROMPT, max_tokens=OPENAI_PROBE_TOKENS, system_prompt=None)
    url = f"{base_url.rstrip('/')}{descriptor.request_endpoint}"

    try:
        response = await transport.post_json(url, body, headers={"Authorization": f"Bearer {api_key}"})
    except TransportError as e:
        return ModelCheck("OpenAI", descriptor.id, ok=False, error=str(e))

    if response.status == 200:
        return ModelCheck("OpenAI", descriptor.id, ok=True)
    return ModelCheck("OpenAI", descriptor.id, ok=False, error=_failure_message(response))


async def probe_gemini_model(
    descriptor: ModelDescriptor,
    api_key: str,
    transport: HttpTransport,
    base_url: str = "https://generativelanguage.googleapis.com/v1beta/models",
) -> ModelCheck:
    """Send a one-token generateContent request to a Gemini model."""
    body = build_gemini_payload(PROBE_PROMPT, max_tokens=GEMINI_PROBE_TOKENS)
    url = GeminiProvider(api_key, transport, base_url=base_url).model_url(descriptor.id)

    try:
        response = await transport.post_json(url, body, params={"key": api_key})
    except TransportError as e:
        return ModelCheck("Gemini", descriptor.id, ok=False, error=str(e))

    if response.status != 200:
        return ModelCheck("Gemini", descriptor.id, ok=False, error=_failure_message(response))

    data = response.json()
    error = data.get("error") if isinstance(data, dict) else None
    if error:
        message = (error.get("message") if isinstance(error, dict) else None) or "Unknown Gemini error"
        return ModelCheck("Gemini", descriptor.id, ok=False, error=message)
    return ModelCheck("Gemini", descriptor.id, ok=True)


async def validate_openai_models(
    api_key: str,
    transport: HttpTransport,
    base_url: str = "https://api.openai.com",
    models: Iterable[ModelDescriptor] = OPENAI_MODELS,
) -> AsyncIterator[ModelCheck]:
    """Probe every OpenAI catalog model in order."""
    for descriptor in models:
        check = await probe_openai_model(descriptor, api_key, transport, base_url)
        logger.debug("Model probed", provider=check.provider, model=check.model, ok=check.ok)
        yield check


async def validate_gemini_models(
    api_key: str,
    transport: HttpTransport,
    base_url: str = "https://generativelanguage.googleapis.com/v1beta/models",
    models: Iterable[ModelDescriptor] = GEMINI_MODELS,
) -> AsyncIterator[ModelCheck]:
    """Probe every Gemini catalog model in order."""
    for descriptor in models:
        check = await probe_gemini_model(descriptor, api_key, transport, base_url)
        logger.debug("Model probed", provider=check.provider, model=check.model, ok=check.ok)
        yield check
