"""Tests for the generation providers and their factory."""

import pytest

from vault_llm.config.assistant import AssistantConfig, Provider
from vault_llm.prompts.builder import CHAT_SYSTEM_PROMPT, LOCAL_SYSTEM_PROMPT
from vault_llm.providers.catalog import COMPLETIONS_ENDPOINT, ModelDescriptor, find_model
from vault_llm.providers.errors import ErrorKind, ProviderError, TransportError
from vault_llm.providers.factory import ProviderFactory, create_provider
from vault_llm.providers.gemini_provider import GeminiProvider
from vault_llm.providers.lmstudio_provider import LMStudioProvider, chat_completions_url
from vault_llm.providers.openai_provider import OpenAIProvider, build_openai_payload, extract_openai_text
from vault_llm.providers.transport import HttpResponse

from tests.mocks import MockTransport, RefusingTransport, gemini_body, json_response, openai_chat_body

GPT_CONFIG = AssistantConfig(model_provider=Provider.GPT, model="gpt-4o-mini")
GEMINI_CONFIG = AssistantConfig(model="gemini-2.5-flash")
LOCAL_CONFIG = AssistantConfig(use_local_llm=True, lm_studio_model="qwen", max_tokens=300, temperature=0.2)


async def expect_error(provider, config) -> ProviderError:
    with pytest.raises(ProviderError) as exc_info:
        await provider.generate("Hello", config)
    return exc_info.value


class TestOpenAIPayload:
    """Tests for OpenAI request shapes."""

    def test_chat_shape(self):
        body = build_openai_payload(find_model("gpt-4o"), "Hi", max_tokens=100, temperature=0.5)

        assert body == {
            "model": "gpt-4o",
            "temperature": 0.5,
            "messages": [
                {"role": "system", "content": CHAT_SYSTEM_PROMPT},
                {"role": "user", "content": "Hi"},
            ],
            "max_tokens": 100,
        }

    def test_max_completion_tokens_models(self):
        body = build_openai_payload(find_model("gpt-5"), "Hi", max_tokens=100)
        assert body["max_completion_tokens"] == 100
        assert "max_tokens" not in body

    def test_responses_shape_omits_token_limit(self):
        body = build_openai_payload(find_model("gpt-5-pro"), "Hi", max_tokens=100)
        assert body["input"][-1] == {"role": "user", "content": "Hi"}
        assert "messages" not in body
        assert "max_tokens" not in body
        assert "max_completion_tokens" not in body

    def test_completions_shape(self):
        descriptor = ModelDescriptor(id="legacy-instruct", name="Legacy", endpoint=COMPLETIONS_ENDPOINT)
        body = build_openai_payload(descriptor, "Hi", max_tokens=10)
        assert body["prompt"] == "System: You are an expert assistant. Answer concisely.\nUser: Hi\nAssistant:"
        assert body["max_tokens"] == 10

    def test_extract_text_variants(self):
        assert extract_openai_text(openai_chat_body("chat")) == "chat"
        assert extract_openai_text({"choices": [{"text": "completion"}]}) == "completion"
        assert extract_openai_text({"output_text": "responses"}) == "responses"
        output = {"output": [{"type": "message", "content": [{"type": "output_text", "text": "parts"}]}]}
        assert extract_openai_text(output) == "parts"
        assert extract_openai_text({}) is None


class TestOpenAIProvider:
    """Tests for OpenAIProvider."""

    @pytest.mark.asyncio
    async def test_generate_success(self):
        transport = MockTransport([json_response(openai_chat_body("Paris"))])
        provider = OpenAIProvider("sk-test", transport)

        assert await provider.generate("Capital?", GPT_CONFIG) == "Paris"

        request = transport.last_request
        assert request["url"] == "https://api.openai.com/v1/chat/completions"
        assert request["headers"] == {"Authorization": "Bearer sk-test"}
        assert request["payload"]["max_tokens"] == 2000
        assert request["payload"]["temperature"] == 0.7
        assert request["payload"]["messages"][1]["content"] == "Capital?"

    @pytest.mark.asyncio
    async def test_responses_endpoint(self):
        transport = MockTransport([json_response({"output_text": "Done"})])
        provider = OpenAIProvider("sk-test", transport, base_url="https://proxy.local/")
        config = GPT_CONFIG.model_copy(update={"model": "gpt-5-pro"})

        assert await provider.generate("Hi", config) == "Done"
        assert transport.last_request["url"] == "https://proxy.local/v1/responses"

    @pytest.mark.asyncio
    async def test_rate_limited(self):
        transport = MockTransport([HttpResponse(429, "Too Many Requests", reason="Too Many Requests")])
        error = await expect_error(OpenAIProvider("sk-test", transport), GPT_CONFIG)

        assert error.kind == ErrorKind.RATE_LIMITED
        assert error.status == 429
        assert error.render() == (
            "Error querying OpenAI: Rate limit exceeded or quota exceeded. Please check your OpenAI plan and limits."
        )

    @pytest.mark.asyncio
    async def test_server_message_preferred(self):
        transport = MockTransport([json_response({"error": {"message": "Incorrect API key provided"}}, status=401)])
        error = await expect_error(OpenAIProvider("bad", transport), GPT_CONFIG)

        assert error.kind == ErrorKind.AUTHENTICATION
        assert error.server_message == "Incorrect API key provided"
        assert error.render() == "Error querying OpenAI: Server message: Incorrect API key provided"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,kind,message",
        [
            (401, ErrorKind.AUTHENTICATION, "Authentication error. Please check your API key."),
            (403, ErrorKind.AUTHORIZATION, "Permission denied. Your API key may not have access to this model."),
            (404, ErrorKind.NOT_FOUND, "The specified model was not found. It might be deprecated or unavailable."),
            (502, ErrorKind.UPSTREAM_SERVER_ERROR, "OpenAI server error. Please try again later."),
        ],
    )
    async def test_fixed_status_messages(self, status, kind, message):
        transport = MockTransport([HttpResponse(status, "")])
        error = await expect_error(OpenAIProvider("sk-test", transport), GPT_CONFIG)

        assert error.kind == kind
        assert error.message == message

    @pytest.mark.asyncio
    async def test_unclassified_status(self):
        transport = MockTransport([HttpResponse(418, "", reason="I'm a teapot")])
        error = await expect_error(OpenAIProvider("sk-test", transport), GPT_CONFIG)

        assert error.kind == ErrorKind.UNCLASSIFIED
        assert error.message == "Status 418: I'm a teapot"

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        transport = MockTransport([TransportError("Server disconnected")])
        error = await expect_error(OpenAIProvider("sk-test", transport), GPT_CONFIG)

        assert error.kind == ErrorKind.TRANSPORT
        assert error.status is None
        assert error.render() == "Error querying OpenAI: Server disconnected"

    @pytest.mark.asyncio
    async def test_empty_response(self):
        transport = MockTransport([json_response({"choices": []})])
        error = await expect_error(OpenAIProvider("sk-test", transport), GPT_CONFIG)

        assert error.kind == ErrorKind.UNCLASSIFIED
        assert error.message == "No response generated."


class TestGeminiProvider:
    """Tests for GeminiProvider."""

    @pytest.mark.asyncio
    async def test_generate_success(self):
        transport = MockTransport([json_response(gemini_body("Berlin"))])
        provider = GeminiProvider("g-key", transport)

        assert await provider.generate("Capital?", GEMINI_CONFIG) == "Berlin"

        request = transport.last_request
        assert request["url"] == (
            "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.5-flash:generateContent"
        )
        assert request["params"] == {"key": "g-key"}
        assert request["headers"] == {}
        assert request["payload"] == {
            "contents": [{"parts": [{"text": "Capital?"}]}],
            "generationConfig": {"maxOutputTokens": 2000, "temperature": 0.7},
        }

    @pytest.mark.asyncio
    async def test_inline_error_with_success_status(self):
        transport = MockTransport([json_response({"error": {"code": 429, "message": "Quota exhausted"}})])
        error = await expect_error(GeminiProvider("g-key", transport), GEMINI_CONFIG)

        assert error.kind == ErrorKind.RATE_LIMITED
        assert error.render() == "Gemini API Error: Quota exhausted"

    @pytest.mark.asyncio
    async def test_bad_request(self):
        transport = MockTransport([HttpResponse(400, "not json")])
        error = await expect_error(GeminiProvider("g-key", transport), GEMINI_CONFIG)

        assert error.kind == ErrorKind.MALFORMED_REQUEST
        assert error.render() == "Error querying Gemini: Bad request. Check your model name and request format."

    @pytest.mark.asyncio
    async def test_rate_limited_hint(self):
        transport = MockTransport([HttpResponse(429, "")])
        error = await expect_error(GeminiProvider("g-key", transport), GEMINI_CONFIG)

        assert error.kind == ErrorKind.RATE_LIMITED
        assert error.message.endswith("Please check your Google AI Studio quota.")

    @pytest.mark.asyncio
    async def test_server_error(self):
        transport = MockTransport([HttpResponse(503, "")])
        error = await expect_error(GeminiProvider("g-key", transport), GEMINI_CONFIG)

        assert error.kind == ErrorKind.UPSTREAM_SERVER_ERROR
        assert error.message == "Gemini server error. Please try again later."


class TestLMStudioProvider:
    """Tests for LMStudioProvider."""

    def test_chat_completions_url(self):
        assert chat_completions_url("http://localhost:1234/v1") == "http://localhost:1234/v1/chat/completions"
        assert chat_completions_url("http://localhost:1234/v1/") == "http://localhost:1234/v1/chat/completions"
        assert (
            chat_completions_url("http://localhost:1234/v1/chat/completions")
            == "http://localhost:1234/v1/chat/completions"
        )

    @pytest.mark.asyncio
    async def test_generate_success(self):
        transport = MockTransport([json_response(openai_chat_body("Local answer"))])
        provider = LMStudioProvider(transport)

        assert await provider.generate("Question", LOCAL_CONFIG) == "Local answer"

        request = transport.last_request
        assert request["url"] == "http://localhost:1234/v1/chat/completions"
        assert request["headers"] == {}
        assert request["payload"] == {
            "model": "qwen",
            "messages": [
                {"role": "system", "content": LOCAL_SYSTEM_PROMPT},
                {"role": "user", "content": "Question"},
            ],
            "max_tokens": 300,
            "temperature": 0.2,
        }

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        error = await expect_error(LMStudioProvider(RefusingTransport()), LOCAL_CONFIG)

        assert error.kind == ErrorKind.CONNECTION_REFUSED
        assert error.render() == (
            "Error querying LM Studio: Connection failed. Is LM Studio running and the server started?"
        )

    @pytest.mark.asyncio
    async def test_other_transport_failure(self):
        transport = MockTransport([TransportError("TimeoutError")])
        error = await expect_error(LMStudioProvider(transport), LOCAL_CONFIG)
        assert error.kind == ErrorKind.TRANSPORT

    @pytest.mark.asyncio
    async def test_endpoint_not_found(self):
        transport = MockTransport([HttpResponse(404, "")])
        error = await expect_error(LMStudioProvider(transport), LOCAL_CONFIG)

        assert error.kind == ErrorKind.NOT_FOUND
        assert error.message == "Endpoint not found. Check your LM Studio URL setting."

    @pytest.mark.asyncio
    async def test_server_error_ignores_body(self):
        transport = MockTransport([json_response({"error": {"message": "model crashed"}}, status=500)])
        error = await expect_error(LMStudioProvider(transport), LOCAL_CONFIG)

        assert error.kind == ErrorKind.UPSTREAM_SERVER_ERROR
        assert error.message == "Server error. Check LM Studio logs."
        assert error.server_message is None

    @pytest.mark.asyncio
    async def test_unlisted_status(self):
        transport = MockTransport([HttpResponse(401, "", reason="Unauthorized")])
        error = await expect_error(LMStudioProvider(transport), LOCAL_CONFIG)

        assert error.kind == ErrorKind.UNCLASSIFIED
        assert error.message == "Status 401: Unauthorized"


class TestProviderFactory:
    """Tests for provider selection."""

    def test_local_flag_wins(self, make_manager, settings):
        manager = make_manager(use_local_llm=True, model_provider=Provider.GPT)
        provider = create_provider(manager.config, manager, settings, MockTransport())
        assert isinstance(provider, LMStudioProvider)

    def test_openai_with_stored_key(self, make_manager, settings):
        manager = make_manager(model_provider=Provider.GPT, encrypted_openai_api_key="sk-stored")
        provider = create_provider(manager.config, manager, settings, MockTransport())

        assert isinstance(provider, OpenAIProvider)
        assert provider.api_key == "sk-stored"
        assert provider.base_url == "https://api.openai.com"

    def test_gemini_with_environment_key(self, make_manager, settings):
        settings = settings.model_copy(update={"gemini_api_key": "env-gemini"})
        manager = make_manager()
        manager.settings = settings
        provider = create_provider(manager.config, manager, settings, MockTransport())

        assert isinstance(provider, GeminiProvider)
        assert provider.api_key == "env-gemini"

    def test_factory_binds_transport(self, make_manager, settings):
        transport = MockTransport()
        factory = ProviderFactory(make_manager(), settings, transport)
        provider = factory(AssistantConfig())

        assert isinstance(provider, GeminiProvider)
        assert provider.transport is transport
