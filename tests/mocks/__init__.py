"""Mock objects for testing."""

from tests.mocks.mock_provider import MockProvider, MockProviderFactory
from tests.mocks.mock_store import MockDocumentStore, MockNoteSink
from tests.mocks.mock_transport import (
    MockTransport,
    RefusingTransport,
    gemini_body,
    json_response,
    openai_chat_body,
)

__all__ = [
    "MockProvider",
    "MockProviderFactory",
    "MockDocumentStore",
    "MockNoteSink",
    "MockTransport",
    "RefusingTransport",
    "json_response",
    "openai_chat_body",
    "gemini_body",
]
