"""Pytest configuration and fixtures shared across all test modules.

Environment defaults are set before anything imports ``app.core.config``,
because settings are read once at import time.
"""

import os

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("APP_API_KEY_REQUIRED", "true")
os.environ.setdefault("APP_API_KEYS", "test-api-key-123,test-api-key-456")
os.environ.setdefault("GROQ_API_KEY", "test-groq-key")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
os.environ.setdefault("PERPLEXITY_API_KEY", "test-perplexity-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402

from tests.fakes import FakeChatClient  # noqa: E402


@pytest.fixture
def fake_client_factory():
    """Callable replacing ``create_chat_client``; keeps one fake per provider."""

    clients: dict[str, FakeChatClient] = {}

    def factory(provider: str) -> FakeChatClient:
        return clients.setdefault(provider, FakeChatClient(provider))

    factory.clients = clients  # type: ignore[attr-defined]
    return factory
