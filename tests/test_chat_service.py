"""Unit tests for ChatService."""

import pytest

from app.adapters.embeddings import HashingEmbedder
from app.core.errors import ConfigurationAppError, LLMAppError
from app.schemas.chat import AssistantChatRequest, ChatRequest, ContextTurn, WidgetMessage
from app.services.chat_service import (
    FALLBACK_REPLIES,
    KNOWLEDGE_HEADERS,
    SYSTEM_PROMPTS,
    UNAVAILABLE_MODEL,
    ChatService,
    HybridChatService,
    build_messages,
    format_knowledge_reply,
    provider_order,
)
from app.services.knowledge_base import KnowledgeBase, KnowledgeChunk, KnowledgeMatch
from app.services.knowledge_corpus import KnowledgeEntry
from tests.fakes import FakeChatClient


def test_build_messages_defaults_to_spanish_prompt() -> None:
    messages = build_messages(ChatRequest(message="Hola"))

    assert messages[0] == {"role": "system", "content": SYSTEM_PROMPTS["es"]}
    assert messages[-1] == {"role": "user", "content": "Hola"}
    assert len(messages) == 2


def test_build_messages_keeps_context_order() -> None:
    request = ChatRequest(
        message="third",
        language="en",
        context=[
            ContextTurn(role="user", content="first"),
            ContextTurn(role="assistant", content="second"),
        ],
    )

    contents = [m["content"] for m in build_messages(request)[1:]]

    assert contents == ["first", "second", "third"]


@pytest.mark.asyncio
async def test_reply_maps_completion_to_response() -> None:
    client = FakeChatClient("perplexity", reply="Claro.", model="sonar", total_tokens=42)

    response = await ChatService(client).reply(ChatRequest(message="¿Hacéis SEO?"))

    assert response.reply == "Claro."
    assert response.metadata.model == "sonar"
    assert response.metadata.language == "es"
    assert response.metadata.tokens == 42


@pytest.mark.asyncio
async def test_reply_propagates_provider_errors() -> None:
    client = FakeChatClient(fail=True)

    with pytest.raises(LLMAppError):
        await ChatService(client).reply(ChatRequest(message="hi"))


@pytest.mark.asyncio
async def test_reply_to_last_ignores_history() -> None:
    client = FakeChatClient("groq", reply="ok")

    text = await ChatService(client).reply_to_last(
        [WidgetMessage(role="user", content="old"), WidgetMessage(role="user", content="new")]
    )

    assert text == "ok"
    sent = client.calls[0]["messages"]
    assert sent == [
        {"role": "system", "content": SYSTEM_PROMPTS["en"]},
        {"role": "user", "content": "new"},
    ]
    assert client.calls[0]["max_tokens"] == 500


def _hybrid(kb, factory, **kwargs) -> HybridChatService:
    return HybridChatService(kb, factory, **kwargs)


@pytest.fixture
def services_kb() -> KnowledgeBase:
    return KnowledgeBase(
        [
            KnowledgeEntry(
                type="services",
                language="en",
                title="Cloud",
                text="Cloud migration planning for legacy workloads.",
            ),
            KnowledgeEntry(
                type="faq",
                language="en",
                title="FAQ",
                text="Q: Do you plan cloud migration? A: Yes, cloud migration planning is our core offer.",
            ),
        ],
        HashingEmbedder(),
    )


class TestHybridChatService:
    @pytest.mark.asyncio
    async def test_knowledge_match_skips_providers(self, services_kb, fake_client_factory) -> None:
        service = _hybrid(services_kb, fake_client_factory, min_score=0.2)

        response = await service.reply(
            AssistantChatRequest(message="cloud migration planning", language="en")
        )

        assert response.source == "knowledge-base"
        assert response.reply.splitlines()[0] == KNOWLEDGE_HEADERS["en"]
        assert response.metadata.confidence == "high"
        assert {s.source for s in response.snippets} == {"/services", "/faq"}
        assert fake_client_factory.clients == {}

    @pytest.mark.asyncio
    async def test_single_match_is_medium_confidence(self, services_kb, fake_client_factory) -> None:
        service = _hybrid(services_kb, fake_client_factory, top_k=1, min_score=0.2)

        response = await service.reply(
            AssistantChatRequest(message="cloud migration planning", language="en")
        )

        assert response.metadata.confidence == "medium"
        assert len(response.snippets) == 1

    @pytest.mark.asyncio
    async def test_below_threshold_falls_back_to_preferred_provider(
        self, services_kb, fake_client_factory
    ) -> None:
        service = _hybrid(services_kb, fake_client_factory, min_score=0.99)

        response = await service.reply(
            AssistantChatRequest(message="cloud migration", language="en", prefer_provider="perplexity")
        )

        assert response.source == "perplexity"
        assert response.reply == "Hola, ¿en qué puedo ayudarte?"
        assert response.snippets == []
        assert response.metadata.provider == "perplexity"
        assert response.metadata.confidence is None
        assert list(fake_client_factory.clients) == ["perplexity"]

    @pytest.mark.asyncio
    async def test_failing_provider_falls_over_to_next(self, fake_client_factory) -> None:
        fake_client_factory("gemini").fail = True
        service = _hybrid(None, fake_client_factory)

        response = await service.reply(AssistantChatRequest(message="hola", prefer_provider="gemini"))

        assert response.source == "perplexity"
        assert len(fake_client_factory.clients["gemini"].calls) == 1

    @pytest.mark.asyncio
    async def test_unconfigured_provider_is_skipped(self, fake_client_factory) -> None:
        def factory(provider: str):
            if provider == "perplexity":
                raise ConfigurationAppError(code="llm_missing_api_key", message="missing")
            return fake_client_factory(provider)

        response = await _hybrid(None, factory).reply(AssistantChatRequest(message="hola"))

        assert response.source == "gemini"

    @pytest.mark.asyncio
    async def test_all_providers_failing_returns_static_reply(self, fake_client_factory) -> None:
        fake_client_factory("gemini").fail = True
        fake_client_factory("perplexity").fail = True

        response = await _hybrid(None, fake_client_factory).reply(
            AssistantChatRequest(message="hello", language="en")
        )

        assert response.source == "perplexity"
        assert response.reply == FALLBACK_REPLIES["en"]
        assert response.metadata.model == UNAVAILABLE_MODEL


def test_provider_order_prefers_requested_provider() -> None:
    assert provider_order("gemini") == ["gemini", "perplexity"]
    assert provider_order("perplexity") == ["perplexity", "gemini"]


def test_knowledge_reply_truncates_long_excerpts() -> None:
    chunk = KnowledgeChunk(content="x" * 500, source="/about", type="about", language="es", title="t")

    reply = format_knowledge_reply([KnowledgeMatch(chunk=chunk, score=0.5)], "es", excerpt_chars=380)

    header, bullet = reply.splitlines()
    assert header == KNOWLEDGE_HEADERS["es"]
    assert bullet == f"- {'x' * 380}..."
