"""Chat orchestration: system prompt, conversation assembly and provider call.

``ChatService`` is provider-agnostic; routes pick the client and hand it over.
Provider failures surface as ``LLMAppError`` from the client and are left for
the route to translate. ``HybridChatService`` is the exception: it consults
the knowledge base, picks providers itself, and absorbs their failures.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from app.adapters.llm.base import AbstractChatClient, ChatMessage
from app.core.errors import ConfigurationAppError, LLMAppError
from app.schemas.chat import (
    AssistantChatMetadata,
    AssistantChatRequest,
    AssistantChatResponse,
    ChatMetadata,
    ChatRequest,
    ChatResponse,
    KnowledgeSnippet,
    WidgetMessage,
)
from app.services.knowledge_base import KnowledgeBase, KnowledgeMatch

logger = logging.getLogger(__name__)

WIDGET_MAX_TOKENS = 500

KNOWLEDGE_HEADERS: dict[str, str] = {
    "es": "Información encontrada en la base de conocimiento:",
    "en": "Information retrieved from the knowledge base:",
}

FALLBACK_REPLIES: dict[str, str] = {
    "es": (
        "No pude encontrar información relevante en este momento. Nuestro equipo "
        "te contactará para darte seguimiento personal."
    ),
    "en": (
        "I couldn't find relevant information right now. Our team will reach out "
        "to provide a personalised follow-up."
    ),
}

UNAVAILABLE_MODEL = "unavailable"

_SERVICES_EN = """\
- AI Development: AI strategy, machine learning, NLP, computer vision, AI integration
- Computer Services: IT strategy, system architecture, digital transformation
- Web Branding: brand identity, website design, UX, content strategy, SEO
- Web Innovation: custom web apps, progressive web apps, e-commerce
- Infrastructure Consulting: cloud, on-premises and hybrid infrastructure
- Security: assessments, threat detection, data protection, compliance"""

_SERVICES_ES = """\
- Desarrollo de IA: estrategia de IA, machine learning, NLP, visión artificial, integración
- Servicios informáticos: estrategia IT, arquitectura de sistemas, transformación digital
- Branding web: identidad de marca, diseño web, UX, estrategia de contenidos, SEO
- Innovación web: aplicaciones web a medida, PWA, e-commerce
- Consultoría de infraestructura: nube, on-premises e híbrida
- Seguridad: auditorías, detección de amenazas, protección de datos, cumplimiento"""

SYSTEM_PROMPTS: dict[str, str] = {
    "en": (
        "You are Vanguard-IA's assistant. Help website visitors learn about "
        "Vanguard-IA's consultancy services:\n"
        f"{_SERVICES_EN}\n\n"
        "Contact: negocios@vanguard.es, +34 627 961 956, Barcelona, Spain. "
        "Be helpful, professional and concise. If asked about something outside "
        "these services, politely steer the conversation back to how Vanguard-IA "
        "can help. Answer in English."
    ),
    "es": (
        "Eres el asistente de Vanguard-IA. Ayuda a los visitantes a conocer los "
        "servicios de consultoría de Vanguard-IA:\n"
        f"{_SERVICES_ES}\n\n"
        "Contacto: negocios@vanguard.es, +34 627 961 956, Barcelona, España. "
        "Sé útil, profesional y conciso. Si preguntan por algo ajeno a estos "
        "servicios, reconduce la conversación hacia cómo puede ayudar Vanguard-IA. "
        "Responde en español."
    ),
}


def build_messages(request: ChatRequest) -> list[ChatMessage]:
    """System prompt, then the replayed context, then the new user message."""

    messages: list[ChatMessage] = [
        {"role": "system", "content": SYSTEM_PROMPTS[request.language]},
    ]
    messages.extend(
        {"role": turn.role, "content": turn.content} for turn in request.context
    )
    messages.append({"role": "user", "content": request.message.strip()})
    return messages


class ChatService:
    """Runs one chat exchange against a given provider client."""

    def __init__(self, client: AbstractChatClient) -> None:
        self._client = client

    async def reply(self, request: ChatRequest) -> ChatResponse:
        start = time.perf_counter()
        completion = await self._client.complete(build_messages(request))

        logger.info(
            "chat.completed",
            extra={
                "provider": self._client.provider,
                "model": completion.model,
                "language": request.language,
                "context_turns": len(request.context),
                "total_tokens": completion.total_tokens,
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )

        return ChatResponse(
            reply=completion.reply,
            metadata=ChatMetadata(
                model=completion.model,
                language=request.language,
                tokens=completion.total_tokens,
            ),
        )

    async def reply_to_last(self, messages: list[WidgetMessage]) -> str:
        """Answer only the newest widget message; earlier ones are ignored."""

        completion = await self._client.complete(
            [
                {"role": "system", "content": SYSTEM_PROMPTS["en"]},
                {"role": "user", "content": messages[-1].content},
            ],
            max_tokens=WIDGET_MAX_TOKENS,
        )
        logger.info(
            "chat.widget_completed",
            extra={"provider": self._client.provider, "model": completion.model},
        )
        return completion.reply


def provider_order(preferred: str) -> list[str]:
    return ["perplexity", "gemini"] if preferred == "perplexity" else ["gemini", "perplexity"]


def format_knowledge_reply(
    matches: list[KnowledgeMatch],
    language: str,
    excerpt_chars: int = 380,
) -> str:
    lines = [KNOWLEDGE_HEADERS[language]]
    for match in matches:
        content = match.chunk.content
        if len(content) > excerpt_chars:
            content = f"{content[:excerpt_chars].rstrip()}..."
        lines.append(f"- {content}")
    return "\n".join(lines)


class HybridChatService:
    """Portal assistant: knowledge base first, then providers in turn.

    A question answered by at least one chunk scoring ``min_score`` or more is
    served from the knowledge base without calling a provider. Otherwise the
    providers are tried in preference order; an unconfigured or failing
    provider is skipped. When every provider fails the caller still gets a
    polite fallback reply rather than an error.
    """

    def __init__(
        self,
        knowledge_base: KnowledgeBase | None,
        client_factory: Callable[[str], AbstractChatClient],
        *,
        top_k: int = 3,
        min_score: float = 0.12,
        excerpt_chars: int = 380,
    ) -> None:
        self._knowledge_base = knowledge_base
        self._client_factory = client_factory
        self._top_k = top_k
        self._min_score = min_score
        self._excerpt_chars = excerpt_chars

    async def reply(self, request: AssistantChatRequest) -> AssistantChatResponse:
        matches = self._search(request)
        if matches:
            return self._knowledge_reply(request, matches)

        for provider in provider_order(request.prefer_provider):
            try:
                client = self._client_factory(provider)
                answer = await ChatService(client).reply(request)
            except (ConfigurationAppError, LLMAppError) as exc:
                logger.warning(
                    "assistant.provider_skipped",
                    extra={"provider": provider, "error_code": exc.code},
                )
                continue

            return AssistantChatResponse(
                source=provider,
                reply=answer.reply,
                metadata=AssistantChatMetadata(
                    language=request.language,
                    provider=provider,
                    model=answer.metadata.model,
                    tokens=answer.metadata.tokens,
                ),
            )

        logger.error("assistant.all_providers_failed", extra={"language": request.language})
        return AssistantChatResponse(
            source=request.prefer_provider,
            reply=FALLBACK_REPLIES[request.language],
            metadata=AssistantChatMetadata(
                language=request.language,
                provider=request.prefer_provider,
                model=UNAVAILABLE_MODEL,
            ),
        )

    def _search(self, request: AssistantChatRequest) -> list[KnowledgeMatch]:
        if self._knowledge_base is None:
            return []
        return self._knowledge_base.search(
            request.message,
            request.language,
            k=self._top_k,
            min_score=self._min_score,
        )

    def _knowledge_reply(
        self,
        request: AssistantChatRequest,
        matches: list[KnowledgeMatch],
    ) -> AssistantChatResponse:
        logger.info(
            "assistant.knowledge_hit",
            extra={
                "matches": len(matches),
                "top_score": round(matches[0].score, 4),
                "language": request.language,
            },
        )
        return AssistantChatResponse(
            source="knowledge-base",
            reply=format_knowledge_reply(matches, request.language, self._excerpt_chars),
            snippets=[
                KnowledgeSnippet(
                    content=match.chunk.content,
                    source=match.chunk.source,
                    title=match.chunk.title,
                    score=match.score,
                )
                for match in matches
            ],
            metadata=AssistantChatMetadata(
                language=request.language,
                confidence="high" if len(matches) >= 2 else "medium",
            ),
        )
