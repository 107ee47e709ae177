import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from app.adapters.llm.factory import create_chat_client, provider_display_name
from app.core.auth import require_user_id, verify_api_key
from app.core.config import settings
from app.core.errors import ConfigurationAppError, LLMAppError
from app.core.rate_limit import chat_rate_limit_key, enforce_admission
from app.schemas.chat import (
    AssistantChatRequest,
    AssistantChatResponse,
    ChatRequest,
    ChatResponse,
    WidgetChatRequest,
    WidgetChatResponse,
)
from app.services.chat_service import ChatService, HybridChatService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Chat"])


async def _read_chat_request(
    request: Request,
    model: type[ChatRequest] = ChatRequest,
) -> ChatRequest:
    """Parse the body after admission so throttled callers never reach it.

    Raises:
        HTTPException: 400 for malformed JSON, a blank message, or a body
            that does not match ChatRequest.
    """
    try:
        payload = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON payload")

    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Invalid JSON payload")

    message = payload.get("message")
    if not isinstance(message, str) or not message.strip():
        raise HTTPException(status_code=400, detail="Message is required")

    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="Invalid chat request") from exc


async def _provider_chat(provider: str, request: Request, user_id: str) -> ChatResponse:
    # Order matters: missing key → 500, throttled → 429, bad body → 400
    client = create_chat_client(provider)
    enforce_admission(request, chat_rate_limit_key(provider, user_id))
    chat_request = await _read_chat_request(request)

    try:
        return await ChatService(client).reply(chat_request)
    except LLMAppError as exc:
        logger.error(
            "chat.provider_failed",
            extra={"provider": provider, "error_code": exc.code},
        )
        raise HTTPException(
            status_code=500,
            detail=f"Failed to contact {provider_display_name(provider)} API",
        ) from exc


@router.post(
    "/gemini/chat",
    response_model=ChatResponse,
    dependencies=[Depends(verify_api_key)],
)
async def gemini_chat(
    request: Request,
    user_id: str = Depends(require_user_id),
) -> ChatResponse:
    """Chat with Gemini on behalf of the signed-in user.

    Admission-limited per user under the key ``gemini:<user_id>``.
    """
    return await _provider_chat("gemini", request, user_id)


@router.post(
    "/perplexity/chat",
    response_model=ChatResponse,
    dependencies=[Depends(verify_api_key)],
)
async def perplexity_chat(
    request: Request,
    user_id: str = Depends(require_user_id),
) -> ChatResponse:
    """Chat with Perplexity on behalf of the signed-in user.

    Admission-limited per user under the key ``perplexity:<user_id>``. The
    response metadata includes the total token count Perplexity reports.
    """
    return await _provider_chat("perplexity", request, user_id)


@router.post(
    "/chat",
    response_model=WidgetChatResponse,
    dependencies=[Depends(verify_api_key)],
)
async def widget_chat(body: WidgetChatRequest) -> WidgetChatResponse:
    """Public site widget backed by Groq; answers the last message only.

    Every failure, a missing Groq key included, answers 500 with the same
    generic detail.
    """
    try:
        client = create_chat_client("groq")
        text = await ChatService(client).reply_to_last(body.messages)
    except (ConfigurationAppError, LLMAppError) as exc:
        logger.error(
            "chat.provider_failed",
            extra={"provider": "groq", "error_code": exc.code},
        )
        raise HTTPException(status_code=500, detail="Failed to process chat request") from exc

    return WidgetChatResponse(response=text)


@router.post(
    "/assistant/chat",
    response_model=AssistantChatResponse,
    dependencies=[Depends(verify_api_key)],
)
async def assistant_chat(
    request: Request,
    user_id: str = Depends(require_user_id),
) -> AssistantChatResponse:
    """Portal assistant: knowledge-base answers first, then Perplexity or Gemini.

    Admission-limited per user under the key ``assistant:<user_id>``. Provider
    failures never surface as errors; the reply falls back to a static message.
    """
    enforce_admission(request, chat_rate_limit_key("assistant", user_id))
    body = await _read_chat_request(request, AssistantChatRequest)

    kb_settings = settings.kb
    service = HybridChatService(
        request.app.state.knowledge_base if kb_settings.enabled else None,
        create_chat_client,
        top_k=kb_settings.top_k,
        min_score=kb_settings.min_score,
        excerpt_chars=kb_settings.excerpt_chars,
    )
    return await service.reply(body)
