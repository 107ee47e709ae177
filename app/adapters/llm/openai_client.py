"""Chat client for any provider exposing the OpenAI chat-completions API.

Groq, Gemini and Perplexity all serve an OpenAI-compatible endpoint, so one
client class covers them; only ``base_url``, ``model`` and the key differ.
"""

import logging
from typing import Any

from openai import AsyncOpenAI

from app.adapters.llm.base import AbstractChatClient, ChatCompletion, ChatMessage
from app.core.errors import LLMAppError

logger = logging.getLogger(__name__)


class OpenAICompatibleChatClient(AbstractChatClient):
    """Async chat-completions client bound to one provider."""

    def __init__(
        self,
        *,
        provider: str,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        """Initialize the underlying AsyncOpenAI client.

        Args:
            provider: Provider name used in logs and errors (e.g. "gemini").
            api_key: Provider API key.
            model: Model name sent with every request.
            base_url: OpenAI-compatible endpoint of the provider.
            timeout_seconds: Timeout for requests in seconds.
        """
        self.provider = provider
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
        )
        self.model = model

    async def complete(
        self,
        messages: list[ChatMessage],
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> ChatCompletion:
        request_params: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
        }
        if max_tokens is not None:
            request_params["max_tokens"] = max_tokens
        if temperature is not None:
            request_params["temperature"] = temperature

        try:
            response = await self.client.chat.completions.create(**request_params)
        except Exception as exc:
            logger.warning(
                "llm.request_failed",
                extra={
                    "provider": self.provider,
                    "model": self.model,
                    "error_type": type(exc).__name__,
                },
            )
            raise LLMAppError(
                code="llm_provider_error",
                message=f"{self.provider} API error: {exc}",
                details={"provider": self.provider, "model": self.model},
            ) from exc

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise LLMAppError(
                code="llm_empty_response",
                message=f"{self.provider} returned an empty response",
                details={"provider": self.provider, "model": self.model},
            )

        usage = getattr(response, "usage", None)
        total_tokens = getattr(usage, "total_tokens", None) if usage is not None else None

        return ChatCompletion(
            reply=content.strip(),
            model=getattr(response, "model", None) or self.model,
            total_tokens=total_tokens if isinstance(total_tokens, int) else None,
        )
