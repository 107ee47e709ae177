"""Chat provider adapters (Groq, Gemini, Perplexity)."""

from app.adapters.llm.base import AbstractChatClient, ChatCompletion, ChatMessage
from app.adapters.llm.factory import SUPPORTED_PROVIDERS, create_chat_client
from app.adapters.llm.openai_client import OpenAICompatibleChatClient

__all__ = [
    "AbstractChatClient",
    "ChatCompletion",
    "ChatMessage",
    "OpenAICompatibleChatClient",
    "SUPPORTED_PROVIDERS",
    "create_chat_client",
]
