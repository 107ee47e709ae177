"""Factory for per-provider chat clients."""

from app.adapters.llm.base import AbstractChatClient
from app.adapters.llm.openai_client import OpenAICompatibleChatClient
from app.core.config import settings
from app.core.errors import ConfigurationAppError, ValidationAppError

SUPPORTED_PROVIDERS = ("groq", "gemini", "perplexity")

_DISPLAY_NAMES = {
    "groq": "Groq",
    "gemini": "Gemini",
    "perplexity": "Perplexity",
}


def provider_display_name(provider: str) -> str:
    return _DISPLAY_NAMES.get(provider.lower(), provider)


def create_chat_client(provider: str) -> AbstractChatClient:
    """Build a chat client for ``provider`` from current settings.

    Raises:
        ValidationAppError: If the provider is not supported.
        ConfigurationAppError: If the provider's API key is not configured.
    """
    name = provider.lower()
    provider_settings = settings.provider(name)

    if provider_settings is None:
        raise ValidationAppError(
            code="llm_unknown_provider",
            message=(
                f"Unknown LLM provider: '{provider}'. "
                f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
            ),
        )

    if not provider_settings.api_key:
        raise ConfigurationAppError(
            code="llm_missing_api_key",
            message=f"{provider_display_name(name)} API key is not configured",
            details={
                "provider": name,
                "hint": f"Set {name.upper()}_API_KEY",
            },
        )

    return OpenAICompatibleChatClient(
        provider=name,
        api_key=provider_settings.api_key,
        model=provider_settings.model,
        base_url=provider_settings.base_url,
        timeout_seconds=provider_settings.timeout_seconds,
    )
