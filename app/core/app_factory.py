"""Application factory for the FastAPI app."""

from __future__ import annotations

from fastapi import FastAPI

from app.api.routes import chat_router, health_router
from app.core.config import settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware
from app.core.openapi import apply_openapi_customizations
from app.core.rate_limit import build_admission_limiter
from app.services.knowledge_base import KnowledgeBase


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Each app gets its own admission limiter on ``app.state``, so separate apps
    (and separate tests) never share quota state.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Vanguard Chat API",
        description=(
            "Chat backend for the Vanguard-IA site and client portal. Relays "
            "messages to Groq, Gemini and Perplexity. Provider endpoints are "
            "limited per user with a fixed-window quota and answer 429 with "
            "Retry-After when the quota is spent."
        ),
        version="0.1.0",
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )

    app.state.admission_limiter = build_admission_limiter(settings.app)
    app.state.knowledge_base = KnowledgeBase.from_settings(settings.kb)

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(chat_router, prefix="/v1")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
