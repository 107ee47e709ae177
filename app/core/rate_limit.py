"""Admission limiting for the HTTP layer.

The limiter instance is owned by the application (``app.state``), created
once in ``create_app`` and looked up per request. Routes call
``enforce_admission`` with an already-namespaced key such as
``"perplexity:<user_id>"``; a denial becomes HTTP 429 with ``Retry-After``.
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import HTTPException, Request, status

from app.adapters.rate_limit.base import AbstractAdmissionLimiter
from app.adapters.rate_limit.in_memory import InMemoryFixedWindowLimiter
from app.core.config import AppSettings, settings

logger = logging.getLogger(__name__)

RATE_LIMIT_DETAIL = "Rate limit exceeded. Intenta nuevamente más tarde."


def build_admission_limiter(app_settings: AppSettings | None = None) -> InMemoryFixedWindowLimiter:
    """Construct the limiter from configuration."""
    cfg = app_settings or settings.app
    return InMemoryFixedWindowLimiter(
        limit=cfg.rate_limit_requests,
        window_ms=cfg.rate_limit_window_ms,
        sweep_interval_ms=cfg.rate_limit_sweep_interval_ms,
    )


def get_admission_limiter(request: Request) -> AbstractAdmissionLimiter:
    """Return the limiter attached to the running application."""
    return request.app.state.admission_limiter


def chat_rate_limit_key(provider: str, user_id: str) -> str:
    return f"{provider}:{user_id}"


def _hash_limiter_key(key: str) -> str:
    """Hash the limiter key for logging without exposing user ids."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def enforce_admission(request: Request, key: str) -> None:
    """Consume one admission for ``key`` or raise HTTP 429.

    Args:
        request: Current request, used to reach the app-owned limiter.
        key: Namespaced limiter key.

    Raises:
        HTTPException: 429 Too Many Requests with a Retry-After header.
    """

    if not settings.app.rate_limit_enabled:
        return

    limiter = get_admission_limiter(request)
    decision = limiter.consume(key)
    key_hash = _hash_limiter_key(key)

    if decision.allowed:
        logger.info(
            "rate_limit.allowed",
            extra={
                "key_hash": key_hash,
                "limit": decision.limit,
                "remaining": decision.remaining,
            },
        )
        return

    retry_after = decision.retry_after_seconds(limiter.now_ms())
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": key_hash,
            "limit": decision.limit,
            "reset_at_ms": decision.reset_at,
            "retry_after_s": retry_after,
        },
    )

    headers = {"Retry-After": str(retry_after)}
    if settings.app.rate_limit_include_headers:
        headers["X-RateLimit-Limit"] = str(decision.limit)
        headers["X-RateLimit-Remaining"] = str(decision.remaining)
        headers["X-RateLimit-Reset"] = str(decision.reset_at // 1000)

    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail=RATE_LIMIT_DETAIL,
        headers=headers,
    )
