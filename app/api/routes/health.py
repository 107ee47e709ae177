from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request) -> dict:
    """Liveness check; also reports how many limiter buckets are in memory."""

    limiter = getattr(request.app.state, "admission_limiter", None)
    tracked = limiter.bucket_count() if limiter is not None else 0
    return {"status": "ok", "rate_limit_buckets": tracked}
