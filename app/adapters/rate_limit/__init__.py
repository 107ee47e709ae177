"""Admission limiting adapters.

Routes depend on ``AbstractAdmissionLimiter`` only, so the in-memory store can
be replaced by a shared one (e.g. Redis) without touching the HTTP layer.
"""

from app.adapters.rate_limit.base import AbstractAdmissionLimiter, AdmissionDecision
from app.adapters.rate_limit.in_memory import InMemoryFixedWindowLimiter

__all__ = [
    "AbstractAdmissionLimiter",
    "AdmissionDecision",
    "InMemoryFixedWindowLimiter",
]
