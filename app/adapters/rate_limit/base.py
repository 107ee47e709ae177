"""Admission limiter interface and decision record."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

DEFAULT_LIMIT = 20
DEFAULT_WINDOW_MS = 60 * 1000


@dataclass(frozen=True)
class AdmissionDecision:
    """Outcome of a single admission check.

    Attributes:
        allowed: Whether the request may proceed.
        remaining: Admissions left in the current window (0 when denied).
        reset_at: Epoch milliseconds when the current window ends.
        limit: Limit that was in force for this check.
    """

    allowed: bool
    remaining: int
    reset_at: int
    limit: int

    def retry_after_seconds(self, now_ms: int) -> int:
        """Whole seconds until the window resets, never negative."""
        return max(0, math.ceil((self.reset_at - now_ms) / 1000))


class AbstractAdmissionLimiter(ABC):
    """Interface for admission limiters."""

    @abstractmethod
    def consume(
        self,
        key: str,
        *,
        limit: int | None = None,
        window_ms: int | None = None,
    ) -> AdmissionDecision:
        """Decide whether one more unit of work for ``key`` may proceed.

        Args:
            key: Caller identity, e.g. ``"gemini:<user_id>"``.
            limit: Per-call override of the admissions allowed per window.
            window_ms: Per-call override of the window length.

        Returns:
            AdmissionDecision. Denial is a normal outcome, not an exception.
        """
        raise NotImplementedError

    @abstractmethod
    def now_ms(self) -> int:
        """Current time in epoch milliseconds, as seen by this limiter."""
        raise NotImplementedError
