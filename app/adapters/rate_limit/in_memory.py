"""In-memory fixed-window admission limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: the read-check-increment sequence runs under one lock.
- The window is anchored at the first request for a key, not at wall-clock
  boundaries, so up to ``2 * limit`` requests can be admitted around a reset.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

from app.adapters.rate_limit.base import (
    DEFAULT_LIMIT,
    DEFAULT_WINDOW_MS,
    AbstractAdmissionLimiter,
    AdmissionDecision,
)

logger = logging.getLogger(__name__)


def _epoch_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class _Bucket:
    count: int
    reset_at: int


class InMemoryFixedWindowLimiter(AbstractAdmissionLimiter):
    """Counts admissions per key against a single reset instant.

    A bucket is created on the first request for a key and replaced (never
    merged) once its ``reset_at`` has passed. Expired buckets behave exactly
    like missing ones, so the optional periodic sweep only reclaims memory.
    """

    def __init__(
        self,
        *,
        limit: int = DEFAULT_LIMIT,
        window_ms: int = DEFAULT_WINDOW_MS,
        sweep_interval_ms: int = 0,
        clock: Callable[[], int] = _epoch_ms,
    ) -> None:
        """Initialize the limiter.

        Args:
            limit: Default admissions per window.
            window_ms: Default window length in milliseconds.
            sweep_interval_ms: Minimum gap between lazy sweeps of expired
                buckets; 0 disables them.
            clock: Time source returning epoch milliseconds.

        Raises:
            ValueError: If limit, window_ms or sweep_interval_ms are invalid.
        """
        _check_positive("limit", limit)
        _check_positive("window_ms", window_ms)
        if sweep_interval_ms < 0:
            raise ValueError("sweep_interval_ms must be >= 0")

        self._limit = limit
        self._window_ms = window_ms
        self._sweep_interval_ms = sweep_interval_ms
        self._clock = clock
        self._lock = threading.Lock()
        self._buckets: dict[str, _Bucket] = {}
        self._next_sweep_at = clock() + sweep_interval_ms

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_ms(self) -> int:
        return self._window_ms

    def now_ms(self) -> int:
        return self._clock()

    def consume(
        self,
        key: str,
        *,
        limit: int | None = None,
        window_ms: int | None = None,
    ) -> AdmissionDecision:
        limit = self._limit if limit is None else limit
        window_ms = self._window_ms if window_ms is None else window_ms
        _check_positive("limit", limit)
        _check_positive("window_ms", window_ms)

        with self._lock:
            now = self._clock()
            if self._sweep_interval_ms and now >= self._next_sweep_at:
                self._sweep_locked(now, grace_ms=0)
                self._next_sweep_at = now + self._sweep_interval_ms

            bucket = self._buckets.get(key)

            if bucket is None or bucket.reset_at <= now:
                bucket = _Bucket(count=1, reset_at=now + window_ms)
                self._buckets[key] = bucket
                return AdmissionDecision(
                    allowed=True,
                    remaining=limit - 1,
                    reset_at=bucket.reset_at,
                    limit=limit,
                )

            if bucket.count >= limit:
                return AdmissionDecision(
                    allowed=False,
                    remaining=0,
                    reset_at=bucket.reset_at,
                    limit=limit,
                )

            bucket.count += 1
            return AdmissionDecision(
                allowed=True,
                remaining=limit - bucket.count,
                reset_at=bucket.reset_at,
                limit=limit,
            )

    def sweep(self, *, grace_ms: int = 0) -> int:
        """Drop buckets whose window ended at least ``grace_ms`` ago.

        Returns:
            Number of buckets removed.
        """
        if grace_ms < 0:
            raise ValueError("grace_ms must be >= 0")
        with self._lock:
            return self._sweep_locked(self._clock(), grace_ms=grace_ms)

    def bucket_count(self) -> int:
        with self._lock:
            return len(self._buckets)

    def reset(self) -> None:
        with self._lock:
            self._buckets.clear()

    def _sweep_locked(self, now: int, *, grace_ms: int) -> int:
        expired = [
            key
            for key, bucket in self._buckets.items()
            if bucket.reset_at + grace_ms <= now
        ]
        for key in expired:
            del self._buckets[key]

        if expired:
            logger.debug(
                "rate_limit.swept",
                extra={"removed": len(expired), "tracked": len(self._buckets)},
            )
        return len(expired)


def _check_positive(name: str, value: int) -> None:
    if value < 1:
        raise ValueError(f"{name} must be >= 1")
