"""Unit tests for the in-memory fixed-window admission limiter."""

import threading
from unittest.mock import Mock

import pytest

from app.adapters.rate_limit.base import AdmissionDecision
from app.adapters.rate_limit.in_memory import InMemoryFixedWindowLimiter
from tests.fakes import FakeClock


def test_defaults_match_chat_quota() -> None:
    limiter = InMemoryFixedWindowLimiter()

    assert limiter.limit == 20
    assert limiter.window_ms == 60_000


def test_first_calls_count_down_to_zero() -> None:
    clock = FakeClock(5_000)
    limiter = InMemoryFixedWindowLimiter(limit=4, window_ms=60_000, clock=clock)

    remaining = [limiter.consume("k").remaining for _ in range(4)]

    assert remaining == [3, 2, 1, 0]


def test_denied_after_limit_keeps_reset_at() -> None:
    clock = FakeClock(1_000)
    limiter = InMemoryFixedWindowLimiter(limit=2, window_ms=60_000, clock=clock)

    first = limiter.consume("k")
    clock.advance_to(30_000)
    limiter.consume("k")

    clock.advance_to(45_000)
    blocked = limiter.consume("k")

    assert blocked.allowed is False
    assert blocked.remaining == 0
    assert blocked.reset_at == first.reset_at == 61_000


def test_denial_does_not_consume() -> None:
    clock = FakeClock(0)
    limiter = InMemoryFixedWindowLimiter(limit=1, window_ms=1_000, clock=clock)

    limiter.consume("k")
    for _ in range(5):
        assert limiter.consume("k").allowed is False

    clock.advance_to(1_000)
    fresh = limiter.consume("k")
    assert fresh.allowed is True
    assert fresh.remaining == 0


def test_two_request_window_scenario() -> None:
    clock = FakeClock(0)
    limiter = InMemoryFixedWindowLimiter(limit=2, window_ms=1_000, clock=clock)

    assert limiter.consume("k") == AdmissionDecision(True, 1, 1_000, 2)

    clock.advance_to(10)
    assert limiter.consume("k") == AdmissionDecision(True, 0, 1_000, 2)

    clock.advance_to(20)
    assert limiter.consume("k") == AdmissionDecision(False, 0, 1_000, 2)

    clock.advance_to(1_001)
    assert limiter.consume("k") == AdmissionDecision(True, 1, 2_001, 2)


def test_window_expires_exactly_at_reset_at() -> None:
    clock = FakeClock(0)
    limiter = InMemoryFixedWindowLimiter(limit=1, window_ms=1_000, clock=clock)

    limiter.consume("k")
    clock.advance_to(999)
    assert limiter.consume("k").allowed is False

    clock.advance_to(1_000)
    renewed = limiter.consume("k")
    assert renewed.allowed is True
    assert renewed.reset_at == 2_000


def test_window_is_anchored_at_first_request() -> None:
    clock = FakeClock(0)
    limiter = InMemoryFixedWindowLimiter(limit=2, window_ms=1_000, clock=clock)

    clock.advance_to(900)
    limiter.consume("k")
    limiter.consume("k")

    # Still inside the window opened at t=900
    clock.advance_to(1_500)
    assert limiter.consume("k").allowed is False


def test_burst_across_boundary_admits_twice_the_limit() -> None:
    clock = FakeClock(0)
    limiter = InMemoryFixedWindowLimiter(limit=3, window_ms=1_000, clock=clock)

    limiter.consume("k")
    clock.advance_to(990)
    assert [limiter.consume("k").allowed for _ in range(2)] == [True, True]

    clock.advance_to(1_000)
    assert [limiter.consume("k").allowed for _ in range(3)] == [True, True, True]
    assert limiter.consume("k").allowed is False


def test_isolated_by_key() -> None:
    clock = FakeClock(0)
    limiter = InMemoryFixedWindowLimiter(limit=1, window_ms=60_000, clock=clock)

    assert limiter.consume("a").allowed is True
    assert limiter.consume("a").allowed is False

    b = limiter.consume("b")
    assert b.allowed is True
    assert b.remaining == 0


def test_provider_namespaces_do_not_share_quota() -> None:
    limiter = InMemoryFixedWindowLimiter(limit=1, window_ms=60_000, clock=FakeClock(0))

    assert limiter.consume("gemini:user_1").allowed is True
    assert limiter.consume("perplexity:user_1").allowed is True
    assert limiter.consume("gemini:user_1").allowed is False


def test_per_call_overrides() -> None:
    clock = FakeClock(0)
    limiter = InMemoryFixedWindowLimiter(clock=clock)

    decision = limiter.consume("k", limit=2, window_ms=500)
    assert decision.remaining == 1
    assert decision.limit == 2
    assert decision.reset_at == 500

    limiter.consume("k", limit=2, window_ms=500)
    assert limiter.consume("k", limit=2, window_ms=500).allowed is False


def test_empty_key_is_a_normal_key() -> None:
    limiter = InMemoryFixedWindowLimiter(limit=1, window_ms=1_000, clock=FakeClock(0))

    assert limiter.consume("").allowed is True
    assert limiter.consume("").allowed is False


def test_uses_injected_clock_only() -> None:
    clock = Mock(return_value=10_000)
    limiter = InMemoryFixedWindowLimiter(limit=1, window_ms=1_000, clock=clock)

    assert limiter.consume("k").reset_at == 11_000
    assert limiter.now_ms() == 10_000


@pytest.mark.parametrize(
    ("now_ms", "expected"),
    [(0, 1), (1, 1), (999, 1), (1_000, 0), (5_000, 0)],
)
def test_retry_after_seconds(now_ms: int, expected: int) -> None:
    decision = AdmissionDecision(allowed=False, remaining=0, reset_at=1_000, limit=1)

    assert decision.retry_after_seconds(now_ms) == expected


def test_retry_after_rounds_up_partial_seconds() -> None:
    decision = AdmissionDecision(allowed=False, remaining=0, reset_at=60_000, limit=1)

    assert decision.retry_after_seconds(20) == 60


@pytest.mark.parametrize(
    "kwargs",
    [
        {"limit": 0},
        {"window_ms": 0},
        {"limit": -1},
        {"sweep_interval_ms": -1},
    ],
)
def test_invalid_constructor_args(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        InMemoryFixedWindowLimiter(**kwargs)


def test_invalid_overrides() -> None:
    limiter = InMemoryFixedWindowLimiter()

    with pytest.raises(ValueError):
        limiter.consume("k", limit=0)

    with pytest.raises(ValueError):
        limiter.consume("k", window_ms=0)


def test_concurrent_consumers_never_exceed_limit() -> None:
    limiter = InMemoryFixedWindowLimiter(limit=50, window_ms=60_000, clock=FakeClock(0))
    allowed: list[bool] = []
    allowed_lock = threading.Lock()
    barrier = threading.Barrier(8)

    def worker() -> None:
        barrier.wait()
        for _ in range(25):
            decision = limiter.consume("shared")
            with allowed_lock:
                allowed.append(decision.allowed)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(allowed) == 200
    assert allowed.count(True) == 50


class TestSweep:
    def test_sweep_removes_only_expired_buckets(self) -> None:
        clock = FakeClock(0)
        limiter = InMemoryFixedWindowLimiter(limit=5, window_ms=1_000, clock=clock)

        limiter.consume("old")
        clock.advance_to(600)
        limiter.consume("new")

        clock.advance_to(1_000)
        assert limiter.sweep() == 1
        assert limiter.bucket_count() == 1

    def test_sweep_respects_grace(self) -> None:
        clock = FakeClock(0)
        limiter = InMemoryFixedWindowLimiter(limit=5, window_ms=1_000, clock=clock)
        limiter.consume("k")

        clock.advance_to(1_200)
        assert limiter.sweep(grace_ms=500) == 0

        clock.advance_to(1_500)
        assert limiter.sweep(grace_ms=500) == 1

    def test_sweep_does_not_change_decisions(self) -> None:
        clock = FakeClock(0)
        swept = InMemoryFixedWindowLimiter(limit=2, window_ms=1_000, clock=clock)
        kept = InMemoryFixedWindowLimiter(limit=2, window_ms=1_000, clock=clock)

        for limiter in (swept, kept):
            limiter.consume("k")
            limiter.consume("k")

        clock.advance_to(1_500)
        swept.sweep()

        assert swept.consume("k") == kept.consume("k")

    def test_sweep_rejects_negative_grace(self) -> None:
        with pytest.raises(ValueError):
            InMemoryFixedWindowLimiter().sweep(grace_ms=-1)

    def test_lazy_sweep_runs_on_interval(self) -> None:
        clock = FakeClock(0)
        limiter = InMemoryFixedWindowLimiter(
            limit=5, window_ms=100, sweep_interval_ms=1_000, clock=clock
        )
        for key in ("a", "b", "c"):
            limiter.consume(key)

        clock.advance_to(500)
        limiter.consume("d")
        assert limiter.bucket_count() == 4

        clock.advance_to(1_000)
        limiter.consume("e")
        assert limiter.bucket_count() == 1

    def test_lazy_sweep_disabled_by_default(self) -> None:
        clock = FakeClock(0)
        limiter = InMemoryFixedWindowLimiter(limit=5, window_ms=100, clock=clock)
        for key in ("a", "b", "c"):
            limiter.consume(key)

        clock.advance_to(10_000_000)
        limiter.consume("d")
        assert limiter.bucket_count() == 4

    def test_reset_clears_all_state(self) -> None:
        limiter = InMemoryFixedWindowLimiter(limit=1, window_ms=1_000, clock=FakeClock(0))
        limiter.consume("k")

        limiter.reset()

        assert limiter.bucket_count() == 0
        assert limiter.consume("k").allowed is True
