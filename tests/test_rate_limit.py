"""
test_rate_limit.py — Fixed-window limiter with an injected clock.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from tender_questions.config import Config, RateLimitConfig
from tender_questions.rate_limit import InMemoryCounterStore, RateLimiter, RateLimitExceeded


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _limiter(max_requests=2, window=3600.0, clock=None, store=None):
    return RateLimiter(
        store if store is not None else InMemoryCounterStore(),
        max_requests=max_requests,
        window_seconds=window,
        clock=clock or FakeClock(),
    )


def test_admits_up_to_limit_then_rejects():
    clock = FakeClock(100.0)
    limiter = _limiter(clock=clock)
    assert limiter.check("user-1") == 1
    assert limiter.check("user-1") == 0

    clock.now = 1900.0
    with pytest.raises(RateLimitExceeded) as excinfo:
        limiter.check("user-1")
    assert excinfo.value.retry_after == pytest.approx(1800.0)
    assert excinfo.value.key == "user-1"
    assert excinfo.value.limit == 2


def test_window_resets_after_expiry():
    clock = FakeClock(0.0)
    limiter = _limiter(max_requests=1, clock=clock)
    limiter.check("user-1")
    with pytest.raises(RateLimitExceeded):
        limiter.check("user-1")

    clock.now = 3600.0
    assert limiter.check("user-1") == 0


def test_keys_are_independent():
    limiter = _limiter(max_requests=1)
    limiter.check("user-1")
    assert limiter.check("user-2") == 0
    with pytest.raises(RateLimitExceeded):
        limiter.check("user-1")


def test_stale_entries_purged_lazily():
    clock = FakeClock(0.0)
    store = InMemoryCounterStore(max_tracked_keys=2)
    limiter = _limiter(window=10.0, clock=clock, store=store)
    limiter.check("a")
    limiter.check("b")
    assert len(store) == 2

    clock.now = 20.0
    limiter.check("c")
    assert len(store) == 1


def test_live_entries_survive_purge():
    clock = FakeClock(0.0)
    store = InMemoryCounterStore(max_tracked_keys=2)
    limiter = _limiter(window=10.0, clock=clock, store=store)
    limiter.check("a")
    clock.now = 5.0
    limiter.check("b")

    clock.now = 12.0
    limiter.check("c")
    assert len(store) == 2
    # "b" is still inside its window
    assert limiter.check("b") == 0


def test_from_config():
    cfg = Config(rate_limit=RateLimitConfig(max_requests=3, window_seconds=60))
    limiter = RateLimiter.from_config(cfg, clock=FakeClock())
    assert limiter.max_requests == 3
    assert limiter.window_seconds == 60
    assert [limiter.check("u") for _ in range(3)] == [2, 1, 0]


def test_invalid_rate_limit_config_rejected():
    with pytest.raises(ValueError):
        Config(rate_limit=RateLimitConfig(max_requests=0))
    with pytest.raises(ValueError):
        Config(rate_limit=RateLimitConfig(window_seconds=0))
