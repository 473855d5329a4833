"""
rate_limit.py — Per-user fixed-window request limiter.

A denial-of-abuse guard for the extraction endpoint, not a quota or a
billing mechanism. Each key (user id) gets a counter and a reset time;
the first hit after the reset time starts a fresh window. Stale entries
are reset when their key is next seen and purged in bulk only when the
map grows past ``max_tracked_keys``. There is no background sweep.

The store is process-local and best-effort. It is passed into the
limiter, and the limiter into the request handler, so a shared store
(Redis, a database table) can replace it without touching extraction.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from tender_questions.config import Config, config as default_config

logger = logging.getLogger(__name__)


class RateLimitExceeded(RuntimeError):
    """The caller must back off for ``retry_after`` seconds."""

    def __init__(self, key: str, limit: int, retry_after: float):
        self.key = key
        self.limit = limit
        self.retry_after = retry_after
        super().__init__(
            f"Rate limit of {limit} requests exceeded for '{key}'. "
            f"Retry after {retry_after:.0f}s."
        )


@dataclass
class _Window:
    count: int
    reset_at: float


class InMemoryCounterStore:
    """Keyed counters with a per-entry reset timestamp."""

    def __init__(self, max_tracked_keys: int = 10_000):
        self._windows: Dict[str, _Window] = {}
        self._lock = threading.Lock()
        self.max_tracked_keys = max_tracked_keys

    def hit(self, key: str, window_seconds: float, now: float) -> Tuple[int, float]:
        """Count one request for ``key``; return (count in window, reset time)."""
        with self._lock:
            window = self._windows.get(key)
            if window is None or now >= window.reset_at:
                if window is None and len(self._windows) >= self.max_tracked_keys:
                    self._purge_expired(now)
                window = _Window(count=0, reset_at=now + window_seconds)
                self._windows[key] = window
            window.count += 1
            return window.count, window.reset_at

    def __len__(self) -> int:
        return len(self._windows)

    def _purge_expired(self, now: float) -> None:
        stale = [k for k, w in self._windows.items() if now >= w.reset_at]
        for k in stale:
            del self._windows[k]
        logger.debug("Purged %d expired rate-limit windows", len(stale))


class RateLimiter:
    """
    Admit at most ``max_requests`` calls per key per window.

    Rejected calls still count toward the window, so hammering the
    endpoint does not shorten the wait.
    """

    def __init__(
        self,
        store: InMemoryCounterStore,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock

    @classmethod
    def from_config(
        cls,
        cfg: Optional[Config] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> "RateLimiter":
        rl = (cfg or default_config).rate_limit
        return cls(
            InMemoryCounterStore(max_tracked_keys=rl.max_tracked_keys),
            max_requests=rl.max_requests,
            window_seconds=rl.window_seconds,
            clock=clock,
        )

    def check(self, key: str) -> int:
        """
        Record a request for ``key``.

        Returns the number of requests left in the current window.

        Raises:
            RateLimitExceeded: the window's budget is spent.
        """
        now = self._clock()
        count, reset_at = self.store.hit(key, self.window_seconds, now)
        if count > self.max_requests:
            retry_after = max(0.0, reset_at - now)
            logger.warning(
                "Rate limit hit for '%s' (%d/%d), retry in %.0fs",
                key, count, self.max_requests, retry_after,
            )
            raise RateLimitExceeded(key, self.max_requests, retry_after)
        return self.max_requests - count
