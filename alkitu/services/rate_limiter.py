"""
Alkitu Site - Form Rate Limiter
Fixed-window request counter keyed by client identifier (usually the IP).

Process-local: each worker keeps its own counters and they are lost on
restart. The global Flask-Limiter guard in the app factory is separate.
"""
import logging
import math
import random
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from flask import current_app

logger = logging.getLogger(__name__)

CLEANUP_PROBABILITY = 0.01


@dataclass
class RateLimitResult:
    allowed: bool
    count: int
    limit: int
    reset_in: float     # seconds until the window closes
    reset_time: float   # epoch seconds

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.count)

    @property
    def retry_after(self) -> int:
        return max(0, math.ceil(self.reset_in))

    def headers(self, include_retry_after: bool = False) -> Dict[str, str]:
        headers = {
            'X-RateLimit-Limit': str(self.limit),
            'X-RateLimit-Remaining': str(self.remaining),
            'X-RateLimit-Reset': datetime.fromtimestamp(self.reset_time, tz=timezone.utc).isoformat(),
        }
        if include_retry_after:
            headers['Retry-After'] = str(self.retry_after)
        return headers


class FixedWindowRateLimiter:
    """
    Counts requests per identifier in fixed windows.

    The first request of a window stores count=1 and reset_time=now+window;
    each later request increments the count and is allowed while
    count <= max_requests. Roughly 1% of checks sweep expired entries.
    """

    def __init__(self, max_requests: int = 3, window_seconds: float = 3600,
                 name: str = 'default', clock: Callable[[], float] = time.time,
                 rng: Callable[[], float] = random.random):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.name = name
        self._clock = clock
        self._rng = rng
        self._store: Dict[str, dict] = {}
        self._lock = threading.Lock()

    def check(self, identifier: str) -> RateLimitResult:
        """Record a request and report whether it is allowed"""
        now = self._clock()
        with self._lock:
            if self._rng() < CLEANUP_PROBABILITY:
                self._cleanup(now)

            entry = self._store.get(identifier)
            if entry is None or now >= entry['reset_time']:
                reset_time = now + self.window_seconds
                self._store[identifier] = {'count': 1, 'reset_time': reset_time}
                return RateLimitResult(True, 1, self.max_requests, self.window_seconds, reset_time)

            entry['count'] += 1
            allowed = entry['count'] <= self.max_requests
            if not allowed:
                logger.info(f"Rate limit '{self.name}' exceeded for {identifier} ({entry['count']}/{self.max_requests})")
            return RateLimitResult(allowed, entry['count'], self.max_requests,
                                   entry['reset_time'] - now, entry['reset_time'])

    def status(self, identifier: str) -> Optional[RateLimitResult]:
        """Current state without counting a request; None when no window is open"""
        now = self._clock()
        with self._lock:
            entry = self._store.get(identifier)
            if entry is None or now >= entry['reset_time']:
                return None
            return RateLimitResult(entry['count'] < self.max_requests, entry['count'],
                                   self.max_requests, entry['reset_time'] - now, entry['reset_time'])

    def reset(self, identifier: str):
        with self._lock:
            self._store.pop(identifier, None)

    def clear(self):
        with self._lock:
            self._store.clear()

    def _cleanup(self, now: float):
        expired = [key for key, entry in self._store.items() if now >= entry['reset_time']]
        for key in expired:
            del self._store[key]

    def __len__(self):
        return len(self._store)


def init_form_limiters(app):
    """One namespaced limiter per public form, stored on the app"""
    window = app.config.get('FORM_RATE_LIMIT_WINDOW_SECONDS', 3600)
    app.extensions['form_limiters'] = {
        'contact': FixedWindowRateLimiter(app.config.get('CONTACT_RATE_LIMIT', 3), window, name='contact'),
        'newsletter': FixedWindowRateLimiter(app.config.get('NEWSLETTER_RATE_LIMIT', 3), window, name='newsletter'),
    }


def form_limiter(name: str) -> FixedWindowRateLimiter:
    return current_app.extensions['form_limiters'][name]
