"""
Rate Limiting Utilities for Contact Form

Prevents spam and abuse of the contact form with a process-local sliding
window keyed by client IP. Each gunicorn worker keeps its own windows, so the
limit is advisory and per instance.
"""
import threading
import time
from collections import deque
from typing import Callable, Deque, Dict

from django.conf import settings


def get_client_ip(request):
    """
    Get client IP address from request.

    Uses the first X-Forwarded-For entry set by the reverse proxy. The header
    is client-controlled, so the value is a heuristic and not a security
    boundary.
    """
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR', '')
    ip = x_forwarded_for.split(',')[0].strip()
    return ip or 'unknown'


class SlidingWindowRateLimiter:
    """
    Counts checks per client inside a trailing time window.

    Every call is recorded, including calls that end up limited, so a client
    hammering the form stays limited until it backs off.

    Usage:
        limiter = SlidingWindowRateLimiter(max_requests=5, window_seconds=600)
        if limiter.check_and_record(ip):
            ...  # reject with 429
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def check_and_record(self, client_id: str) -> bool:
        """
        Record a check for client_id and report whether it is over the limit.

        Returns:
            True when the client has exceeded max_requests inside the window
        """
        with self._lock:
            now = self._clock()
            hits = self._hits.setdefault(client_id, deque())
            hits.append(now)
            self._evict_expired(hits, now)
            limited = len(hits) > self.max_requests
            self._maybe_sweep(now)
            return limited

    def retry_after(self, client_id: str) -> int:
        """
        Seconds until client_id may check again without being limited.

        A check is allowed once at most max_requests - 1 entries remain, so
        this waits for entry ``hits[len(hits) - max_requests]`` to expire.
        """
        with self._lock:
            hits = self._hits.get(client_id)
            if not hits or len(hits) < self.max_requests:
                return 0
            now = self._clock()
            blocking = hits[len(hits) - self.max_requests]
            remaining = self.window_seconds - (now - blocking)
            return max(int(remaining + 0.999), 0)

    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._hits)

    def reset(self):
        """Forget every recorded check."""
        with self._lock:
            self._hits.clear()
            self._last_sweep = self._clock()

    def _evict_expired(self, hits: Deque[float], now: float):
        while hits and now - hits[0] >= self.window_seconds:
            hits.popleft()

    def _maybe_sweep(self, now: float):
        # Drop clients that went quiet, at most once per window
        if now - self._last_sweep < self.window_seconds:
            return
        stale = [
            client_id for client_id, hits in self._hits.items()
            if not hits or now - hits[-1] >= self.window_seconds
        ]
        for client_id in stale:
            del self._hits[client_id]
        self._last_sweep = now


contact_rate_limiter = SlidingWindowRateLimiter(
    max_requests=getattr(settings, 'CONTACT_RATE_LIMIT_MAX', 5),
    window_seconds=getattr(settings, 'CONTACT_RATE_LIMIT_WINDOW_SECONDS', 600),
)
