# core/utils/rate_limit.py

import time
import threading
from collections import defaultdict, deque
from typing import Callable, Deque, Dict

class RateLimiter:
    def __init__(self,
                 max_requests: int = 100,
                 window_seconds: float = 60.0,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize a sliding-window rate limiter.

        Args:
            max_requests: Requests allowed per key within one window
            window_seconds: Length of the window in seconds
            clock: Monotonic time source, replaceable in tests
        """
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()

    def _prune(self, hits: Deque[float], now: float) -> None:
        while hits and now - hits[0] >= self.window_seconds:
            hits.popleft()

    def allow(self, key: str) -> bool:
        """Record a request for key and return whether it is within the limit"""
        now = self.clock()
        with self._lock:
            hits = self._hits[key]
            self._prune(hits, now)
            if len(hits) >= self.max_requests:
                return False
            hits.append(now)
            return True

    def retry_after(self, key: str) -> float:
        """Seconds until key may make another request"""
        now = self.clock()
        with self._lock:
            hits = self._hits[key]
            self._prune(hits, now)
            if len(hits) < self.max_requests:
                return 0.0
            return max(self.window_seconds - (now - hits[0]), 0.0)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
