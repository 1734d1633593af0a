import time
from collections import deque
from threading import Lock
from typing import Callable, Dict, Optional


class SlidingWindowRateLimiter:
    """
    Per-key sliding window: at most `max_attempts` in `window_seconds`.
    Going over the limit blocks the key for `block_seconds`, after which
    its history starts fresh.
    """

    def __init__(
        self,
        *,
        max_attempts: int,
        window_seconds: float,
        block_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.block_seconds = window_seconds if block_seconds is None else block_seconds
        self._clock = clock
        self._attempts: Dict[object, deque] = {}
        self._blocked_until: Dict[object, float] = {}
        self._lock = Lock()

    def check(self, key: object) -> bool:
        """
        Record an attempt for `key`; False means the caller is over the limit.
        """
        with self._lock:
            now = self._clock()

            blocked_until = self._blocked_until.get(key)
            if blocked_until is not None:
                if now < blocked_until:
                    return False
                del self._blocked_until[key]
                self._attempts.pop(key, None)

            attempts = self._attempts.setdefault(key, deque())
            while attempts and now - attempts[0] >= self.window_seconds:
                attempts.popleft()

            if len(attempts) >= self.max_attempts:
                self._blocked_until[key] = now + self.block_seconds
                return False

            attempts.append(now)
            return True

    def remaining(self, key: object) -> int:
        with self._lock:
            now = self._clock()
            blocked_until = self._blocked_until.get(key)
            if blocked_until is not None and now < blocked_until:
                return 0
            attempts = self._attempts.get(key) or ()
            recent = [t for t in attempts if now - t < self.window_seconds]
            return max(0, self.max_attempts - len(recent))

    def reset(self) -> None:
        with self._lock:
            self._attempts.clear()
            self._blocked_until.clear()
