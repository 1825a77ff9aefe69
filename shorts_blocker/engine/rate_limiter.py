"""
Action Rate Limiter
===================

Thread-safe cooldown table for side-effecting actions.

Each action key remembers when it last fired. A key is READY when at least
``cooldown_ms`` have passed since then, and in COOLDOWN otherwise. Keys
that never fired read as fired at time 0.

Usage:
    limiter = RateLimiter(cooldown_ms=1500)
    if limiter.should_perform_action("content_detected"):
        ...  # perform the action
"""

import threading
import time
from typing import Callable, Optional

from shorts_blocker.utils.logger import get_logger

logger = get_logger(__name__)

# Default minimum interval between two actions for the same key (ms).
DEFAULT_COOLDOWN_MS = 1500


def monotonic_ms() -> int:
    """Monotonic clock in milliseconds."""
    return int(time.monotonic() * 1000)


class RateLimiter:
    """
    Cooldown gate keyed by action name.

    The table is read on the event path and may be touched from the
    startup path at the same time, so every access goes through a lock.
    Entries are overwritten, never removed.
    """

    def __init__(
        self,
        cooldown_ms: int = DEFAULT_COOLDOWN_MS,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        """
        Initialize the rate limiter.

        Args:
            cooldown_ms: Minimum interval between two actions for one key.
            clock: Millisecond clock. Defaults to ``monotonic_ms``.
        """
        if cooldown_ms < 0:
            raise ValueError("cooldown_ms must be non-negative")

        self._cooldown_ms = cooldown_ms
        self._clock = clock or monotonic_ms
        self._last_fired: dict[str, int] = {}
        self._lock = threading.Lock()

    @property
    def cooldown_ms(self) -> int:
        return self._cooldown_ms

    def should_perform_action(self, key: str) -> bool:
        """
        Check the cooldown for ``key`` and claim it when ready.

        Returns:
            True if the action may run now (timestamp recorded),
            False if the key is still cooling down (nothing recorded).
        """
        with self._lock:
            now = self._clock()
            last = self._last_fired.get(key)
            # A key that never fired is always ready
            elapsed = now - last if last is not None else None
            if elapsed is not None and elapsed < self._cooldown_ms:
                logger.debug("Action cooldown active", key=key, elapsed_ms=elapsed)
                return False
            self._last_fired[key] = now

        logger.debug("Action allowed", key=key, cooldown_ms=self._cooldown_ms)
        return True

    def last_fired(self, key: str) -> int:
        """Timestamp (ms) of the last allowed action for ``key``, 0 if never."""
        with self._lock:
            return self._last_fired.get(key, 0)

    def reset(self) -> None:
        """Clear all timestamps (useful in tests)."""
        with self._lock:
            self._last_fired.clear()
