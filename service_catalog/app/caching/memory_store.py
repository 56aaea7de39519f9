"""
In-process cache store with fixed TTL expiry.
"""

import time
from typing import Callable, Dict, Optional, Tuple

from shared.logging import get_logger


class InMemoryCacheStore:
    """Dictionary-backed store for running without Redis.

    Entries expire lazily on read once ``clock()`` passes their deadline.
    """

    strategy_label = "In-Memory"

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}
        self.logger = get_logger("catalog.cache.memory")

    async def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._entries[key] = (value, self._clock() + ttl_seconds)
        self.logger.debug("Cached value", key=key, ttl=ttl_seconds)

    async def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self._entries)
