"""
Cache store contract used by the cache-aside orchestrator.
"""

from typing import Optional, Protocol


class CacheStore(Protocol):
    """Single-key get / set-with-expiry store.

    Implementations raise ``CacheUnavailableError`` when the backing store
    cannot be reached.
    """

    strategy_label: str

    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        ...

    async def ping(self) -> bool:
        ...
