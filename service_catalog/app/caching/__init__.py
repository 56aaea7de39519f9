"""
Catalog caching package.

Read-through caching of product pages. Entries are only ever written on a
miss and only ever removed by the store's TTL expiry.
"""

from .keys import QueryIdentity, derive_key, normalize_query
from .memory_store import InMemoryCacheStore
from .orchestrator import CacheAsideOrchestrator
from .redis_store import RedisCacheStore

__all__ = [
    "CacheAsideOrchestrator",
    "InMemoryCacheStore",
    "QueryIdentity",
    "RedisCacheStore",
    "derive_key",
    "normalize_query",
]
