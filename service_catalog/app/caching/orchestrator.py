"""
Cache-aside orchestration for paginated product reads.
"""

import asyncio
import json
import time
from typing import Any, Dict, List, Optional, Set, Tuple, TYPE_CHECKING

from shared.logging import get_logger
from shared.models import RequestMetrics
from .keys import QueryIdentity, derive_key

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector
    from ..adapters.product_source import ProductSource
    from .store import CacheStore


NO_CACHE_STRATEGY = "None"

ResultSet = List[Dict[str, Any]]


class CacheAsideOrchestrator:
    """Serve product pages from the cache store, falling back to the source.

    Concurrent misses for the same key are not coalesced: every caller
    queries the source and rewrites the entry.
    """

    def __init__(
        self,
        source: "ProductSource",
        store: Optional["CacheStore"] = None,
        *,
        ttl_seconds: int = 60,
        metrics: Optional["MetricsCollector"] = None,
    ):
        if ttl_seconds < 1:
            raise ValueError("ttl_seconds must be positive")

        self.source = source
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.metrics = metrics
        self.logger = get_logger("catalog.cache")
        self._pending_writes: Set[asyncio.Task] = set()

    @property
    def cache_enabled(self) -> bool:
        return self.store is not None

    @property
    def strategy_label(self) -> str:
        if self.store is None:
            return NO_CACHE_STRATEGY
        return getattr(self.store, "strategy_label", type(self.store).__name__)

    async def get_or_populate(
        self,
        identity: QueryIdentity,
        started_at: Optional[float] = None,
    ) -> Tuple[ResultSet, RequestMetrics]:
        """Return the rows for ``identity`` and the metrics of this call.

        ``started_at`` is a ``time.perf_counter()`` stamp of when the request
        was accepted. Source failures propagate; cache failures do not.
        """
        if started_at is None:
            started_at = time.perf_counter()

        key = derive_key(identity)
        data: Optional[ResultSet] = None
        db_time_ms: Optional[float] = None

        if self.store is not None:
            data = await self._read_cache(key)

        cache_hit = data is not None
        if cache_hit:
            self.logger.info("Cache hit", key=key)
            self._count("catalog_cache_hits_total", strategy=self.strategy_label)
        else:
            self.logger.info("Database query", key=key, limit=identity.limit, offset=identity.offset)
            if self.store is not None:
                self._count("catalog_cache_misses_total", strategy=self.strategy_label)

            result = await self.source.fetch_page(identity.limit, identity.offset)
            data = result.rows
            db_time_ms = round(result.elapsed_ms, 3)
            if self.metrics:
                self.metrics.observe_histogram("catalog_source_query_seconds", result.elapsed_ms / 1000)

            if self.store is not None:
                self._schedule_populate(key, data)

        backend_ms = round((time.perf_counter() - started_at) * 1000, 3)
        metrics = RequestMetrics(
            backend_processing_time_ms=backend_ms,
            db_time_ms=db_time_ms,
            cache_hit=cache_hit,
            cache_strategy_label=self.strategy_label,
        )

        self.logger.info(
            "Request metrics",
            key=key,
            backend_ms=backend_ms,
            db_ms=db_time_ms,
            cache_hit=cache_hit,
        )
        return data, metrics

    async def _read_cache(self, key: str) -> Optional[ResultSet]:
        """Read and decode a cached page; any failure reads as a miss."""
        try:
            payload = await self.store.get(key)
        except Exception as exc:
            self.logger.error("Cache fetch error", key=key, error=str(exc))
            self._count("catalog_cache_errors_total", operation="get")
            return None

        if not payload:
            return None

        try:
            return json.loads(payload)
        except (TypeError, json.JSONDecodeError):
            self.logger.warning("Failed to deserialize cached payload", key=key)
            return None

    def _schedule_populate(self, key: str, rows: ResultSet) -> None:
        """Write ``rows`` back to the store without holding up the response."""
        try:
            payload = json.dumps(rows)
        except (TypeError, ValueError) as exc:
            self.logger.error("Result set not serializable, skipping cache set", key=key, error=str(exc))
            return

        task = asyncio.create_task(self.store.set(key, payload, self.ttl_seconds))
        self._pending_writes.add(task)
        task.add_done_callback(lambda t: self._on_populate_done(key, t))
        self.logger.debug("Cache set scheduled", key=key, ttl=self.ttl_seconds)

    def _on_populate_done(self, key: str, task: asyncio.Task) -> None:
        self._pending_writes.discard(task)
        if task.cancelled():
            self.logger.warning("Cache set cancelled", key=key)
            return

        exc = task.exception()
        if exc is not None:
            self.logger.error("Cache set error", key=key, error=str(exc))
            self._count("catalog_cache_errors_total", operation="set")
            return

        self.logger.info("Cache set", key=key, ttl=self.ttl_seconds)

    async def drain(self) -> None:
        """Wait for in-flight cache writes to settle."""
        if self._pending_writes:
            await asyncio.gather(*list(self._pending_writes), return_exceptions=True)
            # Let done-callbacks run before returning
            await asyncio.sleep(0)

    def _count(self, metric_name: str, **labels) -> None:
        if not self.metrics:
            return
        try:
            self.metrics.increment_counter(metric_name, **labels)
        except Exception as exc:  # pragma: no cover - metrics failures should never break reads
            self.logger.debug("Failed to record cache metric", metric=metric_name, error=str(exc))

    @property
    def pending_writes(self) -> int:
        return len(self._pending_writes)
