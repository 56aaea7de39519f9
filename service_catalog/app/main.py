"""
Catalog service: paginated product reads behind a cache-aside layer.
"""

from typing import Any, Dict, Optional

from fastapi import Query, Request
from fastapi.responses import JSONResponse

from shared.base_service import BaseService
from shared.config import ServiceConfig, get_config
from shared.errors import CatalogError

from .adapters.product_source import PostgresProductSource, ProductSource
from .caching.keys import normalize_query
from .caching.memory_store import InMemoryCacheStore
from .caching.orchestrator import CacheAsideOrchestrator
from .caching.redis_store import RedisCacheStore
from .caching.store import CacheStore

SERVICE_NAME = "catalog"
DEFAULT_PORT = 5000

_UNSET: Any = object()


def build_cache_store(config: ServiceConfig) -> Optional[CacheStore]:
    """Create the configured cache store, or ``None`` when caching is off."""
    if not config.redis_cache:
        return None
    if config.cache_backend == "memory":
        return InMemoryCacheStore()
    return RedisCacheStore(config.redis_url)


class CatalogService(BaseService):
    """Catalog service implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        *,
        source: Optional[ProductSource] = None,
        store: Optional[CacheStore] = _UNSET,
    ):
        super().__init__(SERVICE_NAME, DEFAULT_PORT, config=config)

        self.source = source or PostgresProductSource(
            self.config.postgres_dsn,
            command_timeout=self.config.source_command_timeout,
        )
        self.store = build_cache_store(self.config) if store is _UNSET else store
        self.orchestrator = CacheAsideOrchestrator(
            self.source,
            self.store,
            ttl_seconds=self.config.cache_ttl_seconds,
            metrics=self.metrics,
        )

        self._setup_catalog_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.catalog_service = self

    def _setup_catalog_routes(self):
        """Set up catalog-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": SERVICE_NAME,
                "message": "Catalog cache - product pages",
                "version": "1.0.0",
                "cache_strategy": self.orchestrator.strategy_label,
            }

        @self.app.get("/api/products")
        @self.app.get("/products")
        async def list_products(
            request: Request,
            page: Optional[str] = Query(None, description="1-based page number"),
            limit: Optional[str] = Query(None, description="Items per page"),
        ):
            """Return one page of product aggregates with request metrics."""
            identity = normalize_query(page, limit, default_limit=self.config.default_page_limit)
            started_at = getattr(request.state, "started_at", None)

            try:
                data, metrics = await self.orchestrator.get_or_populate(identity, started_at=started_at)
            except CatalogError as e:
                self.logger.warning("Product page failed", page=identity.page, limit=identity.limit)
                return self.error_response(e)
            except Exception as e:
                self.logger.error("Product page failed", error=str(e), page=identity.page, limit=identity.limit, exc_info=True)
                self.metrics.record_error("INTERNAL_ERROR")
                return JSONResponse(status_code=500, content={"success": False, "error": str(e)})

            return {
                "success": True,
                "data": data,
                "metrics": metrics.to_dict(),
            }

    def _describe_config(self) -> Dict[str, Any]:
        return {
            "redisCache": "on" if self.orchestrator.cache_enabled else "off",
            "cacheBackend": self.config.cache_backend if self.orchestrator.cache_enabled else None,
            "cacheTtlSeconds": self.config.cache_ttl_seconds,
        }

    async def _check_dependencies(self) -> Dict[str, str]:
        dependencies = {}

        if self.store is None:
            dependencies["cache"] = "disabled"
        else:
            dependencies["cache"] = "ok" if await self.store.ping() else "error"

        ping = getattr(self.source, "ping", None)
        if ping is not None:
            dependencies["source"] = "ok" if await ping() else "error"

        return dependencies

    async def start(self):
        """Open Redis and PostgreSQL connections."""
        if hasattr(self.store, "start"):
            await self.store.start()

        if hasattr(self.source, "start"):
            try:
                await self.source.start()
            except CatalogError as e:
                # fetch_page reconnects lazily
                self.logger.warning("Source not available at startup", error=e.message)

        self.logger.info(
            "Catalog service started",
            cache=self.orchestrator.strategy_label,
            ttl=self.config.cache_ttl_seconds,
        )

    async def stop(self):
        """Flush pending cache writes and close connections."""
        await self.orchestrator.drain()

        if hasattr(self.store, "stop"):
            await self.store.stop()
        if hasattr(self.source, "stop"):
            await self.source.stop()

        self.logger.info("Catalog service stopped")


def create_app(config: Optional[ServiceConfig] = None):
    """Create catalog service application."""
    service = CatalogService(config)
    return service.app


def main():
    """Console entry point."""
    service = CatalogService(get_config(SERVICE_NAME, DEFAULT_PORT))
    service.run()


if __name__ == "__main__":
    main()
