"""
PostgreSQL product source for the catalog service.
"""

import asyncio
import time
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Protocol

import asyncpg

from shared.logging import get_logger
from shared.errors import SourceUnavailableError
from shared.models import SourceResult


PRODUCT_PAGE_QUERY = """
    SELECT
        p.id,
        p.name,
        c.name AS category,
        COUNT(oi.id) AS total_orders,
        COALESCE(AVG(r.rating), 0) AS avg_rating,
        COALESCE(i.stock, 0) AS stock
    FROM products p
    LEFT JOIN categories c ON p.category_id = c.id
    LEFT JOIN order_items oi ON oi.product_id = p.id
    LEFT JOIN reviews r ON r.product_id = p.id
    LEFT JOIN inventory i ON i.product_id = p.id
    GROUP BY p.id, c.name, i.stock
    ORDER BY p.id
    LIMIT $1 OFFSET $2
"""


class ProductSource(Protocol):
    """Idempotent paginated read against the authoritative store."""

    async def fetch_page(self, limit: int, offset: int) -> SourceResult:
        ...


def _row_to_dict(record: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert a database record into JSON-safe primitives."""
    row = dict(record)
    if isinstance(row.get("avg_rating"), Decimal):
        row["avg_rating"] = float(row["avg_rating"])
    if row.get("total_orders") is not None:
        row["total_orders"] = int(row["total_orders"])
    if row.get("stock") is not None:
        row["stock"] = int(row["stock"])
    return row


class PostgresProductSource:
    """Product aggregate reads over an asyncpg pool."""

    def __init__(self, dsn: str, command_timeout: float = 30.0, pool: Optional[asyncpg.Pool] = None):
        self.dsn = dsn
        self.command_timeout = command_timeout
        self.logger = get_logger("catalog.source.postgres")
        self.pool: Optional[asyncpg.Pool] = pool

    async def start(self):
        """Create the connection pool."""
        if self.pool is not None:
            return
        try:
            self.pool = await asyncpg.create_pool(
                self.dsn,
                min_size=2,
                max_size=10,
                command_timeout=self.command_timeout
            )
            self.logger.info("PostgreSQL source started")
        except (asyncpg.PostgresError, OSError) as e:
            self.logger.error("Failed to start PostgreSQL source", error=str(e))
            raise SourceUnavailableError(str(e)) from e

    async def stop(self):
        """Close the connection pool."""
        if self.pool is not None:
            await self.pool.close()
            self.pool = None
            self.logger.info("PostgreSQL source stopped")

    async def fetch_page(self, limit: int, offset: int) -> SourceResult:
        """Run the product aggregate for one page."""
        if self.pool is None:
            await self.start()

        start = time.perf_counter()
        try:
            async with self.pool.acquire() as conn:
                records = await conn.fetch(PRODUCT_PAGE_QUERY, limit, offset)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
            self.logger.error("Product query failed", limit=limit, offset=offset, error=str(e))
            raise SourceUnavailableError(str(e), {"limit": limit, "offset": offset}) from e
        elapsed_ms = (time.perf_counter() - start) * 1000

        return SourceResult(rows=[_row_to_dict(r) for r in records], elapsed_ms=elapsed_ms)

    async def ping(self) -> bool:
        if self.pool is None:
            return False
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            return True
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError):
            return False
