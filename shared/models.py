"""
Data types exchanged across the catalog service, its source, and the benchmark.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional


def utc_timestamp() -> str:
    """Current time as an ISO-8601 UTC string."""
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class RequestMetrics:
    """Per-request timing and cache outcome.

    ``db_time_ms`` is ``None`` when the cache satisfied the request.
    """

    backend_processing_time_ms: float
    db_time_ms: Optional[float]
    cache_hit: bool
    cache_strategy_label: str
    timestamp: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation (camelCase keys)."""
        return {
            "backendProcessingTimeMs": self.backend_processing_time_ms,
            "dbTimeMs": self.db_time_ms,
            "cacheHit": self.cache_hit,
            "cacheStrategyLabel": self.cache_strategy_label,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RequestMetrics":
        """Parse the wire representation.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If a timing field is not numeric.
        """
        db_time = data.get("dbTimeMs")
        return cls(
            backend_processing_time_ms=float(data["backendProcessingTimeMs"]),
            db_time_ms=float(db_time) if db_time is not None else None,
            cache_hit=bool(data["cacheHit"]),
            cache_strategy_label=str(data.get("cacheStrategyLabel", "Unknown")),
            timestamp=str(data.get("timestamp", "")),
        )


@dataclass(frozen=True)
class SourceResult:
    """Rows returned by a source query and how long the query took."""

    rows: List[Dict[str, Any]]
    elapsed_ms: float
