"""
Benchmark data model: scenarios and their collected samples.
"""

from dataclasses import dataclass, field
from itertools import product
from typing import List, Optional, Tuple

from shared.models import RequestMetrics

UNKNOWN_STRATEGY = "Unknown"


@dataclass(frozen=True)
class ScenarioSpec:
    """One (page, limit) workload; ``page`` is 1-based as sent over HTTP."""

    page: int
    limit: int

    @property
    def slug(self) -> str:
        return f"page{self.page}_limit{self.limit}"

    @classmethod
    def parse(cls, value: str) -> "ScenarioSpec":
        """Parse ``"PAGE:LIMIT"`` (``"PAGExLIMIT"`` also accepted)."""
        separator = ":" if ":" in value else "x"
        page, _, limit = value.partition(separator)
        spec = cls(page=int(page), limit=int(limit))
        if spec.page < 1 or spec.limit < 1:
            raise ValueError(f"scenario page and limit must be positive: {value!r}")
        return spec


def build_matrix(pages: Tuple[int, ...], limits: Tuple[int, ...]) -> Tuple[ScenarioSpec, ...]:
    """Cross pages with limits, limit-major: every page for the first limit, then the next."""
    return tuple(ScenarioSpec(page=page, limit=limit) for limit, page in product(limits, pages))


DEFAULT_PAGES = (1, 5, 10, 50)
DEFAULT_LIMITS = (10, 25, 50, 100)
DEFAULT_SCENARIOS: Tuple[ScenarioSpec, ...] = build_matrix(DEFAULT_PAGES, DEFAULT_LIMITS)


@dataclass
class ScenarioResult:
    """Samples and raw log lines collected for one scenario."""

    spec: ScenarioSpec
    repetitions: int
    samples: List[RequestMetrics] = field(default_factory=list)
    log_lines: List[str] = field(default_factory=list)
    elapsed_ms: float = 0.0

    @property
    def successful_runs(self) -> int:
        return len(self.samples)

    @property
    def backend_times(self) -> List[float]:
        return [s.backend_processing_time_ms for s in self.samples]

    @property
    def db_times(self) -> List[float]:
        """Source query times; cache hits carry none and are left out."""
        return [s.db_time_ms for s in self.samples if s.db_time_ms is not None]

    @property
    def hit_count(self) -> int:
        return sum(1 for s in self.samples if s.cache_hit)

    @property
    def cache_strategy_label(self) -> str:
        last: Optional[RequestMetrics] = self.samples[-1] if self.samples else None
        return last.cache_strategy_label if last else UNKNOWN_STRATEGY
