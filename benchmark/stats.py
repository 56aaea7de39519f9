"""
Statistics over benchmark samples.

Empty sample sequences report 0.0 for every statistic, matching the
zero-guard of the summary tables, so a scenario whose runs all failed
still renders as a valid (if empty) row.
"""

import math
from dataclasses import dataclass
from typing import NamedTuple, Sequence

from .models import ScenarioResult


class SummaryStatistic(NamedTuple):
    """Mean and population standard deviation of a sample sequence."""

    mean: float
    std_dev: float


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean.

    Args:
        values: Numeric samples.

    Returns:
        ``sum(values) / len(values)``, or 0.0 for an empty sequence.
    """
    if not values:
        return 0.0
    return math.fsum(values) / len(values)


def std_dev(values: Sequence[float]) -> float:
    """Population standard deviation (divides by N, not N - 1).

    Args:
        values: Numeric samples.

    Returns:
        ``sqrt(mean((x - mean(values)) ** 2))``, or 0.0 for an empty sequence.
    """
    if not values:
        return 0.0
    avg = mean(values)
    return math.sqrt(mean([(v - avg) ** 2 for v in values]))


def hit_ratio(hits: int, total: int) -> float:
    """Cache hit ratio as a percentage; 0.0 when there were no runs."""
    if total <= 0:
        return 0.0
    return hits / total * 100


def summarize(values: Sequence[float]) -> SummaryStatistic:
    return SummaryStatistic(mean=mean(values), std_dev=std_dev(values))


@dataclass(frozen=True)
class ScenarioSummary:
    """One row of the cross-scenario summary."""

    page: int
    limit: int
    repetitions: int
    successful_runs: int
    backend: SummaryStatistic
    db: SummaryStatistic
    hit_ratio: float
    cache_strategy: str
    elapsed_ms: float


def summarize_scenario(result: ScenarioResult) -> ScenarioSummary:
    """Aggregate a scenario's successful runs.

    The hit ratio is taken over successful runs only; failed runs carry no
    cache outcome.
    """
    return ScenarioSummary(
        page=result.spec.page,
        limit=result.spec.limit,
        repetitions=result.repetitions,
        successful_runs=result.successful_runs,
        backend=summarize(result.backend_times),
        db=summarize(result.db_times),
        hit_ratio=hit_ratio(result.hit_count, result.successful_runs),
        cache_strategy=result.cache_strategy_label,
        elapsed_ms=result.elapsed_ms,
    )
