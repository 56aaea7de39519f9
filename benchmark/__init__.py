"""
Benchmark harness for the catalog cache-aside layer.

- models: Scenario specs, the default matrix, and per-scenario results.
- runner: Sequential HTTP calls for one scenario.
- stats: Mean, population standard deviation, and hit ratio.
- report: Per-scenario and summary text reports.
- engine: Matrix iteration.
- cli: ``catalog-bench`` entry point.

Benchmark requests are never issued concurrently; latency samples must not
include self-induced queueing.
"""

from .engine import BenchmarkEngine, BenchmarkReport
from .models import DEFAULT_SCENARIOS, ScenarioResult, ScenarioSpec
from .report import ReportWriter
from .runner import ScenarioRunner

__all__ = [
    "BenchmarkEngine",
    "BenchmarkReport",
    "DEFAULT_SCENARIOS",
    "ReportWriter",
    "ScenarioResult",
    "ScenarioRunner",
    "ScenarioSpec",
]
