"""
Benchmark engine: run the scenario matrix in order and write reports.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from shared.logging import get_logger, set_scenario

from .models import DEFAULT_SCENARIOS, ScenarioSpec
from .report import ReportWriter
from .runner import ScenarioRunner
from .stats import ScenarioSummary, summarize_scenario


@dataclass
class BenchmarkReport:
    """Outcome of a full matrix run."""

    summaries: List[ScenarioSummary] = field(default_factory=list)
    scenario_paths: List[Path] = field(default_factory=list)
    summary_path: Optional[Path] = None
    total_elapsed_ms: float = 0.0


class BenchmarkEngine:
    """Run every scenario, one after another, in matrix order."""

    def __init__(
        self,
        runner: ScenarioRunner,
        writer: ReportWriter,
        *,
        scenarios: Sequence[ScenarioSpec] = DEFAULT_SCENARIOS,
        runs: int = 20,
    ):
        if runs < 1:
            raise ValueError("runs must be at least 1")
        self.runner = runner
        self.writer = writer
        self.scenarios = tuple(scenarios)
        self.runs = runs
        self.logger = get_logger("bench.engine")

    async def run(self) -> BenchmarkReport:
        """Execute the matrix.

        Raises:
            ConfigurationError: If the output directory cannot be created.
        """
        self.writer.prepare()
        report = BenchmarkReport()
        total = len(self.scenarios)

        self.logger.info("Starting benchmark", scenarios=total, runs=self.runs)
        started = time.perf_counter()

        for index, spec in enumerate(self.scenarios, start=1):
            set_scenario(spec.slug)
            self.logger.info("Running scenario", index=index, total=total, page=spec.page, limit=spec.limit)

            result = await self.runner.run(spec, self.runs)
            summary = summarize_scenario(result)

            report.scenario_paths.append(self.writer.write_scenario(result, summary))
            report.summaries.append(summary)

            self.logger.info(
                "Scenario completed",
                elapsed_ms=round(result.elapsed_ms, 1),
                successful_runs=summary.successful_runs,
                hit_ratio=round(summary.hit_ratio, 1),
            )

        set_scenario(None)
        report.total_elapsed_ms = (time.perf_counter() - started) * 1000
        report.summary_path = self.writer.write_summary(report.summaries, report.total_elapsed_ms)

        self.logger.info(
            "Benchmark completed",
            scenarios=total,
            total_seconds=round(report.total_elapsed_ms / 1000, 1),
            summary=str(report.summary_path),
        )
        return report
