"""
Text reports for benchmark runs.
"""

from pathlib import Path
from typing import List, Sequence, Union

from shared.errors import ConfigurationError
from shared.logging import get_logger

from . import stats
from .models import ScenarioResult, ScenarioSpec
from .stats import ScenarioSummary

SUMMARY_FILENAME = "summary_report.txt"
RULE_WIDTH = 80

# (header, width); the last column is unpadded
SUMMARY_COLUMNS = (
    ("Page", 6),
    ("Limit", 8),
    ("Success", 10),
    ("Backend (ms)", 18),
    ("DB (ms)", 18),
    ("Cache Hit %", 15),
    ("Cache Strategy", 0),
)


def scenario_filename(spec: ScenarioSpec) -> str:
    return f"products_{spec.slug}.txt"


def _pm(stat: stats.SummaryStatistic) -> str:
    return f"{stat.mean:.2f} ± {stat.std_dev:.2f}"


def _row(cells: Sequence[str]) -> str:
    return "".join(
        cell.ljust(width) if width else cell
        for cell, (_, width) in zip(cells, SUMMARY_COLUMNS)
    )


def render_scenario(result: ScenarioResult, summary: ScenarioSummary) -> str:
    """Raw run lines followed by the scenario's summary block."""
    lines: List[str] = ["=" * 20 + " RAW RUNS " + "=" * 20]
    lines.extend(result.log_lines)
    lines.append("")
    lines.extend([
        "=" * 20 + " SUMMARY " + "=" * 21,
        f"Page: {summary.page}",
        f"Limit: {summary.limit}",
        f"Runs: {summary.repetitions}",
        f"Successful Runs: {summary.successful_runs}/{summary.repetitions}",
        f"Cache Strategy: {summary.cache_strategy}",
        f"Scenario Time: {summary.elapsed_ms:.0f} ms",
        "",
        "Backend Processing Time:",
        f"  Mean: {summary.backend.mean:.2f} ms",
        f"  Std Dev: {summary.backend.std_dev:.2f} ms",
        "",
        "DB Time:",
        f"  Mean: {summary.db.mean:.2f} ms",
        f"  Std Dev: {summary.db.std_dev:.2f} ms",
        "",
        "Cache Hit Ratio:",
        f"  {summary.hit_ratio:.1f} %",
        "=" * 50,
    ])
    return "\n".join(lines) + "\n"


def render_summary(summaries: Sequence[ScenarioSummary], total_elapsed_ms: float) -> str:
    """Cross-scenario table in matrix order plus overall averages."""
    lines: List[str] = [
        "=" * RULE_WIDTH,
        "COMPREHENSIVE BENCHMARK SUMMARY",
        "=" * RULE_WIDTH,
        "",
        _row([header for header, _ in SUMMARY_COLUMNS]),
        "-" * RULE_WIDTH,
    ]

    for s in summaries:
        lines.append(_row([
            str(s.page),
            str(s.limit),
            f"{s.successful_runs}/{s.repetitions}",
            _pm(s.backend),
            _pm(s.db),
            f"{s.hit_ratio:.1f}%",
            s.cache_strategy,
        ]))

    lines.extend([
        "",
        "=" * RULE_WIDTH,
        "",
        "OVERALL AVERAGES:",
        f"Average Backend Time: {stats.mean([s.backend.mean for s in summaries]):.2f} ms",
        f"Average DB Time: {stats.mean([s.db.mean for s in summaries]):.2f} ms",
        f"Average Cache Hit Ratio: {stats.mean([s.hit_ratio for s in summaries]):.1f}%",
        f"Total Benchmark Time: {total_elapsed_ms / 1000:.1f} seconds",
        f"Scenarios Tested: {len(summaries)}",
        "",
        "=" * RULE_WIDTH,
    ])
    return "\n".join(lines) + "\n"


class ReportWriter:
    """Persist scenario and summary reports under one output directory.

    Files from a previous run with the same names are overwritten.
    """

    def __init__(self, output_dir: Union[str, Path]):
        self.output_dir = Path(output_dir)
        self.logger = get_logger("bench.report")

    def prepare(self) -> Path:
        """Create the output directory.

        Raises:
            ConfigurationError: If the directory cannot be created.
        """
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot create output directory {self.output_dir}: {e}",
                {"output_dir": str(self.output_dir)},
            ) from e
        return self.output_dir

    def write_scenario(self, result: ScenarioResult, summary: ScenarioSummary) -> Path:
        path = self.output_dir / scenario_filename(result.spec)
        path.write_text(render_scenario(result, summary), encoding="utf-8")
        self.logger.info("Scenario report written", path=str(path))
        return path

    def write_summary(self, summaries: Sequence[ScenarioSummary], total_elapsed_ms: float) -> Path:
        path = self.output_dir / SUMMARY_FILENAME
        path.write_text(render_summary(summaries, total_elapsed_ms), encoding="utf-8")
        self.logger.info("Summary report written", path=str(path), scenarios=len(summaries))
        return path
