#!/usr/bin/env python3
"""
Run the cache benchmark against a live catalog service.

Visits every scenario of the matrix in order, writes one report per scenario
plus a cross-scenario summary, and prints the summary when done.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import httpx
from pydantic import ValidationError

from shared.errors import ConfigurationError
from shared.logging import configure_logging, get_logger

from .config import BenchmarkConfig
from .engine import BenchmarkEngine, BenchmarkReport
from .models import DEFAULT_SCENARIOS, ScenarioSpec
from .report import ReportWriter
from .runner import ScenarioRunner


async def run_benchmark(config: BenchmarkConfig, scenarios: Sequence[ScenarioSpec]) -> BenchmarkReport:
    """Execute the matrix with a fresh HTTP client."""
    async with httpx.AsyncClient(timeout=config.request_timeout_seconds) as client:
        runner = ScenarioRunner(client, config.api_url, inter_call_delay_ms=config.inter_call_delay_ms)
        engine = BenchmarkEngine(
            runner,
            ReportWriter(config.output_dir),
            scenarios=scenarios,
            runs=config.runs,
        )
        return await engine.run()


def _parse_args(argv: Optional[List[str]] = None, defaults: Optional[BenchmarkConfig] = None) -> argparse.Namespace:
    defaults = defaults or BenchmarkConfig()
    parser = argparse.ArgumentParser(description="Benchmark the catalog cache-aside layer.")
    parser.add_argument("--api-url", default=defaults.api_url, help="Products endpoint URL")
    parser.add_argument("--runs", type=int, default=defaults.runs, help="Repetitions per scenario")
    parser.add_argument("--output-dir", type=Path, default=defaults.output_dir, help="Directory for report files")
    parser.add_argument("--delay-ms", type=float, default=defaults.inter_call_delay_ms, help="Delay between calls in milliseconds")
    parser.add_argument("--timeout", type=float, default=defaults.request_timeout_seconds, help="Per-request timeout in seconds")
    parser.add_argument(
        "--scenario",
        dest="scenarios",
        action="append",
        type=ScenarioSpec.parse,
        metavar="PAGE:LIMIT",
        help="Scenario to run (repeatable); defaults to the built-in 16-scenario matrix",
    )
    parser.add_argument("--log-level", default=defaults.log_level, help="Log level")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    try:
        defaults = BenchmarkConfig()
    except ValidationError as exc:
        configure_logging("bench")
        get_logger("bench.cli").error("Invalid benchmark environment", error=str(exc))
        return 1

    args = _parse_args(argv, defaults)
    configure_logging("bench", args.log_level)
    logger = get_logger("bench.cli")

    try:
        config = BenchmarkConfig(
            api_url=args.api_url,
            runs=args.runs,
            output_dir=args.output_dir,
            inter_call_delay_ms=args.delay_ms,
            request_timeout_seconds=args.timeout,
            log_level=args.log_level,
        )
    except ValidationError as exc:
        logger.error("Invalid benchmark configuration", error=str(exc))
        return 1
    scenarios = tuple(args.scenarios) if args.scenarios else DEFAULT_SCENARIOS

    try:
        report = asyncio.run(run_benchmark(config, scenarios))
    except KeyboardInterrupt:
        return 130
    except ConfigurationError as exc:
        logger.error("Benchmark setup failed", code=exc.code, error=exc.message)
        return 1
    except Exception as exc:  # pragma: no cover - CLI surface
        logger.error("Fatal error running benchmarks", error=str(exc), exc_info=True)
        return 1

    print(report.summary_path.read_text(encoding="utf-8"))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
