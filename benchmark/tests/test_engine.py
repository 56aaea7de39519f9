"""
Unit tests for the benchmark engine.
"""

import pytest

from benchmark.engine import BenchmarkEngine
from benchmark.models import DEFAULT_SCENARIOS, ScenarioResult, ScenarioSpec, build_matrix
from benchmark.report import ReportWriter, SUMMARY_FILENAME
from shared.errors import ConfigurationError
from shared.models import RequestMetrics


class FakeRunner:
    """Runner that records the scenarios it was asked to drive."""

    def __init__(self, failing=()):
        self.visited = []
        self.failing = set(failing)

    async def run(self, spec, repetitions):
        self.visited.append((spec, repetitions))
        result = ScenarioResult(spec=spec, repetitions=repetitions)
        for run in range(1, repetitions + 1):
            if spec in self.failing:
                result.log_lines.append(f"Run {run} | ERROR: ConnectError: Connection refused")
                continue
            hit = run > 1
            result.samples.append(
                RequestMetrics(5.0 if hit else 40.0, None if hit else 30.0, hit, "Redis Only", "t")
            )
            result.log_lines.append(f"Run {run} | ok")
        return result


class TestScenarioMatrix:
    """Test cases for the default scenario matrix."""

    def test_default_matrix_is_limit_major(self):
        assert len(DEFAULT_SCENARIOS) == 16
        assert DEFAULT_SCENARIOS[:5] == (
            ScenarioSpec(1, 10),
            ScenarioSpec(5, 10),
            ScenarioSpec(10, 10),
            ScenarioSpec(50, 10),
            ScenarioSpec(1, 25),
        )
        assert DEFAULT_SCENARIOS[-1] == ScenarioSpec(50, 100)

    def test_build_matrix_is_deterministic(self):
        assert build_matrix((1, 2), (10, 20)) == build_matrix((1, 2), (10, 20))

    def test_parse_scenario(self):
        assert ScenarioSpec.parse("5:25") == ScenarioSpec(5, 25)
        assert ScenarioSpec.parse("5x25") == ScenarioSpec(5, 25)
        with pytest.raises(ValueError):
            ScenarioSpec.parse("0:25")


class TestBenchmarkEngine:
    """Test cases for BenchmarkEngine."""

    @pytest.mark.asyncio
    async def test_visits_matrix_in_order(self, tmp_path):
        runner = FakeRunner()
        engine = BenchmarkEngine(runner, ReportWriter(tmp_path), runs=3)

        report = await engine.run()

        assert [spec for spec, _ in runner.visited] == list(DEFAULT_SCENARIOS)
        assert all(reps == 3 for _, reps in runner.visited)
        assert [(s.page, s.limit) for s in report.summaries] == [(s.page, s.limit) for s in DEFAULT_SCENARIOS]

    @pytest.mark.asyncio
    async def test_writes_one_file_per_scenario_and_summary(self, tmp_path):
        engine = BenchmarkEngine(FakeRunner(), ReportWriter(tmp_path), runs=2)

        report = await engine.run()

        assert len(report.scenario_paths) == 16
        assert (tmp_path / "products_page50_limit100.txt").exists()
        assert report.summary_path == tmp_path / SUMMARY_FILENAME
        assert "Scenarios Tested: 16" in report.summary_path.read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_order_reproducible_across_runs(self, tmp_path):
        first, second = FakeRunner(), FakeRunner()

        await BenchmarkEngine(first, ReportWriter(tmp_path / "a"), runs=1).run()
        await BenchmarkEngine(second, ReportWriter(tmp_path / "b"), runs=1).run()

        assert first.visited == second.visited

    @pytest.mark.asyncio
    async def test_failing_scenario_does_not_stop_matrix(self, tmp_path):
        scenarios = (ScenarioSpec(1, 10), ScenarioSpec(5, 10), ScenarioSpec(10, 10))
        runner = FakeRunner(failing={ScenarioSpec(5, 10)})
        engine = BenchmarkEngine(runner, ReportWriter(tmp_path), scenarios=scenarios, runs=4)

        report = await engine.run()

        assert len(runner.visited) == 3
        failed = report.summaries[1]
        assert failed.successful_runs == 0
        assert failed.hit_ratio == 0.0
        assert report.summaries[2].hit_ratio == 75.0
        assert "Successful Runs: 0/4" in (tmp_path / "products_page5_limit10.txt").read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_unusable_output_dir_aborts_before_requests(self, tmp_path):
        blocker = tmp_path / "results"
        blocker.write_text("", encoding="utf-8")
        runner = FakeRunner()

        with pytest.raises(ConfigurationError):
            await BenchmarkEngine(runner, ReportWriter(blocker), runs=1).run()

        assert runner.visited == []

    def test_rejects_zero_runs(self, tmp_path):
        with pytest.raises(ValueError):
            BenchmarkEngine(FakeRunner(), ReportWriter(tmp_path), runs=0)
