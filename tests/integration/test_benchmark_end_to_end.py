"""
End-to-end tests: benchmark harness driving the catalog service in-process.
"""

import httpx
import pytest

from benchmark.engine import BenchmarkEngine
from benchmark.models import ScenarioSpec
from benchmark.report import ReportWriter
from benchmark.runner import ScenarioRunner
from service_catalog.app.main import CatalogService
from shared.config import get_config
from shared.test_helpers import FakeProductSource

API_URL = "http://catalog.test/api/products"


class TestBenchmarkEndToEnd:
    """Benchmark runs against the real ASGI app with a fake product source."""

    @pytest.fixture
    def source(self):
        return FakeProductSource()

    def _service(self, source, **overrides):
        config = get_config("catalog", 5000, **overrides)
        return CatalogService(config, source=source)

    @pytest.mark.asyncio
    async def test_cached_scenario_hits_after_first_run(self, tmp_path, source):
        service = self._service(source, redis_cache=True, cache_backend="memory")
        transport = httpx.ASGITransport(app=service.app)

        async with httpx.AsyncClient(transport=transport) as client:
            runner = ScenarioRunner(client, API_URL, inter_call_delay_ms=1)
            engine = BenchmarkEngine(
                runner,
                ReportWriter(tmp_path),
                scenarios=(ScenarioSpec(page=1, limit=10),),
                runs=20,
            )
            report = await engine.run()

        summary = report.summaries[0]
        assert source.call_count == 1
        assert summary.successful_runs == 20
        assert summary.hit_ratio == 95.0
        assert summary.cache_strategy == "In-Memory"
        assert summary.db.mean == 12.5

        text = (tmp_path / "products_page1_limit10.txt").read_text(encoding="utf-8")
        assert "  95.0 %" in text
        assert text.count("CacheHit: true") == 19

    @pytest.mark.asyncio
    async def test_uncached_service_never_hits(self, tmp_path, source):
        service = self._service(source, redis_cache=False)
        transport = httpx.ASGITransport(app=service.app)

        async with httpx.AsyncClient(transport=transport) as client:
            runner = ScenarioRunner(client, API_URL, inter_call_delay_ms=0)
            engine = BenchmarkEngine(
                runner,
                ReportWriter(tmp_path),
                scenarios=(ScenarioSpec(page=5, limit=25),),
                runs=5,
            )
            report = await engine.run()

        assert source.calls == [{"limit": 25, "offset": 100}] * 5
        assert report.summaries[0].hit_ratio == 0.0
        assert report.summaries[0].cache_strategy == "None"

    @pytest.mark.asyncio
    async def test_source_outage_recorded_as_failed_runs(self, tmp_path, source):
        source.fail_with("connection refused")
        service = self._service(source, redis_cache=True, cache_backend="memory")
        transport = httpx.ASGITransport(app=service.app)

        async with httpx.AsyncClient(transport=transport) as client:
            runner = ScenarioRunner(client, API_URL, inter_call_delay_ms=0)
            engine = BenchmarkEngine(
                runner,
                ReportWriter(tmp_path),
                scenarios=(ScenarioSpec(page=1, limit=10), ScenarioSpec(page=5, limit=10)),
                runs=3,
            )
            report = await engine.run()

        assert [s.successful_runs for s in report.summaries] == [0, 0]
        summary_text = report.summary_path.read_text(encoding="utf-8")
        assert "0/3" in summary_text
        assert "Scenarios Tested: 2" in summary_text
