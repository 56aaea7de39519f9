"""
Unit tests for the scenario runner.
"""

import pytest
from unittest.mock import AsyncMock, patch

import httpx

from benchmark.models import ScenarioSpec
from benchmark.runner import ScenarioRunner, format_run_line
from shared.errors import NetworkTransportError
from shared.models import RequestMetrics

API_URL = "http://catalog.test/api/products"


def _success_body(cache_hit=False, db_time=12.34):
    return {
        "success": True,
        "data": [],
        "metrics": {
            "backendProcessingTimeMs": 20.5,
            "dbTimeMs": None if cache_hit else db_time,
            "cacheHit": cache_hit,
            "cacheStrategyLabel": "Redis Only",
            "timestamp": "2024-05-01T12:00:00.000Z",
        },
    }


def _runner(handler, delay_ms=0):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ScenarioRunner(client, API_URL, inter_call_delay_ms=delay_ms)


class TestFormatRunLine:
    """Test cases for format_run_line."""

    def test_miss_line(self):
        metrics = RequestMetrics.from_dict(_success_body()["metrics"])

        assert format_run_line(1, metrics) == (
            "Run 1 | Backend: 20.50 ms | DB: 12.34 ms | CacheHit: false | Time: 2024-05-01T12:00:00.000Z"
        )

    def test_hit_line(self):
        metrics = RequestMetrics.from_dict(_success_body(cache_hit=True)["metrics"])

        line = format_run_line(7, metrics)

        assert "DB: null ms" in line
        assert "CacheHit: true" in line


class TestScenarioRunner:
    """Test cases for ScenarioRunner."""

    @pytest.mark.asyncio
    async def test_collects_samples_and_sends_params(self):
        seen = []

        def handler(request):
            seen.append(dict(request.url.params))
            return httpx.Response(200, json=_success_body(cache_hit=len(seen) > 1))

        runner = _runner(handler)
        result = await runner.run(ScenarioSpec(page=5, limit=25), 3)

        assert seen == [{"page": "5", "limit": "25"}] * 3
        assert result.successful_runs == 3
        assert result.hit_count == 2
        assert len(result.log_lines) == 3
        assert result.log_lines[0].startswith("Run 1 | Backend:")
        assert result.elapsed_ms > 0

    @pytest.mark.asyncio
    async def test_transport_error_recorded_and_run_continues(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 2:
                raise httpx.ConnectError("Connection refused", request=request)
            return httpx.Response(200, json=_success_body())

        result = await _runner(handler).run(ScenarioSpec(page=1, limit=10), 3)

        assert len(calls) == 3
        assert result.successful_runs == 2
        assert result.log_lines[1] == "Run 2 | ERROR: ConnectError: Connection refused"

    @pytest.mark.asyncio
    async def test_error_status_is_a_failed_run(self):
        def handler(request):
            return httpx.Response(500, json={"success": False, "error": "connection refused"})

        result = await _runner(handler).run(ScenarioSpec(page=1, limit=10), 2)

        assert result.successful_runs == 0
        assert result.log_lines == [
            "Run 1 | ERROR: HTTP 500: Internal Server Error",
            "Run 2 | ERROR: HTTP 500: Internal Server Error",
        ]

    @pytest.mark.asyncio
    async def test_unsuccessful_envelope(self):
        runner = _runner(lambda request: httpx.Response(200, json={"success": False, "error": "boom"}))

        with pytest.raises(NetworkTransportError, match="boom"):
            await runner.request_once(ScenarioSpec(page=1, limit=10))

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        runner = _runner(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(NetworkTransportError, match="Malformed response"):
            await runner.request_once(ScenarioSpec(page=1, limit=10))

    @pytest.mark.asyncio
    async def test_missing_metrics_block(self):
        runner = _runner(lambda request: httpx.Response(200, json={"success": True, "data": []}))

        with pytest.raises(NetworkTransportError, match="Malformed response"):
            await runner.request_once(ScenarioSpec(page=1, limit=10))

    @pytest.mark.asyncio
    async def test_delay_after_every_attempt(self):
        def handler(request):
            return httpx.Response(200, json=_success_body())

        runner = _runner(handler, delay_ms=100)

        with patch("benchmark.runner.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await runner.run(ScenarioSpec(page=1, limit=10), 4)

        assert sleep.await_count == 4
        sleep.assert_awaited_with(0.1)

    @pytest.mark.asyncio
    async def test_no_delay_when_disabled(self):
        runner = _runner(lambda request: httpx.Response(200, json=_success_body()), delay_ms=0)

        with patch("benchmark.runner.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await runner.run(ScenarioSpec(page=1, limit=10), 2)

        sleep.assert_not_awaited()
