"""
Scenario runner: repeated, strictly sequential calls to the products API.
"""

import asyncio
import time
from typing import Optional

import httpx

from shared.errors import NetworkTransportError
from shared.logging import get_logger
from shared.models import RequestMetrics

from .models import ScenarioResult, ScenarioSpec


def format_run_line(run: int, metrics: RequestMetrics) -> str:
    db = "null" if metrics.db_time_ms is None else f"{metrics.db_time_ms:.2f}"
    return (
        f"Run {run} | Backend: {metrics.backend_processing_time_ms:.2f} ms | DB: {db} ms"
        f" | CacheHit: {str(metrics.cache_hit).lower()} | Time: {metrics.timestamp}"
    )


class ScenarioRunner:
    """Drive one scenario for a fixed number of repetitions.

    A failed run is logged and recorded but never stops the scenario. One
    request is in flight at a time.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_url: str,
        *,
        inter_call_delay_ms: float = 100.0,
    ):
        self.client = client
        self.api_url = api_url
        self.inter_call_delay_ms = inter_call_delay_ms
        self.logger = get_logger("bench.runner")

    async def run(self, spec: ScenarioSpec, repetitions: int) -> ScenarioResult:
        """Call the API ``repetitions`` times for ``spec`` and collect metrics."""
        result = ScenarioResult(spec=spec, repetitions=repetitions)
        start = time.perf_counter()

        for run in range(1, repetitions + 1):
            try:
                metrics = await self.request_once(spec)
            except NetworkTransportError as e:
                self.logger.warning(
                    "Benchmark run failed",
                    page=spec.page,
                    limit=spec.limit,
                    run=run,
                    error=e.message,
                )
                result.log_lines.append(f"Run {run} | ERROR: {e.message}")
            else:
                result.samples.append(metrics)
                result.log_lines.append(format_run_line(run, metrics))

            # Pause after every attempt, failed ones included
            if self.inter_call_delay_ms:
                await asyncio.sleep(self.inter_call_delay_ms / 1000)

        result.elapsed_ms = (time.perf_counter() - start) * 1000
        return result

    async def request_once(self, spec: ScenarioSpec) -> RequestMetrics:
        """Issue one request and parse its metrics block.

        Raises:
            NetworkTransportError: On transport failure, an error status, a
                ``success: false`` envelope, or a malformed body.
        """
        try:
            response = await self.client.get(
                self.api_url,
                params={"page": spec.page, "limit": spec.limit},
            )
        except httpx.HTTPError as e:
            raise NetworkTransportError(f"{type(e).__name__}: {e}") from e

        if response.is_error:
            raise NetworkTransportError(
                f"HTTP {response.status_code}: {response.reason_phrase}",
                {"body": _error_message(response)},
            )

        try:
            body = response.json()
            if not body.get("success"):
                raise NetworkTransportError(body.get("error") or "Request reported failure")
            return RequestMetrics.from_dict(body["metrics"])
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise NetworkTransportError(f"Malformed response: {e}") from e


def _error_message(response: httpx.Response) -> Optional[str]:
    try:
        return response.json().get("error")
    except (ValueError, AttributeError):
        return None
