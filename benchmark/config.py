"""
Benchmark configuration.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BenchmarkConfig(BaseSettings):
    """Settings for a benchmark run, read from ``CATALOG_BENCH_*``."""

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_BENCH_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    api_url: str = Field(default="http://localhost:5001/api/products")
    runs: int = Field(default=20, ge=1)
    output_dir: Path = Field(default=Path("results"))
    inter_call_delay_ms: float = Field(default=100.0, ge=0)
    request_timeout_seconds: float = Field(default=30.0, gt=0)
    log_level: str = Field(default="info")
