"""
Shared utilities for the catalog cache services and benchmark tooling.

This package aggregates common building blocks:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request/scenario correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- models: Request metrics exchanged between service and benchmark
- base_service: FastAPI service shell

Any cross-package logic should live here to avoid import cycles. Do not
import from service_catalog or benchmark into shared/.
"""
