"""
Shared error handling for the catalog cache services.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

from .logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class CatalogError(Exception):
    """Base exception for catalog services and tools."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class SourceUnavailableError(CatalogError):
    """Authoritative store connection or query failure."""

    def __init__(self, message: str = "Source query failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("SOURCE_UNAVAILABLE", message, details)


class CacheUnavailableError(CatalogError):
    """Cache store connection or operation failure."""

    def __init__(self, operation: str, message: str = "Cache store error", details: Optional[Dict[str, Any]] = None):
        self.operation = operation
        super().__init__("CACHE_UNAVAILABLE", f"{operation}: {message}", details)


class NetworkTransportError(CatalogError):
    """Benchmark-side call failure."""

    def __init__(self, message: str = "Transport error", details: Optional[Dict[str, Any]] = None):
        super().__init__("NETWORK_TRANSPORT_ERROR", message, details)


class ConfigurationError(CatalogError):
    """Setup failure that aborts a benchmark run."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)
