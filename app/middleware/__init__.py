"""
Middleware modules for the dashboard API.

Provides request processing middleware for:
- Correlation ID tracking, exposed to log records and problem responses
"""

from .correlation import (
    CorrelationIdMiddleware,
    RequestIdLogFilter,
    correlation_id_ctx,
    get_request_id,
    request_id_ctx,
)

__all__ = [
    "CorrelationIdMiddleware",
    "RequestIdLogFilter",
    "correlation_id_ctx",
    "get_request_id",
    "request_id_ctx",
]
