"""
Request ID middleware.

Every request gets a request ID (X-Request-ID) and a correlation ID
(X-Correlation-ID, the frontend session). Client-supplied values are
reused when they look sane, otherwise a fresh short ID is generated.
Both are echoed on the response, attached to log records through
RequestIdLogFilter, and used as the trace_id of problem responses.
"""

import logging
import re
import uuid
from contextvars import ContextVar
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")
request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")

_VALID_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def generate_id() -> str:
    """Generate a short unique ID suitable for logging."""
    return uuid.uuid4().hex[:12]


def _accept(header_value: Optional[str]) -> str:
    if header_value and _VALID_ID.match(header_value):
        return header_value
    return generate_id()


def get_request_id() -> str:
    """Request ID of the current request, or "-" outside a request."""
    return request_id_ctx.get() or "-"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Bind request/correlation IDs to the request context."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        correlation_id = _accept(request.headers.get("X-Correlation-ID"))
        request_id = _accept(request.headers.get("X-Request-ID"))

        correlation_token = correlation_id_ctx.set(correlation_id)
        request_token = request_id_ctx.set(request_id)
        request.state.request_id = request_id
        try:
            response = await call_next(request)
        except Exception as exc:
            # Context vars are still set here
            from app.exceptions import handle_generic_exception
            response = await handle_generic_exception(request, exc)
        finally:
            correlation_id_ctx.reset(correlation_token)
            request_id_ctx.reset(request_token)

        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Request-ID"] = request_id
        return response


class RequestIdLogFilter(logging.Filter):
    """Adds ``request_id`` to every log record so formats can use it."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        return True


def install_log_filter() -> None:
    """Attach RequestIdLogFilter to every root handler."""
    request_filter = RequestIdLogFilter()
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIdLogFilter) for f in handler.filters):
            handler.addFilter(request_filter)
