"""
Request tracing.

Provides:
- Trace ID generation and propagation through ``X-Trace-Id``
- Context-local trace storage read by the log formatter
- Operation latency logging
"""

import logging
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Generator, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

trace_id_ctx: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)


@contextmanager
def trace_operation(operation_name: str, request_id: str) -> Generator[None, None, None]:
    """
    Log the latency of an operation.

    Example:
        >>> with trace_operation("decision_analysis", "req_123"):
        ...     analyzer.analyze(decision, templates, baselines)
    """
    start = time.perf_counter()

    try:
        yield
    finally:
        duration_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "operation_complete",
            extra={
                "request_id": request_id,
                "operation": operation_name,
                "duration_ms": round(duration_ms, 2),
            }
        )


def generate_trace_id() -> str:
    """Generate a unique trace ID."""
    return f"trace_{uuid.uuid4().hex[:16]}"


def get_trace_id() -> Optional[str]:
    """Get the current trace ID, if a request is being traced."""
    return trace_id_ctx.get()


def set_trace_id(trace_id: str) -> None:
    """Set the trace ID for the current context."""
    trace_id_ctx.set(trace_id)


class TracingMiddleware(BaseHTTPMiddleware):
    """Middleware to add a trace ID to every request and response."""

    async def dispatch(self, request: Request, call_next):
        trace_id = request.headers.get("X-Trace-Id") or generate_trace_id()
        set_trace_id(trace_id)

        response = await call_next(request)

        response.headers["X-Trace-Id"] = trace_id

        return response
