"""
Main FastAPI application for the Decision Cascade Engine.

This module sets up the FastAPI app with all routers, middleware,
and exception handlers.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.config import get_settings, setup_logging
from src.models.responses import ErrorCode, ErrorResponse, RecoveryHints
from src.utils.errors import DecisionEngineError
from src.utils.secure_logging import sanitize_error_for_logging
from src.utils.tracing import TracingMiddleware, get_trace_id

from .decisions import router as decisions_router
from .health import router as health_router

logger = setup_logging()
settings = get_settings()


def _request_id(request: Request) -> str:
    """Request ID from headers, falling back to the trace ID."""
    return (
        request.headers.get("X-Request-Id")
        or request.headers.get("X-Trace-Id")
        or get_trace_id()
        or "unknown"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    logger.info(
        "application_startup",
        extra={
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
            "strict_consequence_signs": settings.STRICT_CONSEQUENCE_SIGNS,
        },
    )

    yield

    logger.info("application_shutdown")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description=settings.DESCRIPTION,
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Adds X-Trace-Id to all requests/responses
app.add_middleware(TracingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-Id", "X-Trace-Id"],
    max_age=600,
)


@app.middleware("http")
async def log_requests(request: Request, call_next: Callable) -> Response:
    """
    Log all incoming requests and responses.

    Tracks:
    - Request method, path, and client
    - Response status and duration
    """
    start_time = time.perf_counter()
    endpoint = request.url.path

    logger.info(
        "request_started",
        extra={
            "method": request.method,
            "path": endpoint,
            "client": request.client.host if request.client else "unknown",
        },
    )

    try:
        response = await call_next(request)
    except Exception as exc:
        logger.error(
            "request_failed",
            extra={
                "method": request.method,
                "path": endpoint,
                "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
                **sanitize_error_for_logging(exc),
            },
        )
        raise

    logger.info(
        "request_completed",
        extra={
            "method": request.method,
            "path": endpoint,
            "status_code": response.status_code,
            "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
        },
    )

    return response


@app.exception_handler(DecisionEngineError)
async def engine_exception_handler(request: Request, exc: DecisionEngineError) -> JSONResponse:
    """Map engine data errors onto the uniform error response."""
    request_id = _request_id(request)

    logger.warning(
        "decision_engine_error",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "code": exc.code,
            "context": exc.context,
        },
    )

    error_response = ErrorResponse(
        code=exc.code,
        message=exc.message,
        reason=exc.code.removeprefix("DCE_").lower(),
        recovery=RecoveryHints(
            hints=exc.suggestions,
            suggestion=exc.suggestions[0] if exc.suggestions else "Fix the input and retry",
        ),
        retryable=False,
        source="dce",
        request_id=request_id,
    )

    return JSONResponse(
        status_code=422,
        content=error_response.model_dump(exclude_none=True),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTPException with the uniform error response."""
    error_response = ErrorResponse(
        code=(
            ErrorCode.VALIDATION_ERROR.value if exc.status_code < 500
            else ErrorCode.COMPUTATION_ERROR.value
        ),
        message=str(exc.detail),
        reason="http_error",
        recovery=RecoveryHints(
            hints=["Check your request parameters", "Refer to API documentation"],
            suggestion="Fix the input and retry",
        ),
        retryable=False,
        source="dce",
        request_id=_request_id(request),
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(exclude_none=True),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors with the uniform error response."""
    errors = exc.errors()
    validation_failures = [
        f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
        for err in errors
    ]

    hints = []
    if any("missing" in err["type"] for err in errors):
        hints.append("Ensure all required fields are provided")
    if any(err["type"] in ("enum", "literal_error") for err in errors):
        hints.append("Check enumerated values (urgency, domain, type, severity, timeframe)")
    if any(err["type"] in ("greater_than_equal", "less_than_equal") for err in errors):
        hints.append("Verify values are within valid ranges")
    if not hints:
        hints.append("Check the API documentation for correct request format")

    error_response = ErrorResponse(
        code=ErrorCode.VALIDATION_ERROR.value,
        message="Request validation failed",
        reason="invalid_schema",
        recovery=RecoveryHints(
            hints=hints,
            suggestion="Fix validation errors and retry",
            example="See validation_failures field for specific issues",
        ),
        validation_failures=validation_failures,
        retryable=False,
        source="dce",
        request_id=_request_id(request),
    )

    return JSONResponse(
        status_code=422,
        content=error_response.model_dump(exclude_none=True),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions with the uniform error response."""
    request_id = _request_id(request)

    logger.error(
        "unhandled_exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "request_id": request_id,
            **sanitize_error_for_logging(exc),
        },
        exc_info=True,
    )

    error_response = ErrorResponse(
        code=ErrorCode.COMPUTATION_ERROR.value,
        message="An unexpected error occurred during computation",
        reason="internal_error",
        recovery=RecoveryHints(
            hints=[
                "Check server logs for details",
                "Contact support if the error persists",
            ],
            suggestion="Retry with the same input or contact support",
        ),
        retryable=False,
        source="dce",
        request_id=request_id,
    )

    return JSONResponse(
        status_code=500,
        content=error_response.model_dump(exclude_none=True),
    )


app.include_router(health_router, tags=["Health"])
app.include_router(
    decisions_router,
    prefix=f"{settings.API_V1_PREFIX}/decisions",
    tags=["Decision Analysis"],
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
