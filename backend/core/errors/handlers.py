"""FastAPI Exception Handlers

Renders AppErrors, FastAPI request validation errors, Starlette HTTP
exceptions and unhandled exceptions on a single response envelope:

    {"error": "ValidationError" | "NotFound" | ..., "message": "..."}
"""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging import get_logger

from .builders import internal_error
from .types import AppError, ErrorCode, ErrorContext

log = get_logger("ticketdesk.errors")


class AppErrorException(Exception):
    """Exception wrapper for AppError.

    Raised where code leaves the Result monad, e.g. FastAPI dependencies.
    """

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(str(error))


def result_to_response(error: AppError) -> Response:
    """Convert AppError to an HTTP response."""
    status_code = error.http_status
    log_method = log.warning if status_code < 500 else log.error
    log_method(
        "error_response",
        error_code=error.code.name,
        error_type=error.error_type,
        message=error.message,
        correlation_id=error.context.correlation_id,
        origin=error.context.origin,
        metadata=error.metadata,
    )

    return JSONResponse(status_code=status_code, content=error.to_dict())


async def app_error_handler(request: Request, exc: AppErrorException) -> Response:
    error = exc.error.with_context(
        request_id=request.headers.get("X-Request-ID"),
        correlation_id=request.headers.get("X-Correlation-ID"),
    )
    return result_to_response(error)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    """Handle standard HTTP exceptions (unknown routes, bad methods)."""
    status_code = exc.status_code
    if status_code == 404:
        code = ErrorCode.E4010_NOT_FOUND
    elif 400 <= status_code < 500:
        code = ErrorCode.E2000_VALIDATION_GENERIC
    else:
        code = ErrorCode.E9000_INTERNAL_GENERIC

    error = AppError(
        code=code,
        message=str(exc.detail) if exc.detail else f"HTTP {status_code}",
        context=ErrorContext(
            correlation_id=request.headers.get("X-Correlation-ID", ""),
            origin="http",
        ),
    )
    response = result_to_response(error)
    # Status and headers (e.g. Allow on 405) are kept; only the body is normalised.
    response.status_code = status_code
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> Response:
    """Render FastAPI/pydantic validation errors on the same envelope."""
    problems = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        problems.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else err.get("msg", "invalid"))

    error = AppError(
        code=ErrorCode.E2000_VALIDATION_GENERIC,
        message="; ".join(problems) or "Request validation failed",
        context=ErrorContext(
            correlation_id=request.headers.get("X-Correlation-ID", ""),
            origin="request_validation",
        ),
        metadata={"error_count": len(problems)},
    )
    return result_to_response(error)


async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    """Catch-all handler. Infrastructure failures end up here, never as 400/404."""
    error = internal_error(origin="unhandled", cause=exc).unwrap_err().with_context(
        request_id=request.headers.get("X-Request-ID"),
        correlation_id=request.headers.get("X-Correlation-ID"),
    )

    log.exception(
        "unhandled_exception",
        error_type=type(exc).__name__,
        error_message=str(exc),
        correlation_id=error.context.correlation_id,
    )

    return result_to_response(error)


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers on the FastAPI app."""
    app.add_exception_handler(AppErrorException, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def raise_result(result) -> None:
    """Raise if Result is Err, otherwise return.

    Usage:
        result = await chain.run(ctx)
        raise_result(result)
        ctx = result.unwrap()
    """
    if result.is_err():
        raise AppErrorException(result.unwrap_err())
