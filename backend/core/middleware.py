"""Request Logging Middleware

Binds a correlation id to every log line emitted while a request is handled,
echoes it back in the `X-Correlation-ID` response header and logs how the
request ended. Query strings are redacted before they are logged, since
OAuth callbacks carry codes and tokens there.
"""
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from core.logging import api_logger, bind_context, clear_context, generate_correlation_id, redact

log = api_logger()

CORRELATION_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Correlation context plus one completion line per request.

    Requests slower than `slow_threshold_ms` also log `slow_request`.
    """

    def __init__(self, app, slow_threshold_ms: float = 1000):
        super().__init__(app)
        self.slow_threshold_ms = slow_threshold_ms

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or generate_correlation_id()

        # Not cleared on the way out: the catch-all error handler runs
        # outside this middleware and logs under the same id.
        clear_context()
        bind_context(
            correlation_id=correlation_id,
            request_id=request.headers.get(REQUEST_ID_HEADER),
            method=request.method,
            path=request.url.path,
        )

        log.debug(
            "request_started",
            query=redact(dict(request.query_params)) if request.query_params else None,
            client_ip=request.client.host if request.client else "unknown",
        )

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            log.error("request_failed", error_type=type(exc).__name__, duration_ms=_elapsed_ms(start))
            raise

        duration_ms = _elapsed_ms(start)
        response.headers[CORRELATION_HEADER] = correlation_id

        status = response.status_code
        if status >= 500:
            log.error("request_completed", status=status, duration_ms=duration_ms)
        elif status >= 400:
            log.warning("request_completed", status=status, duration_ms=duration_ms)
        else:
            log.info("request_completed", status=status, duration_ms=duration_ms)

        if duration_ms > self.slow_threshold_ms:
            log.warning("slow_request", duration_ms=duration_ms, threshold_ms=self.slow_threshold_ms)

        return response
