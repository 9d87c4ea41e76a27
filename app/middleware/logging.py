import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.lib.logger import configure_logger

logger = configure_logger(__name__)

PROCESS_TIME_HEADER = "X-Process-Time-Ms"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log every explainer request with its status and latency."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response: Response = await call_next(request)

        process_time_ms = round((time.perf_counter() - start_time) * 1000, 2)
        response.headers[PROCESS_TIME_HEADER] = str(process_time_ms)

        request_info = {
            "method": request.method,
            "path": request.url.path,
            "client": request.client.host if request.client else "unknown",
        }
        if request.query_params:
            request_info["query_params"] = dict(request.query_params)

        response_info = {
            "status_code": response.status_code,
            "process_time_ms": process_time_ms,
        }

        # Server-side failures stand out from client errors in the logs
        log = logger.error if response.status_code >= 500 else logger.info
        status_mark = "✓" if response.status_code < 400 else "✗"
        log(
            f"{status_mark} {request.method} {request.url.path}",
            extra={
                "request": request_info,
                "response": response_info,
                "event_type": "http_request",
            },
        )

        return response
