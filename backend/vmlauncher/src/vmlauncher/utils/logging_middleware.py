"""
HTTP Request Logging Middleware

Logs every inbound request and its outcome with loguru. The request id is
taken from the X-Request-ID header when the caller sends one, generated
otherwise, and echoed back on the response.
"""
from __future__ import annotations

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from loguru import logger

REQUEST_ID_HEADER = "X-Request-ID"


def _client_ip(request: Request) -> str:
    xfwd = request.headers.get("x-forwarded-for")
    if xfwd:
        return xfwd.split(",")[0].strip()
    return request.client.host if request.client else ""


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that logs request start, completion, and unhandled exceptions."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = rid

        ctx_logger = logger.bind(
            request_id=rid,
            method=request.method,
            path=request.url.path,
            client_ip=_client_ip(request),
            content_type=request.headers.get("content-type", ""),
        )

        start = time.perf_counter()
        ctx_logger.info("HTTP request started")

        with logger.contextualize(request_id=rid):
            try:
                response = await call_next(request)
            except Exception:
                duration_ms = round((time.perf_counter() - start) * 1000.0, 2)
                ctx_logger.bind(duration_ms=duration_ms).exception("Unhandled exception while processing request")
                raise

        duration_ms = round((time.perf_counter() - start) * 1000.0, 2)
        ctx_logger.bind(status=response.status_code, duration_ms=duration_ms).info("HTTP request completed")
        response.headers[REQUEST_ID_HEADER] = rid
        return response
