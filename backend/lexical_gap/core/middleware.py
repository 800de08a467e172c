"""Request correlation and access logging."""

from __future__ import annotations

import logging
import time
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from lexical_gap.core.logging import bind_request_id, reset_request_id

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Bind a request id for the duration of the call and log one access line.

    A client supplied ``X-Request-ID`` is reused, otherwise a fresh one is
    generated. The id is echoed back on the response and copied onto every log
    record emitted while the request is handled.
    """

    def __init__(self, app: ASGIApp, logger_name: str = "lexical_gap.access") -> None:
        super().__init__(app)
        self.access_logger = logging.getLogger(logger_name)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id
        token = bind_request_id(request_id)
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            self._log_access(request, status_code, started)
            reset_request_id(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    def _log_access(self, request: Request, status_code: int, started: float) -> None:
        self.access_logger.info(
            "access",
            extra={
                "event": "access",
                "http_method": request.method,
                "http_path": request.url.path,
                "status_code": status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                "client_ip": request.client.host if request.client else None,
            },
        )


__all__ = ["REQUEST_ID_HEADER", "RequestContextMiddleware"]
