"""
Request correlation for the API.

Each request gets an id that is echoed in the X-Request-ID header and bound
into structlog's context variables, so the booking, notification and auth
log lines emitted while handling it can be joined up. A completion line with
status and latency is logged for every request.
"""

from __future__ import annotations

import time
import uuid
from typing import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"
MAX_CLIENT_REQUEST_ID_LENGTH = 64

# Probes and scrapes would drown out real traffic
UNLOGGED_PATHS = frozenset({"/health", "/ready", "/metrics"})

logger = structlog.get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Attach a request id to state, log context and response.

    A client-supplied X-Request-ID is reused when it is short enough, so a
    mobile client's retry can be traced across attempts.

    Example:
        >>> app.add_middleware(RequestIDMiddleware)
        >>> # X-Request-ID: 550e8400-e29b-41d4-a716-446655440000
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        supplied = request.headers.get(REQUEST_ID_HEADER, "")
        if supplied and len(supplied) <= MAX_CLIENT_REQUEST_ID_LENGTH:
            request_id = supplied
        else:
            request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id, method=request.method, path=request.url.path
        )

        started = time.perf_counter()
        response = await call_next(request)

        if request.url.path not in UNLOGGED_PATHS:
            logger.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
