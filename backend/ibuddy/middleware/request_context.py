"""
iBuddy Backend — Request Context & Access Log Middleware
==========================================================

What:  Tags every request with an ID and writes one access-log line for it.
How:   The ID comes from the client's X-Request-ID header when present,
       otherwise a short random one is generated. It is stored on
       request.state so exception handlers can put it into error bodies,
       and echoed back in the X-Request-ID response header.

Logged per request: method, path, status, duration, request ID, client IP.
Never logged: bodies (passwords, note contents) or Authorization headers.
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

access_logger = logging.getLogger("ibuddy.access")

# paths polled by infrastructure; logging them only adds noise
QUIET_PATHS = frozenset({"/health"})


class RequestContextMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        request.state.request_id = rid
        start_time = time.perf_counter()
        response = await call_next(request)

        response.headers["X-Request-ID"] = rid
        path = request.url.path
        if path in QUIET_PATHS:
            return response

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            level = logging.ERROR
        elif status >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        client_ip = request.client.host if request.client else "unknown"
        access_logger.log(
            level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
        )
        return response
