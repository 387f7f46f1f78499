from __future__ import annotations

import logging
import re
import time
import uuid
from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"
# Room services forward their own correlation id; accept only tame values
_INBOUND_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def resolve_request_id(request: Request) -> str:
    """Reuse a well-formed inbound ``x-request-id``, otherwise mint a UUID4."""
    inbound = request.headers.get(REQUEST_ID_HEADER, "")
    if _INBOUND_ID.match(inbound):
        return inbound
    return str(uuid.uuid4())


class RequestIDLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an ID and log one line per completed request.

    The ID is stored on ``request.state`` so error handlers can put it into
    the error envelope, and it is echoed back in the response header.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = resolve_request_id(request)
        request.state.request_id = request_id
        logger.debug(
            "%s %s started", request.method, request.url.path, extra={"request_id": request_id}
        )

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        response.headers[REQUEST_ID_HEADER] = request_id

        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "%s %s -> %d (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            extra={"request_id": request_id, "status_code": response.status_code},
        )
        return response
