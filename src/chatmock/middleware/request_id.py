"""Request ID middleware — correlate a bot's REST calls in the log.

Learn: Each HTTP request is tagged with the caller's X-Request-ID (or a
fresh UUID). The id is bound into structlog's contextvars, so relay log
lines emitted while handling e.g. a send-message call carry it too, and
it is echoed back on the response.
"""

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag every request (and its log lines) with an id."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            endpoint="encrypted" if request.url.scheme == "https" else "plain",
        )

        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        logger.debug(
            "http.request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
        )
        return response
