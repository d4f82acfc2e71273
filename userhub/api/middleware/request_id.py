"""Request ID middleware — binds request context for every log line."""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

log = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


def resolve_request_id(incoming: str | None) -> str:
    """Keep a well-formed UUID from the client, otherwise mint a fresh one."""
    if incoming:
        try:
            return str(uuid.UUID(incoming))
        except ValueError:
            pass
    return str(uuid.uuid4())


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 1)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id: in log context, on ``request.state``
    and in the response header."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id

        tokens = structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            log.exception("request failed", duration_ms=_elapsed_ms(start))
            raise
        else:
            response.headers[REQUEST_ID_HEADER] = request_id
            log.info(
                "request completed",
                status_code=response.status_code,
                duration_ms=_elapsed_ms(start),
            )
            return response
        finally:
            structlog.contextvars.reset_contextvars(**tokens)
