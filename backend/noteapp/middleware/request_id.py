"""
NoteApp Backend — Request ID Middleware
========================================

What:  Assigns every request a correlation ID and echoes it in X-Request-ID.
How:   Reuses a client-supplied X-Request-ID when present, otherwise generates
       a short UUID. The ID is stored in a ContextVar (read by the access log
       and the exception handlers) and on request.state.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Client-supplied IDs longer than this are replaced
MAX_REQUEST_ID_LENGTH = 64


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that tags each request/response pair with a correlation ID."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER, "").strip()
        if not rid or len(rid) > MAX_REQUEST_ID_LENGTH:
            rid = new_request_id()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
