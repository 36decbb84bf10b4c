"""
Cookbook Services — Request ID Middleware
===========================================

What:  Gives every request a correlation ID and echoes it back in the
       ``X-Request-ID`` response header.
How:   A client-supplied ``X-Request-ID`` is reused; otherwise a short
       random ID is generated. The ID is stored in a ContextVar (for loggers
       and other middleware) and on ``request.state`` (for handlers).
When:  Outermost middleware, so every log line of the request can carry it.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local; each in-flight request sees its own value
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
