"""
Cookbook Services — Recovery Middleware
=========================================

What:  Last line of defence against exceptions nothing else handled.
How:   Logs the exception with its traceback and request ID and answers
       ``500 {"error": "internal server error"}``. No exception text,
       traceback or SQL reaches the client.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from cookbook.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

INTERNAL_ERROR_BODY = {"error": "internal server error"}


class RecoveryMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(
                "[%s] Unhandled error on %s %s: %s",
                request_id_var.get(""),
                request.method,
                request.url.path,
                exc,
                exc_info=True,
            )
            return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)
