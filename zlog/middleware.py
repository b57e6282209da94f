"""
Middleware that exposes request-scoped values to log records.

- RequestContextMiddleware: binds requestID for the duration of each request

Inside a handler, ``info().context(None, ["requestID"])`` picks the value up.
"""

import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from structlog.contextvars import bound_contextvars

REQUEST_ID_HEADER = "X-Request-ID"
REQUEST_ID_KEY = "requestID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind X-Request-ID into the logging context for every request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        # Use client-provided ID or generate one
        request_id = request.headers.get(REQUEST_ID_HEADER, uuid.uuid4().hex)
        request.state.request_id = request_id

        # restores any outer requestID on exit
        with bound_contextvars(**{REQUEST_ID_KEY: request_id}):
            response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
