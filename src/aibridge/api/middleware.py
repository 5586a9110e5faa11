"""HTTP middleware for request correlation."""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware

from aibridge.core.request_context import (
    REQUEST_ID_HEADER,
    request_id_scope,
    resolve_request_id,
)


class RequestCorrelationMiddleware(BaseHTTPMiddleware):
    """Bind a request id for the handler's logs and echo it on the response."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        with request_id_scope(request_id):
            response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
