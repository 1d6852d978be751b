"""ASGI middleware for the quickcmd API.

``RequestIdMiddleware`` forwards or mints an X-Request-ID and keeps it in a
ContextVar so the logging layer can stamp it on every line.
"""

import uuid
from contextvars import ContextVar
from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id() -> str:
    """Return the current request's ID, or an empty string outside a request."""
    return _request_id_var.get()


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Request-ID if sent, else generate a UUID4.

    The ID is echoed back on the response.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        token = _request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            _request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
