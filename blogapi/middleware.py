"""Middleware — request IDs, post index generation header."""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from blogapi.services.post_index import get_post_index

# Current request ID, readable from handlers and services
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a request ID to every request/response cycle.

    Uses ``X-Request-ID`` from the request when present, otherwise a new
    UUID4, and echoes it back on the response.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request_id_var.set(rid)

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response


class PostsGenerationMiddleware(BaseHTTPMiddleware):
    """Expose which post collection served the response as ``X-Posts-Generation``.

    Clients comparing the header across requests can tell when a rebuild
    has swapped in a new collection.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        response.headers["X-Posts-Generation"] = str(get_post_index().generation)
        return response
