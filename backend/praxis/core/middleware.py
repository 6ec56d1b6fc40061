"""Custom FastAPI middleware."""
from __future__ import annotations

from typing import Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from praxis.core.context import client_session_ctx_var, request_id_ctx_var

CLIENT_SESSION_HEADER = "X-Client-Session"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind the request id and client session key for the lifetime of a request."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Response]) -> Response:  # type: ignore[override]
        request_id = request.headers.get("X-Request-Id") or str(uuid4())
        client_session = request.headers.get(CLIENT_SESSION_HEADER) or None
        request.state.request_id = request_id
        request.state.client_session = client_session
        request_token = request_id_ctx_var.set(request_id)
        session_token = client_session_ctx_var.set(client_session)

        try:
            response = await call_next(request)
        finally:
            client_session_ctx_var.reset(session_token)
            request_id_ctx_var.reset(request_token)

        response.headers["X-Request-Id"] = request_id
        return response
