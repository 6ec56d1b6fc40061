"""Per-request context utilities."""
from __future__ import annotations

from contextvars import ContextVar

DEFAULT_CLIENT_SESSION = "default"

request_id_ctx_var: ContextVar[str | None] = ContextVar("request_id", default=None)
# Identifies the browser tab/session that owns session-scoped drafts.
client_session_ctx_var: ContextVar[str | None] = ContextVar("client_session", default=None)


def get_request_id() -> str | None:
    """Return the current request id if available."""
    return request_id_ctx_var.get()


def get_client_session() -> str:
    """Return the caller's client session key, falling back to a shared default."""
    return client_session_ctx_var.get() or DEFAULT_CLIENT_SESSION
