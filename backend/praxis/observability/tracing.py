"""Tracing and metric helpers wrapping Opik.

Every helper degrades to a no-op when Opik is disabled, so call sites never
need to guard on configuration.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from time import perf_counter
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional

from praxis.core.context import get_request_id
from praxis.observability.client import get_opik_client

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from opik.api_objects.trace.trace_client import Trace
else:  # pragma: no cover - typing helper
    Trace = object  # type: ignore[assignment]

logger = logging.getLogger(__name__)


def _trace_metadata(
    metadata: Optional[Dict[str, Any]],
    user_id: Optional[Any],
    request_id: Optional[str],
) -> Optional[Dict[str, Any]]:
    merged = dict(metadata or {})
    if user_id:
        merged.setdefault("user_id", str(user_id))
    request_id = request_id or get_request_id()
    if request_id:
        merged.setdefault("request_id", request_id)
    return merged or None


def _quietly(action: str, call, *args: Any, **kwargs: Any) -> Any:
    try:
        return call(*args, **kwargs)
    except Exception:  # pragma: no cover - SDK guard
        logger.debug("Opik call failed while trying to %s", action, exc_info=True)
        return None


@contextmanager
def trace(
    name: str,
    metadata: Optional[Dict[str, Any]] = None,
    user_id: Optional[Any] = None,
    request_id: Optional[str] = None,
) -> Iterator[Optional["Trace"]]:
    """Open an Opik trace around a block; errors are attached before re-raising."""
    client = get_opik_client()
    opik_trace: Optional["Trace"] = None
    if client:
        opik_trace = _quietly(
            f"start trace {name}",
            client.trace,
            name=name,
            metadata=_trace_metadata(metadata, user_id, request_id),
        )

    try:
        yield opik_trace
    except Exception as exc:
        if opik_trace:
            _quietly(f"annotate trace {name}", opik_trace.update, error_info={"message": str(exc)})
        raise
    finally:
        if opik_trace:
            _quietly(f"end trace {name}", opik_trace.end)


def log_metric(name: str, value: float | int, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Record a metric as a tiny Opik trace."""
    client = get_opik_client()
    if client:
        _quietly(f"record metric {name}", client.trace, name=f"metric:{name}", metadata={"value": value, **(metadata or {})})


@contextmanager
def timed_metric(name: str, metadata: Optional[Dict[str, Any]] = None) -> Iterator[None]:
    """Emit ``<name>.latency_ms`` once the block finishes, successful or not."""
    start = perf_counter()
    try:
        yield
    finally:
        log_metric(f"{name}.latency_ms", (perf_counter() - start) * 1000, metadata=metadata)
