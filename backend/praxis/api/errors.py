"""Translate service-layer errors into HTTP responses."""
from __future__ import annotations

from fastapi import HTTPException

from praxis.services.errors import PraxisError


def to_http_exception(exc: PraxisError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)
