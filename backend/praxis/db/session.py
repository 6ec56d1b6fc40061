"""Engine and session factory bound to the configured database."""
from __future__ import annotations

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from praxis.core.config import settings


@lru_cache
def get_engine() -> Engine:
    """Create the engine lazily so importing the app never opens a connection."""
    return create_engine(settings.database_url, pool_pre_ping=True, future=True)


def SessionLocal() -> Session:
    """Return a new session bound to the application engine."""
    factory = sessionmaker(bind=get_engine(), autoflush=False, autocommit=False, future=True)
    return factory()
