"""Database utilities and models."""

from praxis.db.base import Base
from praxis.db import models  # noqa: F401  (imported for side effects)

__all__ = ["Base"]
