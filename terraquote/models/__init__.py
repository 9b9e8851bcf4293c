"""SQLAlchemy ORM models.

Import all models here so Alembic and Base.metadata.create_all() discover them.
"""

from __future__ import annotations

from terraquote.models.base import Base
from terraquote.models.tariff import CfeTariff

__all__ = [
    "Base",
    "CfeTariff",
]
