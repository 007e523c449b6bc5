"""Shared API dependencies."""
from uuid import UUID

from minibank.database import get_db

__all__ = ["get_db", "id_str"]


def id_str(value: UUID) -> str:
    """Render a validated UUID the way ids are stored."""
    return str(value)
