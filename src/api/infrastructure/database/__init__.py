"""Database infrastructure - async engines, sessions and ORM base."""

from infrastructure.database.models import Base, TimestampMixin

__all__ = [
    "Base",
    "TimestampMixin",
]
