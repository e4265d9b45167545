"""Mixins for SQLAlchemy models."""

from datetime import datetime

from sqlalchemy import Column, DateTime, func


class TimestampMixin:
    """Mixin to add created_at and updated_at timestamp columns."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def stamp_created(self, now: datetime) -> None:
        """Set both timestamps from an injected clock instead of the server."""
        self.created_at = now
        self.updated_at = now

    def touch(self, now: datetime) -> None:
        """Record a modification at the given time."""
        self.updated_at = now
