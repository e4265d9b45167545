"""User model."""

from sqlalchemy import Column, DateTime, String

from src.database import Base
from src.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication and post ownership."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True)  # UUID, assigned on registration
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)  # 'Author' or 'Reader'
    refresh_token = Column(String(255), nullable=True, index=True)
    refresh_token_expiry = Column(DateTime(timezone=True), nullable=True)

    def copy(self) -> "User":
        """Return a detached copy carrying the same field values."""
        return User(
            id=self.id,
            email=self.email,
            password_hash=self.password_hash,
            role=self.role,
            refresh_token=self.refresh_token,
            refresh_token_expiry=self.refresh_token_expiry,
        )
