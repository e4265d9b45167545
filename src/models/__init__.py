"""SQLAlchemy models."""

from src.models.post import Post, PostImage
from src.models.user import User

__all__ = [
    "User",
    "Post",
    "PostImage",
]
