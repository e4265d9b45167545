"""Enums for model fields."""

from enum import StrEnum


class UserRole(StrEnum):
    """Roles a user can register with."""

    AUTHOR = "Author"
    READER = "Reader"

    def can_write_posts(self) -> bool:
        """Check if this role may create and edit posts."""
        return self == UserRole.AUTHOR


class PostStatus(StrEnum):
    """Publication state of a post."""

    DRAFT = "Draft"
    PUBLISHED = "Published"
