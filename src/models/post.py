"""Post and post image models."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.enums import PostStatus
from src.models.mixins import TimestampMixin


class Post(Base, TimestampMixin):
    """Blog post written by an author."""

    __tablename__ = "posts"

    id = Column(String(36), primary_key=True)
    author_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    idempotency_key = Column(String(255), unique=True, nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=PostStatus.DRAFT.value, index=True)

    # Relationships
    author = relationship("User", backref="posts")
    images = relationship(
        "PostImage",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="PostImage.created_at",
    )


class PostImage(Base):
    """Image attached to a post; the bytes live in object storage."""

    __tablename__ = "post_images"

    id = Column(String(36), primary_key=True)
    post_id = Column(String(36), ForeignKey("posts.id"), nullable=False, index=True)
    object_name = Column(String(255), nullable=False)  # "{post_id}/{image_id}"
    content_type = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    post = relationship("Post", back_populates="images")
