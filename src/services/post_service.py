"""Post service: drafts, publishing and image attachments."""

import logging
import uuid
from dataclasses import dataclass
from typing import BinaryIO

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.config import get_settings
from src.models.enums import PostStatus
from src.models.post import Post, PostImage
from src.services.errors import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from src.services.storage import ObjectStorage, StorageError
from src.services.tokens import Clock, utc_now

logger = logging.getLogger(__name__)

POST_NOT_FOUND_MESSAGE = "Post not found."


@dataclass
class ImageUpload:
    """An uploaded image waiting to be stored."""

    filename: str | None
    content_type: str | None
    data: BinaryIO
    size: int


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


class PostService:
    """Service for post-related operations."""

    def __init__(
        self,
        db: Session,
        storage: ObjectStorage | None = None,
        clock: Clock | None = None,
        bucket: str | None = None,
    ):
        self.db = db
        self.storage = storage or ObjectStorage()
        self.clock = clock or utc_now
        self.bucket = bucket or get_settings().s3_bucket

    def create_post(
        self,
        author_id: str,
        idempotency_key: str | None,
        title: str | None,
        content: str | None,
    ) -> Post:
        """Create a draft post.

        The idempotency key can be used once; a retried request with the
        same key is rejected rather than creating a second post.
        """
        if _is_blank(idempotency_key) or _is_blank(title) or _is_blank(content):
            raise InvalidInputError("All fields are required.")

        if self.db.query(Post).filter(Post.idempotency_key == idempotency_key).first():
            raise ConflictError("IdempotencyKey has already been used.")

        now = self.clock()
        post = Post(
            id=str(uuid.uuid4()),
            author_id=author_id,
            idempotency_key=idempotency_key,
            title=title,
            content=content,
            status=PostStatus.DRAFT.value,
        )
        post.stamp_created(now)
        self.db.add(post)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("IdempotencyKey has already been used.") from None
        self.db.refresh(post)

        logger.info(f"User {author_id} created post {post.id}")
        return post

    def get_post(self, post_id: str, viewer_id: str | None = None) -> Post:
        """Get a post. Drafts are only visible to their author."""
        post = self.db.get(Post, post_id)
        if post is None:
            raise NotFoundError(POST_NOT_FOUND_MESSAGE)
        if post.status != PostStatus.PUBLISHED.value and post.author_id != viewer_id:
            raise NotFoundError(POST_NOT_FOUND_MESSAGE)
        return post

    def list_posts_by_author(self, author_id: str) -> list[Post]:
        return (
            self.db.query(Post)
            .filter(Post.author_id == author_id)
            .order_by(Post.created_at.desc())
            .all()
        )

    def list_published_posts(self) -> list[Post]:
        return (
            self.db.query(Post)
            .filter(Post.status == PostStatus.PUBLISHED.value)
            .order_by(Post.created_at.desc())
            .all()
        )

    def update_post(
        self, post_id: str, author_id: str, title: str | None, content: str | None
    ) -> Post:
        post = self._get_owned_post(post_id, author_id)
        if _is_blank(title) or _is_blank(content):
            raise InvalidInputError("All fields are required.")

        post.title = title
        post.content = content
        post.touch(self.clock())
        self.db.commit()
        self.db.refresh(post)
        return post

    def publish_post(self, post_id: str, author_id: str, status: str | None) -> Post:
        """Set a post's status to Draft or Published."""
        post = self._get_owned_post(post_id, author_id)
        if status not in (PostStatus.DRAFT.value, PostStatus.PUBLISHED.value):
            raise InvalidInputError("Invalid status.")

        post.status = status
        post.touch(self.clock())
        self.db.commit()
        self.db.refresh(post)

        logger.info(f"Post {post.id} is now {status}")
        return post

    def add_images(self, post_id: str, author_id: str, uploads: list[ImageUpload]) -> list[PostImage]:
        """Store uploaded images and attach them to the post.

        Empty uploads are skipped. Objects are named "{post_id}/{image_id}".
        If any upload or the final commit fails, nothing is recorded and the
        objects already uploaded by this call are removed again.
        """
        post = self._get_owned_post(post_id, author_id)
        self.storage.ensure_bucket(self.bucket)

        images = []
        uploaded: list[str] = []
        try:
            for upload in uploads:
                if upload.size == 0:
                    continue

                image_id = str(uuid.uuid4())
                object_name = f"{post.id}/{image_id}"
                self.storage.upload_object(
                    self.bucket, object_name, upload.data, upload.size, upload.content_type
                )
                uploaded.append(object_name)

                image = PostImage(
                    id=image_id,
                    post_id=post.id,
                    object_name=object_name,
                    content_type=upload.content_type,
                    created_at=self.clock(),
                )
                self.db.add(image)
                images.append(image)

            self.db.commit()
        except Exception:
            self.db.rollback()
            self._discard_objects(uploaded)
            raise

        for image in images:
            self.db.refresh(image)

        logger.info(f"Attached {len(images)} image(s) to post {post.id}")
        return images

    def delete_image(self, post_id: str, image_id: str, author_id: str) -> None:
        post = self._get_owned_post(post_id, author_id)
        image = next((img for img in post.images if img.id == image_id), None)
        if image is None:
            raise NotFoundError("Image not found.")

        self.storage.delete_object(self.bucket, image.object_name)
        post.images.remove(image)
        self.db.commit()

    def image_url(self, image: PostImage) -> str:
        """Presigned download URL for an image."""
        return self.storage.presigned_url(self.bucket, image.object_name)

    def _discard_objects(self, object_names: list[str]) -> None:
        for object_name in object_names:
            try:
                self.storage.delete_object(self.bucket, object_name)
            except StorageError as e:
                logger.error(f"Could not remove orphaned object {object_name}: {e}")

    def _get_owned_post(self, post_id: str, author_id: str) -> Post:
        post = self.db.get(Post, post_id)
        if post is None:
            raise NotFoundError(POST_NOT_FOUND_MESSAGE)
        if post.author_id != author_id:
            raise ForbiddenError("Access denied.")
        return post
