"""Post API endpoints."""

from io import BytesIO
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile, status

from src.api.dependencies import get_current_user, get_post_service, require_author
from src.models.post import Post, PostImage
from src.models.user import User
from src.schemas.post import (
    PostCreate,
    PostImageResponse,
    PostResponse,
    PostStatusUpdate,
    PostUpdate,
)
from src.services.post_service import ImageUpload, PostService

router = APIRouter(prefix="/api/v1/posts", tags=["posts"])


def build_image_response(image: PostImage, post_service: PostService) -> PostImageResponse:
    return PostImageResponse(
        id=image.id,
        post_id=image.post_id,
        url=post_service.image_url(image),
        content_type=image.content_type,
        created_at=image.created_at,
    )


def build_post_response(post: Post, post_service: PostService) -> PostResponse:
    """Build a post response, presigning image URLs at read time."""
    return PostResponse(
        id=post.id,
        author_id=post.author_id,
        title=post.title,
        content=post.content,
        status=post.status,
        created_at=post.created_at,
        updated_at=post.updated_at,
        images=[build_image_response(image, post_service) for image in post.images],
    )


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    post_data: PostCreate,
    current_user: Annotated[User, Depends(require_author)],
    post_service: Annotated[PostService, Depends(get_post_service)],
):
    """Create a draft post."""
    post = post_service.create_post(
        current_user.id, post_data.idempotency_key, post_data.title, post_data.content
    )
    return build_post_response(post, post_service)


@router.get("", response_model=list[PostResponse])
def get_published_posts(
    current_user: Annotated[User, Depends(get_current_user)],
    post_service: Annotated[PostService, Depends(get_post_service)],
):
    """Get all published posts."""
    return [build_post_response(p, post_service) for p in post_service.list_published_posts()]


@router.get("/mine", response_model=list[PostResponse])
def get_my_posts(
    current_user: Annotated[User, Depends(get_current_user)],
    post_service: Annotated[PostService, Depends(get_post_service)],
):
    """Get all posts written by the current user, drafts included."""
    posts = post_service.list_posts_by_author(current_user.id)
    return [build_post_response(p, post_service) for p in posts]


@router.get("/{post_id}", response_model=PostResponse)
def get_post(
    post_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    post_service: Annotated[PostService, Depends(get_post_service)],
):
    """Get a specific post."""
    post = post_service.get_post(post_id, viewer_id=current_user.id)
    return build_post_response(post, post_service)


@router.put("/{post_id}", response_model=PostResponse)
def update_post(
    post_id: str,
    post_data: PostUpdate,
    current_user: Annotated[User, Depends(require_author)],
    post_service: Annotated[PostService, Depends(get_post_service)],
):
    """Edit a post's title and content."""
    post = post_service.update_post(post_id, current_user.id, post_data.title, post_data.content)
    return build_post_response(post, post_service)


@router.patch("/{post_id}/status", response_model=PostResponse)
def update_post_status(
    post_id: str,
    status_data: PostStatusUpdate,
    current_user: Annotated[User, Depends(require_author)],
    post_service: Annotated[PostService, Depends(get_post_service)],
):
    """Publish or unpublish a post."""
    post = post_service.publish_post(post_id, current_user.id, status_data.status)
    return build_post_response(post, post_service)


@router.post(
    "/{post_id}/images",
    response_model=list[PostImageResponse],
    status_code=status.HTTP_201_CREATED,
)
def upload_images(
    post_id: str,
    current_user: Annotated[User, Depends(require_author)],
    post_service: Annotated[PostService, Depends(get_post_service)],
    images: Annotated[list[UploadFile], File()],
):
    """Upload one or more images to a post."""
    uploads = []
    for image in images:
        content = image.file.read()
        uploads.append(
            ImageUpload(
                filename=image.filename,
                content_type=image.content_type,
                data=BytesIO(content),
                size=len(content),
            )
        )

    stored = post_service.add_images(post_id, current_user.id, uploads)
    return [build_image_response(image, post_service) for image in stored]


@router.delete("/{post_id}/images/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_image(
    post_id: str,
    image_id: str,
    current_user: Annotated[User, Depends(require_author)],
    post_service: Annotated[PostService, Depends(get_post_service)],
):
    """Remove an image from a post and from object storage."""
    post_service.delete_image(post_id, image_id, current_user.id)
