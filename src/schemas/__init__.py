"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import (
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenPairResponse,
    UserResponse,
)
from src.schemas.post import (
    PostCreate,
    PostImageResponse,
    PostResponse,
    PostStatusUpdate,
    PostUpdate,
)

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "RefreshTokenRequest",
    "TokenPairResponse",
    "UserResponse",
    "PostCreate",
    "PostUpdate",
    "PostStatusUpdate",
    "PostResponse",
    "PostImageResponse",
]
