"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """User registration request.

    Fields are optional and nullable so missing or null values are reported
    by the auth service with its own messages instead of a validation error.
    """

    email: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=128)
    role: str | None = Field(default=None, max_length=20)


class LoginRequest(BaseModel):
    """User login request."""

    email: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=128)


class RefreshTokenRequest(BaseModel):
    """Refresh token exchange request."""

    refresh_token: str | None = Field(default=None, max_length=255)


class TokenPairResponse(BaseModel):
    """Access/refresh token pair response."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"  # noqa: S105


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    role: str
