"""FastAPI dependencies for authentication and services."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.database import get_db
from src.models.enums import UserRole
from src.models.user import User
from src.services.auth import AuthService
from src.services.post_service import PostService
from src.services.storage import ObjectStorage
from src.services.tokens import TokenIssuer
from src.services.user_directory import SqlUserDirectory

security = HTTPBearer()


def get_token_issuer() -> TokenIssuer:
    """Get token issuer instance."""
    return TokenIssuer()


def get_object_storage() -> ObjectStorage:
    """Get object storage instance."""
    return ObjectStorage()


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    token_issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> AuthService:
    """Get auth service backed by the database user directory."""
    return AuthService(SqlUserDirectory(db), token_issuer=token_issuer)


def get_post_service(
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[ObjectStorage, Depends(get_object_storage)],
) -> PostService:
    """Get post service with dependencies."""
    return PostService(db, storage)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    token_issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> User:
    """Get the current authenticated user from JWT token."""
    token = credentials.credentials
    payload = token_issuer.decode_access_token(token)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = SqlUserDirectory(db).find_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


def require_author(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Restrict a route to users registered with the Author role."""
    if not UserRole(current_user.role).can_write_posts():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only authors can manage posts",
        )
    return current_user
