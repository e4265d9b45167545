"""Access token signing/verification and refresh token generation."""

import secrets
import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from src.config import Settings, get_settings
from src.models.user import User

Clock = Callable[[], datetime]

REFRESH_TOKEN_BYTES = 32


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(UTC)


class TokenIssuer:
    """Builds signed access tokens and opaque refresh tokens."""

    def __init__(self, settings: Settings | None = None, clock: Clock | None = None):
        self.settings = settings or get_settings()
        self.clock = clock or utc_now

    @property
    def access_token_ttl(self) -> timedelta:
        return timedelta(minutes=self.settings.access_token_expire_minutes)

    @property
    def refresh_token_ttl(self) -> timedelta:
        return timedelta(days=self.settings.refresh_token_expire_days)

    def issue_access_token(self, user: User, ttl: timedelta | None = None) -> str:
        """Create a signed JWT carrying the user's id, email and role."""
        now = self.clock()
        expire = now + (ttl if ttl is not None else self.access_token_ttl)
        to_encode = {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role,
            "jti": str(uuid.uuid4()),
            "iss": self.settings.jwt_issuer,
            "aud": self.settings.jwt_audience,
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(to_encode, self.settings.jwt_secret, algorithm=self.settings.jwt_algorithm)

    def issue_refresh_token(self) -> tuple[str, datetime]:
        """Create an opaque random refresh token and its expiry.

        The token carries no claims; it is only meaningful when looked up
        against the user directory.
        """
        token = secrets.token_urlsafe(REFRESH_TOKEN_BYTES)
        return token, self.clock() + self.refresh_token_ttl

    def decode_access_token(self, token: str) -> dict[str, Any] | None:
        """Decode and validate an access token.

        Checks signature, issuer, audience and expiry. Returns None if any
        check fails.
        """
        try:
            return jwt.decode(
                token,
                self.settings.jwt_secret,
                algorithms=[self.settings.jwt_algorithm],
                audience=self.settings.jwt_audience,
                issuer=self.settings.jwt_issuer,
            )
        except JWTError:
            return None
