"""Authentication service: registration, login and refresh-token rotation."""

import logging
import re
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from src.models.enums import UserRole
from src.models.user import User
from src.services.errors import ConflictError, ForbiddenError, InvalidInputError
from src.services.passwords import dummy_verify, hash_password, verify_password
from src.services.tokens import Clock, TokenIssuer, utc_now
from src.services.user_directory import EMAIL_TAKEN_MESSAGE, UserDirectory

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."
INVALID_REFRESH_TOKEN_MESSAGE = "Refresh Token is invalid."


@dataclass(frozen=True)
class TokenPair:
    """Access/refresh token pair returned by every auth operation."""

    access_token: str
    refresh_token: str


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class AuthService:
    """Orchestrates the user directory, password hasher and token issuer.

    Refresh expiries are stamped by the token issuer and checked against
    ``self.clock``, so both must read the same clock. Without an explicit
    clock the issuer's clock is used.
    """

    def __init__(
        self,
        directory: UserDirectory,
        token_issuer: TokenIssuer | None = None,
        clock: Clock | None = None,
        access_token_ttl: timedelta | None = None,
    ):
        self.directory = directory
        if clock is None:
            clock = token_issuer.clock if token_issuer is not None else utc_now
        self.clock = clock
        self.token_issuer = token_issuer or TokenIssuer(clock=clock)
        self.access_token_ttl = access_token_ttl or self.token_issuer.access_token_ttl

    def register(self, email: str | None, password: str | None, role: str | None) -> TokenPair:
        """Create a new user and issue its first token pair.

        Checks run in a fixed order: blank fields, email uniqueness, email
        format, role. Nothing is written unless every check passes.
        """
        if _is_blank(email) or _is_blank(password) or _is_blank(role):
            raise InvalidInputError("All fields are required.")

        if self.directory.find_by_email(email) is not None:
            raise ConflictError(EMAIL_TAKEN_MESSAGE)

        if not EMAIL_PATTERN.match(email):
            raise InvalidInputError("Invalid email format.")

        if role not in (UserRole.AUTHOR.value, UserRole.READER.value):
            raise InvalidInputError("Invalid role")

        user = User(
            id=str(uuid.uuid4()),
            email=email,
            password_hash=hash_password(password),
            role=role,
            refresh_token=None,
            refresh_token_expiry=None,
        )
        tokens = self._issue_tokens(user)

        # A concurrent registration with the same email surfaces here as ConflictError
        self.directory.insert(user)

        logger.info(f"Registered user {user.id} with role {role}")
        return tokens

    def login(self, email: str | None, password: str | None) -> TokenPair:
        """Verify credentials and rotate the user's token pair."""
        user = self.directory.find_by_email(email) if email else None

        if user is None:
            dummy_verify(password or "")
            logger.warning("Login rejected: unknown email")
            raise ForbiddenError(INVALID_CREDENTIALS_MESSAGE)

        if not verify_password(password or "", user.password_hash):
            logger.warning(f"Login rejected: wrong password for user {user.id}")
            raise ForbiddenError(INVALID_CREDENTIALS_MESSAGE)

        tokens = self._issue_tokens(user)
        self.directory.update(user)

        logger.info(f"User {user.id} logged in")
        return tokens

    def refresh_token(self, refresh_token: str | None) -> TokenPair:
        """Exchange a live refresh token for a new pair.

        The submitted token is invalidated by overwrite, so it can only be
        used once.
        """
        user = self.directory.find_by_refresh_token(refresh_token) if refresh_token else None

        if user is None or not self._refresh_token_is_live(user):
            logger.warning("Refresh rejected: unknown or expired refresh token")
            raise InvalidInputError(INVALID_REFRESH_TOKEN_MESSAGE)

        tokens = self._issue_tokens(user)
        self.directory.update(user)

        logger.info(f"Rotated refresh token for user {user.id}")
        return tokens

    def _refresh_token_is_live(self, user: User) -> bool:
        if user.refresh_token_expiry is None:
            return False
        return self.clock() < _as_utc(user.refresh_token_expiry)

    def _issue_tokens(self, user: User) -> TokenPair:
        """Issue a new pair and write the refresh half onto the user record."""
        access_token = self.token_issuer.issue_access_token(user, self.access_token_ttl)
        refresh_token, expiry = self.token_issuer.issue_refresh_token()

        user.refresh_token = refresh_token
        user.refresh_token_expiry = expiry

        return TokenPair(access_token=access_token, refresh_token=refresh_token)
