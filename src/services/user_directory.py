"""User directory implementations backing the auth service.

Both implementations honour the same contract: lookups return a copy or a
session-bound instance that the caller may modify, and nothing becomes
visible to other callers until ``insert`` or ``update`` is called.
"""

import logging
import threading
from typing import Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.models.user import User
from src.services.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

EMAIL_TAKEN_MESSAGE = "Email already registered."


class UserDirectory(Protocol):
    """Storage of user records keyed by id, email and refresh token."""

    def find_by_email(self, email: str) -> User | None: ...

    def find_by_id(self, user_id: str) -> User | None: ...

    def find_by_refresh_token(self, refresh_token: str) -> User | None: ...

    def insert(self, user: User) -> None: ...

    def update(self, user: User) -> None: ...

    def list_all(self) -> list[User]: ...


class SqlUserDirectory:
    """User directory on top of a SQLAlchemy session.

    Email uniqueness is enforced by the unique index on ``users.email``.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def find_by_id(self, user_id: str) -> User | None:
        return self.db.get(User, user_id)

    def find_by_refresh_token(self, refresh_token: str) -> User | None:
        if not refresh_token:
            return None
        return self.db.query(User).filter(User.refresh_token == refresh_token).first()

    def insert(self, user: User) -> None:
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            # Only the unique email index maps to a conflict; other violations propagate
            if self.find_by_email(user.email) is None:
                raise
            logger.warning(f"Duplicate registration rejected for user {user.id}")
            raise ConflictError(EMAIL_TAKEN_MESSAGE) from None
        self.db.refresh(user)

    def update(self, user: User) -> None:
        if self.db.get(User, user.id) is None:
            raise NotFoundError("User not found.")
        self.db.merge(user)
        self.db.commit()

    def list_all(self) -> list[User]:
        return self.db.query(User).all()


class InMemoryUserDirectory:
    """Process-local user directory.

    Each instance owns its own state. A lock guards the email index and the
    refresh-token index so check-and-insert and rotation are atomic.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_id: dict[str, User] = {}
        self._id_by_email: dict[str, str] = {}
        self._id_by_refresh_token: dict[str, str] = {}

    def find_by_email(self, email: str) -> User | None:
        with self._lock:
            user_id = self._id_by_email.get(email)
            return self._by_id[user_id].copy() if user_id else None

    def find_by_id(self, user_id: str) -> User | None:
        with self._lock:
            user = self._by_id.get(user_id)
            return user.copy() if user else None

    def find_by_refresh_token(self, refresh_token: str) -> User | None:
        with self._lock:
            user_id = self._id_by_refresh_token.get(refresh_token)
            return self._by_id[user_id].copy() if user_id else None

    def insert(self, user: User) -> None:
        with self._lock:
            if user.email in self._id_by_email:
                raise ConflictError(EMAIL_TAKEN_MESSAGE)
            stored = user.copy()
            self._by_id[stored.id] = stored
            self._id_by_email[stored.email] = stored.id
            if stored.refresh_token:
                self._id_by_refresh_token[stored.refresh_token] = stored.id

    def update(self, user: User) -> None:
        with self._lock:
            previous = self._by_id.get(user.id)
            if previous is None:
                raise NotFoundError("User not found.")
            if previous.email != user.email:
                if user.email in self._id_by_email:
                    raise ConflictError(EMAIL_TAKEN_MESSAGE)
                del self._id_by_email[previous.email]
                self._id_by_email[user.email] = user.id
            if previous.refresh_token:
                self._id_by_refresh_token.pop(previous.refresh_token, None)
            stored = user.copy()
            self._by_id[stored.id] = stored
            if stored.refresh_token:
                self._id_by_refresh_token[stored.refresh_token] = stored.id

    def list_all(self) -> list[User]:
        with self._lock:
            return [user.copy() for user in self._by_id.values()]
