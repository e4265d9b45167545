"""Password hashing and verification."""

from functools import lru_cache

from passlib.context import CryptContext

from src.config import get_settings

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=get_settings().bcrypt_rounds,
)


def hash_password(password: str) -> str:
    """Hash a password with a random salt embedded in the result."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Returns False instead of raising when the hash is empty or not
    recognised by the context.
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return pwd_context.hash("dummy-password-for-timing")


def dummy_verify(plain_password: str) -> bool:
    """Burn one verification so an unknown account costs the same as a wrong password."""
    pwd_context.verify(plain_password, _dummy_hash())
    return False
