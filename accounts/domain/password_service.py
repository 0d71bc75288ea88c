"""Password hashing and verification with Argon2."""
from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, InvalidHashError

from accounts.common.config import settings
from accounts.common.exceptions import PasswordHashError


ph = PasswordHasher(
    time_cost=settings.argon2_time_cost,
    memory_cost=settings.argon2_memory_cost,
    parallelism=settings.argon2_parallelism,
)

_dummy_hash: str | None = None


def hash_password(password: str) -> str:
    """Hash a password using Argon2.

    Args:
        password: Plain text password

    Returns:
        Hashed password string (salted, so two calls never match literally)
    """
    return ph.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    The comparison itself is constant time.

    Args:
        password: Plain text password to verify
        hashed_password: The hashed password to check against

    Returns:
        True if password matches, False otherwise

    Raises:
        PasswordHashError: If the stored hash is malformed
    """
    try:
        return ph.verify(hashed_password, password)
    except VerifyMismatchError:
        return False
    except InvalidHashError:
        raise PasswordHashError()


def needs_rehash(hashed_password: str) -> bool:
    """Check if a password hash was made with outdated cost parameters."""
    try:
        return ph.check_needs_rehash(hashed_password)
    except InvalidHashError:
        raise PasswordHashError()


def verify_dummy(password: str) -> None:
    """Spend the same effort as a real verification, for unknown accounts."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = ph.hash("dummy-password-for-timing")
    verify_password(password, _dummy_hash)
