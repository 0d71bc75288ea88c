"""User repository for database operations."""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, OperationalError, DBAPIError

from accounts.models.user import User
from .exceptions import (
    DuplicateRecordException,
    DatabaseConnectionException,
    DatabaseOperationException,
)

UNIQUE_FIELDS = ("username", "email")


class UserRepository:
    """Repository for User model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _flush(self, user: User, action: str) -> User:
        try:
            await self.session.flush()
            await self.session.refresh(user)
            return user
        except IntegrityError as e:
            error_msg = str(e.orig).lower()
            if "unique" in error_msg or "duplicate" in error_msg:
                raise DuplicateRecordException("User already exists", detail=str(e.orig))
            raise DatabaseOperationException(f"Failed to {action} user", detail=str(e.orig))
        except OperationalError as e:
            raise DatabaseConnectionException(detail=str(e.orig))
        except DBAPIError as e:
            raise DatabaseOperationException(detail=str(e.orig))

    async def insert(self, name: str, username: str, email: str, password_hash: str) -> User:
        """Create a new user.

        Args:
            name: Display name
            username: Username
            email: Email address
            password_hash: Hashed password

        Returns:
            Created User object

        Raises:
            DuplicateRecordException: If username or email already exists
            DatabaseConnectionException: If database connection fails
            DatabaseOperationException: If database operation fails
        """
        user = User(
            name=name,
            username=username,
            email=email,
            password_hash=password_hash,
            favorites=[],
        )
        self.session.add(user)
        return await self._flush(user, "create")

    async def get_by_id(self, user_id: UUID) -> User | None:
        """Get user by ID.

        Args:
            user_id: User UUID

        Returns:
            User object if found, None otherwise
        """
        result = await self.session.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def find_by_unique_field(self, field: str, value: str) -> User | None:
        """Get user by one of its unique fields.

        Args:
            field: Either "username" or "email"
            value: Value to match exactly

        Returns:
            User object if found, None otherwise
        """
        if field not in UNIQUE_FIELDS:
            raise ValueError(f"'{field}' is not a unique user field")

        result = await self.session.execute(
            select(User).where(getattr(User, field) == value)
        )
        return result.scalar_one_or_none()

    async def save(self, user: User) -> User:
        """Persist pending changes of a loaded user.

        Raises:
            DuplicateRecordException: If new username or email is taken
            DatabaseConnectionException: If database connection fails
            DatabaseOperationException: If database operation fails
        """
        return await self._flush(user, "update")

    async def remove(self, user: User) -> None:
        """Delete a user permanently."""
        try:
            await self.session.delete(user)
            await self.session.flush()
        except OperationalError as e:
            raise DatabaseConnectionException(detail=str(e.orig))
        except DBAPIError as e:
            raise DatabaseOperationException(detail=str(e.orig))
