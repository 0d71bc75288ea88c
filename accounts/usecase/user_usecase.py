"""User usecase for registration, profile read/update and account deletion."""
import logging
from uuid import UUID

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from accounts.common.exceptions import (
    ConflictException,
    CredentialsException,
    FormatException,
    InternalServerException,
    NotFoundException,
    ServiceUnavailableException,
)
from accounts.domain.password_service import hash_password, verify_dummy, verify_password
from accounts.domain.schemas import (
    UserRegisterRequest,
    UserResponse,
    UserUpdateRequest,
)
from accounts.repository.user_repository import UserRepository
from accounts.repository.exceptions import (
    DuplicateRecordException,
    DatabaseConnectionException,
    DatabaseOperationException,
)

logger = logging.getLogger(__name__)

# Staged update keys and the canonical field each one is committed onto
STAGED_FIELDS = {
    "new_name": "name",
    "new_username": "username",
    "new_email": "email",
    "new_password": "password",
}


def collect_changes(request: UserUpdateRequest) -> dict:
    """Merge canonical and staged keys of an update into one field map.

    A staged value wins over a canonical value sent in the same patch. The
    current password used for re-authentication is never part of the result;
    a new password comes back under the "password" key, still in plain text.
    """
    changes = request.model_dump(exclude_unset=True, exclude_none=True, exclude={"password"})
    for staged_key, field in STAGED_FIELDS.items():
        if staged_key in changes:
            changes[field] = changes.pop(staged_key)
    return changes


class UserUsecase:
    """Usecase for user account operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)

    async def register(self, request: UserRegisterRequest) -> UUID:
        """Register a new user.

        Args:
            request: User registration request

        Returns:
            ID of the created user

        Raises:
            ConflictException: If username or email already exists
            ServiceUnavailableException: If database connection fails
            InternalServerException: If database operation fails
        """
        # Hash password off the event loop (no DB operation)
        password_hash = await run_in_threadpool(hash_password, request.password)

        try:
            async with self.session.begin():
                user = await self.user_repo.insert(
                    name=request.name,
                    username=request.username,
                    email=request.email,
                    password_hash=password_hash,
                )
        except DuplicateRecordException:
            raise ConflictException("user with this username or email already exists")
        except DatabaseConnectionException:
            raise ServiceUnavailableException()
        except DatabaseOperationException:
            raise InternalServerException("failed to create user")

        logger.info(f"Registered user {user.id}")
        return user.id

    async def get_user(self, user_id: UUID) -> UserResponse:
        """Get a user's profile without its password hash.

        Raises:
            NotFoundException: If no user has this id
        """
        async with self.session.begin():
            user = await self.user_repo.get_by_id(user_id)

        if not user:
            raise NotFoundException(f"user with id {user_id} not found")

        return UserResponse.model_validate(user)

    async def update_user(self, user_id: UUID, request: UserUpdateRequest) -> None:
        """Apply a partial profile update.

        When the current password is supplied it is verified before anything
        is written. Changing the password requires it.

        Raises:
            FormatException: If the patch carries no changes
            NotFoundException: If no user has this id
            CredentialsException: If the current password is wrong or missing
            ConflictException: If the new username or email is taken
        """
        changes = collect_changes(request)
        if not changes:
            raise FormatException("no fields to update")

        new_password = changes.pop("password", None)
        if new_password is not None and request.password is None:
            raise CredentialsException("wrong password")

        try:
            async with self.session.begin():
                user = await self.user_repo.get_by_id(user_id)
                if not user:
                    raise NotFoundException(f"user with id {user_id} not found")

                if request.password is not None and not await run_in_threadpool(
                    verify_password, request.password, user.password_hash
                ):
                    raise CredentialsException("wrong password")

                if new_password is not None:
                    changes["password_hash"] = await run_in_threadpool(hash_password, new_password)

                for field, value in changes.items():
                    setattr(user, field, value)

                await self.user_repo.save(user)
        except DuplicateRecordException:
            raise ConflictException("user with that username or email already exists")
        except DatabaseConnectionException:
            raise ServiceUnavailableException()
        except DatabaseOperationException:
            raise InternalServerException("failed to update user")

        logger.info(f"Updated user {user_id}: {', '.join(sorted(changes))}")

    async def delete_user(self, user_id: UUID, password: str) -> None:
        """Delete an account after re-authenticating its owner.

        A missing user and a wrong password fail identically.

        Raises:
            CredentialsException: If the user is missing or the password is wrong
        """
        try:
            async with self.session.begin():
                user = await self.user_repo.get_by_id(user_id)
                if not user:
                    await run_in_threadpool(verify_dummy, password)
                    raise CredentialsException("wrong credentials")
                if not await run_in_threadpool(verify_password, password, user.password_hash):
                    raise CredentialsException("wrong credentials")

                await self.user_repo.remove(user)
        except DatabaseConnectionException:
            raise ServiceUnavailableException()
        except DatabaseOperationException:
            raise InternalServerException("failed to delete user")

        logger.info(f"Deleted user {user_id}")
