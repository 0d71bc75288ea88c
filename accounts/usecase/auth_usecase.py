"""Authentication usecase for login and token refresh."""
import logging

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from accounts.common.exceptions import (
    CredentialsException,
    ServiceUnavailableException,
    InternalServerException,
)
from accounts.domain.password_service import hash_password, needs_rehash, verify_dummy, verify_password
from accounts.domain.schemas import UserLoginRequest, TokenResponse
from accounts.domain.token_service import (
    TokenType,
    create_token_pair,
    decode_token,
    extract_subject,
)
from accounts.repository.user_repository import UserRepository
from accounts.repository.exceptions import (
    DatabaseConnectionException,
    DatabaseOperationException,
)

logger = logging.getLogger(__name__)


class AuthUsecase:
    """Usecase for authentication operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)

    async def login(self, request: UserLoginRequest) -> TokenResponse:
        """Authenticate user and return a token pair.

        An unknown account and a wrong password fail with the same message.
        Hashes made with outdated cost parameters are upgraded on the way.

        Args:
            request: User login request

        Returns:
            TokenResponse with access and refresh tokens

        Raises:
            CredentialsException: If credentials are invalid
        """
        if request.email:
            field, value = "email", request.email
        else:
            field, value = "username", request.username

        try:
            async with self.session.begin():
                user = await self.user_repo.find_by_unique_field(field, value)

                if not user:
                    await run_in_threadpool(verify_dummy, request.password)
                    raise CredentialsException("wrong credentials")

                if not await run_in_threadpool(verify_password, request.password, user.password_hash):
                    raise CredentialsException("wrong credentials")

                if needs_rehash(user.password_hash):
                    user.password_hash = await run_in_threadpool(hash_password, request.password)
                    await self.user_repo.save(user)
                    logger.info(f"Upgraded password hash for user {user.id}")
        except DatabaseConnectionException:
            raise ServiceUnavailableException()
        except DatabaseOperationException:
            raise InternalServerException("failed to log in")

        pair = create_token_pair(user.id)
        return TokenResponse(access_token=pair.access_token, refresh_token=pair.refresh_token)

    async def refresh(self, refresh_token: str, access_token: str | None = None) -> TokenResponse:
        """Exchange a refresh token for a fresh token pair.

        If the caller also presents its access token, that token may be
        expired but must be genuine and belong to the same user.

        Raises:
            TokenExpiredException: If the refresh token has expired
            InvalidTokenException: If either token is forged or of the wrong type
            CredentialsException: If the tokens disagree or the user is gone
        """
        user_id = extract_subject(decode_token(refresh_token, TokenType.REFRESH))

        if access_token is not None:
            access_claims = decode_token(access_token, TokenType.ACCESS, verify_exp=False)
            if extract_subject(access_claims) != user_id:
                raise CredentialsException("wrong credentials")

        async with self.session.begin():
            user = await self.user_repo.get_by_id(user_id)

        if not user:
            raise CredentialsException("wrong credentials")

        pair = create_token_pair(user.id)
        return TokenResponse(access_token=pair.access_token, refresh_token=pair.refresh_token)
