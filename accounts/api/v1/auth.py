"""Authentication API endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from accounts.common.database import get_db
from accounts.common.responses import ERROR_RESPONSES
from accounts.domain.schemas import RefreshTokenRequest, TokenResponse, UserLoginRequest
from accounts.usecase.auth_usecase import AuthUsecase
from .dependencies import OptionalBearerToken

router = APIRouter(responses=ERROR_RESPONSES)


@router.post("/auth/login", response_model=TokenResponse)
async def login(
    login_request: UserLoginRequest,
    session: AsyncSession = Depends(get_db),
):
    """Login with username or email and get an access/refresh token pair.

    Args:
        login_request: User login request
        session: Database session

    Returns:
        Access and refresh tokens
    """
    usecase = AuthUsecase(session)
    return await usecase.login(login_request)


@router.post("/auth/refresh-token", response_model=TokenResponse)
async def refresh_token(
    refresh_request: RefreshTokenRequest,
    access_token: OptionalBearerToken,
    session: AsyncSession = Depends(get_db),
):
    """Exchange a refresh token for a new token pair.

    Args:
        refresh_request: Body carrying the refresh token
        access_token: The caller's current (possibly expired) access token
        session: Database session

    Returns:
        New access and refresh tokens
    """
    usecase = AuthUsecase(session)
    return await usecase.refresh(refresh_request.refresh_token, access_token)
