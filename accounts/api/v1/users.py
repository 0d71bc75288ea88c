"""User management API endpoints."""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from accounts.common.database import get_db
from accounts.common.responses import ERROR_RESPONSES
from accounts.domain.schemas import (
    UserCreatedResponse,
    UserDeleteRequest,
    UserRegisterRequest,
    UserResponse,
    UserUpdateRequest,
)
from accounts.usecase.user_usecase import UserUsecase
from .dependencies import OwnedUserId

router = APIRouter(responses=ERROR_RESPONSES)


@router.post("/users", response_model=UserCreatedResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_request: UserRegisterRequest,
    session: AsyncSession = Depends(get_db),
):
    """Register a new user.

    Args:
        user_request: User registration request
        session: Database session

    Returns:
        The new user's id
    """
    usecase = UserUsecase(session)
    user_id = await usecase.register(user_request)
    return UserCreatedResponse(id=user_id)


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    owner_id: OwnedUserId,
    session: AsyncSession = Depends(get_db),
):
    """Get the caller's own profile."""
    usecase = UserUsecase(session)
    return await usecase.get_user(owner_id)


@router.patch("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_user(
    owner_id: OwnedUserId,
    update_request: UserUpdateRequest,
    session: AsyncSession = Depends(get_db),
):
    """Update the caller's own profile.

    Changing the password needs the current one in ``password``.
    """
    usecase = UserUsecase(session)
    await usecase.update_user(owner_id, update_request)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    owner_id: OwnedUserId,
    delete_request: UserDeleteRequest,
    session: AsyncSession = Depends(get_db),
):
    """Delete the caller's own account after checking its password."""
    usecase = UserUsecase(session)
    await usecase.delete_user(owner_id, delete_request.password)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
