"""Usecase layer for application services."""
from accounts.usecase.auth_usecase import AuthUsecase
from accounts.usecase.user_usecase import UserUsecase

__all__ = [
    "AuthUsecase",
    "UserUsecase",
]
