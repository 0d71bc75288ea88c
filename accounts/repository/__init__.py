"""Repository layer for database operations."""
from accounts.repository.user_repository import UserRepository

__all__ = [
    "UserRepository",
]
