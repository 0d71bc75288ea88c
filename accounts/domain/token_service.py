"""JWT access and refresh token issuance and validation."""
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from uuid import UUID

import jwt
from pydantic import BaseModel, ValidationError

from accounts.common.config import settings
from accounts.common.exceptions import InvalidTokenException, TokenExpiredException


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


class TokenClaims(BaseModel):
    """JWT token payload."""

    sub: str  # Subject (user_id)
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp
    type: TokenType
    jti: str  # Unique token id


@dataclass
class TokenPair:
    """Access and refresh tokens minted together."""

    access_token: str
    refresh_token: str


def _create_token(user_id: UUID, token_type: TokenType, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    expire = now + expires_delta

    claims = TokenClaims(
        sub=str(user_id),
        exp=int(expire.timestamp()),
        iat=int(now.timestamp()),
        type=token_type,
        jti=secrets.token_urlsafe(16),
    )

    return jwt.encode(
        claims.model_dump(mode="json"),
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def create_access_token(user_id: UUID, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token.

    Args:
        user_id: The user's UUID
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    return _create_token(user_id, TokenType.ACCESS, expires_delta)


def create_refresh_token(user_id: UUID, expires_delta: timedelta | None = None) -> str:
    """Create a JWT refresh token, only good for minting new access tokens."""
    if expires_delta is None:
        expires_delta = timedelta(days=settings.refresh_token_expire_days)
    return _create_token(user_id, TokenType.REFRESH, expires_delta)


def create_token_pair(user_id: UUID) -> TokenPair:
    return TokenPair(
        access_token=create_access_token(user_id),
        refresh_token=create_refresh_token(user_id),
    )


def decode_token(
    token: str,
    expected_type: TokenType = TokenType.ACCESS,
    verify_exp: bool = True,
) -> TokenClaims:
    """Decode and validate a JWT.

    Args:
        token: The JWT token string
        expected_type: Which kind of token the caller requires
        verify_exp: Whether an expired token is rejected

    Returns:
        TokenClaims of the valid token

    Raises:
        TokenExpiredException: If token is expired
        InvalidTokenException: If signature, format, claims or type are wrong
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={
                "require": ["sub", "exp", "iat"],
                "verify_exp": verify_exp,
            },
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredException()
    except jwt.InvalidTokenError:
        raise InvalidTokenException()

    try:
        claims = TokenClaims(**payload)
    except ValidationError:
        raise InvalidTokenException("invalid token payload")

    if claims.type != expected_type:
        raise InvalidTokenException(f"expected {expected_type.value} token")

    return claims


def extract_subject(claims: TokenClaims) -> UUID:
    """Extract user ID from decoded claims.

    Raises:
        InvalidTokenException: If the subject is not a UUID
    """
    try:
        return UUID(claims.sub)
    except (ValueError, AttributeError):
        raise InvalidTokenException("invalid token payload")
