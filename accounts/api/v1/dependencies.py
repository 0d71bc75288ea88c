"""Dependencies for API endpoints (authentication, ownership)."""
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header

from accounts.common.exceptions import CredentialsException, InvalidTokenException
from accounts.domain.token_service import TokenType, decode_token, extract_subject


def parse_bearer(authorization: str) -> str:
    """Return the token of a ``Bearer <token>`` header value."""
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise InvalidTokenException("authorization header must be 'Bearer <token>'")
    return parts[1]


async def get_bearer_token(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Get the bearer token, failing when the header is missing.

    Raises:
        CredentialsException: If the header is missing
        InvalidTokenException: If the header is not a bearer header
    """
    if not authorization:
        raise CredentialsException("missing authorization header")
    return parse_bearer(authorization)


async def get_optional_bearer_token(
    authorization: Annotated[str | None, Header()] = None,
) -> str | None:
    if not authorization:
        return None
    return parse_bearer(authorization)


async def get_current_user_id(
    token: Annotated[str, Depends(get_bearer_token)],
) -> UUID:
    """Get the id of the caller from a valid access token.

    Validity is decided by signature and expiry alone; no lookup is made.
    """
    claims = decode_token(token, TokenType.ACCESS)
    return extract_subject(claims)


async def get_owned_user_id(
    user_id: UUID,
    current_user_id: Annotated[UUID, Depends(get_current_user_id)],
) -> UUID:
    """Ensure the path's user is the caller.

    Raises:
        CredentialsException: If the token belongs to someone else
    """
    if user_id != current_user_id:
        raise CredentialsException("wrong credentials")
    return user_id


# Type aliases for convenience
OwnedUserId = Annotated[UUID, Depends(get_owned_user_id)]
OptionalBearerToken = Annotated[str | None, Depends(get_optional_bearer_token)]
