"""Pydantic schemas for API request/response."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator


def _check_name(v: str | None) -> str | None:
    if v is not None and v.strip() != v:
        raise ValueError("name should not have white spaces around")
    return v


def _check_username(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if len(v) < 4:
        raise ValueError("username should have at least 4 characters")
    if any(c.isspace() for c in v):
        raise ValueError("username should not have white spaces")
    return v


def _check_password(v: str | None) -> str | None:
    if v is not None and any(c.isspace() for c in v):
        raise ValueError("password should not have white spaces")
    return v


# ===== Auth Schemas =====


class UserRegisterRequest(BaseModel):
    """User registration request."""

    name: str = Field(..., min_length=1, max_length=100)
    username: str = Field(..., max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _check_username(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _check_password(v)


class UserLoginRequest(BaseModel):
    """User login request, by username or by email."""

    username: str | None = None
    email: EmailStr | None = None
    password: str

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else v

    @model_validator(mode="after")
    def require_identifier(self) -> "UserLoginRequest":
        if not self.username and not self.email:
            raise ValueError("username or email is required")
        return self


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class TokenResponse(BaseModel):
    """JWT token pair response."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


# ===== User Schemas =====


class UserCreatedResponse(BaseModel):
    id: UUID


class UserResponse(BaseModel):
    """User response. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    username: str
    email: str
    favorites: list[str]
    created_at: datetime | None = None


class UserUpdateRequest(BaseModel):
    """Partial profile update.

    ``password`` is the current password, used to re-authenticate. The
    ``new_*`` keys are staged values committed onto their canonical field.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=100)
    username: str | None = Field(default=None, max_length=50)
    email: EmailStr | None = None
    favorites: list[str] | None = None

    new_name: str | None = Field(default=None, min_length=1, max_length=100)
    new_username: str | None = Field(default=None, max_length=50)
    new_email: EmailStr | None = None
    new_password: str | None = Field(default=None, min_length=8)

    password: str | None = None

    @field_validator("name", "new_name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return _check_name(v)

    @field_validator("username", "new_username")
    @classmethod
    def validate_username(cls, v: str | None) -> str | None:
        return _check_username(v)

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str | None) -> str | None:
        return _check_password(v)


class UserDeleteRequest(BaseModel):
    password: str
