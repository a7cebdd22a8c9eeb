"""Request/response schemas for auth endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

Role = Literal["reader", "writer", "admin"]

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(BaseModel):
    """Self-registration. Clients may pick reader or writer; admins are created out of band."""

    username: str = Field(
        ...,
        min_length=1,
        max_length=64,
        pattern=r"^[^@]+$",
        validation_alias=AliasChoices("username", "identifier"),
        description="Login identifier",
    )
    password: str = Field(..., min_length=8, max_length=128, description="Password")
    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: str | None = Field(
        default=None, max_length=255, pattern=EMAIL_PATTERN, description="Email address"
    )
    role: Literal["reader", "writer"] | None = Field(
        default=None, description="Requested role (defaults to reader)"
    )

    @field_validator("username", "name")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class LoginRequest(BaseModel):
    """Credentials for login. identifier is a username or an email."""

    identifier: str = Field(
        ...,
        min_length=1,
        max_length=255,
        validation_alias=AliasChoices("identifier", "username", "email"),
        description="Username or email",
    )
    # No minimum beyond non-empty: a short wrong password is just a wrong password.
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class RefreshRequest(BaseModel):
    refresh_token: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("refresh_token", "refreshToken", "refresh"),
        description="Refresh token issued at login or registration",
    )


class LogoutRequest(BaseModel):
    refresh_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("refresh_token", "refreshToken", "refresh"),
        description="Refresh token to revoke along with the current access token",
    )


class RoleChangeRequest(BaseModel):
    role: Role


class AccountOut(BaseModel):
    """Account as returned to clients (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    name: str
    email: str | None = None
    role: Role
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AuthResponse(BaseModel):
    """Returned by register and login."""

    account: AccountOut
    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="bearer", description="Token type")


class RefreshResponse(BaseModel):
    access_token: str = Field(..., description="New JWT access token")
    refresh_token: str | None = Field(
        default=None, description="New refresh token (only when rotation is enabled)"
    )
    token_type: str = Field(default="bearer", description="Token type")


class CurrentAccount(BaseModel):
    """Authenticated caller resolved by the access guard."""

    id: int
    username: str
    role: Role
    token_jti: str
    token_expires_at: datetime


class AccountsListResponse(BaseModel):
    """Response for GET /auth/users (admin only)."""

    accounts: list[AccountOut]
