"""Pydantic request/response schemas."""

from bookcircle.schemas.auth import (
    AccountOut,
    AccountsListResponse,
    AuthResponse,
    CurrentAccount,
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    Role,
    RoleChangeRequest,
)
from bookcircle.schemas.books import (
    BookCreateRequest,
    BookListScope,
    BookOut,
    BooksListResponse,
    BookStatus,
    BookStatusRequest,
)
from bookcircle.schemas.health import HealthResponse

__all__ = [
    "AccountOut",
    "AccountsListResponse",
    "AuthResponse",
    "BookCreateRequest",
    "BookListScope",
    "BookOut",
    "BookStatus",
    "BookStatusRequest",
    "BooksListResponse",
    "CurrentAccount",
    "HealthResponse",
    "LoginRequest",
    "LogoutRequest",
    "RefreshRequest",
    "RefreshResponse",
    "RegisterRequest",
    "Role",
    "RoleChangeRequest",
]
