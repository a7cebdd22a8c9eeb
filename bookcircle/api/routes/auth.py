"""Register, login, refresh, profile, logout and admin account endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from bookcircle.api.deps import get_auth_service, get_current_account, require_admin
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
    RoleChangeRequest,
)
from bookcircle.services.auth import AuthResult, AuthService

router = APIRouter()


def _auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        account=AccountOut.model_validate(result.account),
        access_token=result.access_token,
        refresh_token=result.refresh_token,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
def register(
    body: RegisterRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """
    Create an account and return it with an access/refresh token pair.
    Role defaults to reader; 400 if the username or email is already registered.
    """
    result = service.register(
        username=body.username,
        password=body.password,
        name=body.name,
        email=body.email,
        role=body.role,
    )
    return _auth_response(result)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """
    Authenticate with username (or email) and password.
    Include the access token in the Authorization header as: Bearer <access_token>
    """
    return _auth_response(service.login(body.identifier, body.password))


@router.post("/refresh", response_model=RefreshResponse, response_model_exclude_none=True)
def refresh(
    body: RefreshRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> RefreshResponse:
    """Exchange a refresh token for a new access token."""
    result = service.refresh(body.refresh_token)
    return RefreshResponse(
        access_token=result.access_token,
        refresh_token=result.refresh_token,
    )


@router.get("/profile", response_model=AccountOut)
@router.get("/me", response_model=AccountOut, include_in_schema=False)
def get_profile(
    current: Annotated[CurrentAccount, Depends(get_current_account)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AccountOut:
    """Return the authenticated account (no password hash)."""
    return AccountOut.model_validate(service.get_profile(current.id))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    current: Annotated[CurrentAccount, Depends(get_current_account)],
    service: Annotated[AuthService, Depends(get_auth_service)],
    body: LogoutRequest | None = None,
) -> Response:
    """Revoke the current access token and, if supplied, the refresh token."""
    service.logout(current, refresh_token=body.refresh_token if body else None)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/users", response_model=AccountsListResponse)
def list_accounts(
    _admin: Annotated[CurrentAccount, Depends(require_admin)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AccountsListResponse:
    """List all accounts (admin only)."""
    return AccountsListResponse(
        accounts=[AccountOut.model_validate(a) for a in service.list_accounts()]
    )


@router.patch("/users/{account_id}/role", response_model=AccountOut)
def change_role(
    account_id: int,
    body: RoleChangeRequest,
    _admin: Annotated[CurrentAccount, Depends(require_admin)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AccountOut:
    """Change an account's role (admin only)."""
    return AccountOut.model_validate(service.change_role(account_id, body.role))
