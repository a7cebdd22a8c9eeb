"""Request dependencies: auth service wiring, the access guard and role gates."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from bookcircle.core.config import Settings, get_settings
from bookcircle.core.database import get_db
from bookcircle.core.errors import ForbiddenError, UnauthorizedError
from bookcircle.schemas.auth import CurrentAccount
from bookcircle.services.auth import AuthService

# auto_error=False so a missing or non-Bearer header goes through our own 401 path.
security = HTTPBearer(auto_error=False)


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthService:
    return AuthService.from_settings(db, settings)


def get_current_account(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> CurrentAccount:
    """
    Dependency: require a valid Bearer access token and return the caller.
    Raises UnauthorizedError (no token), ExpiredTokenError or InvalidTokenError.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()
    return service.authenticate(credentials.credentials)


def require_roles(*roles: str) -> Callable[[CurrentAccount], CurrentAccount]:
    """Dependency factory: allow only callers whose role is in roles (403 otherwise)."""
    allowed = frozenset(roles)

    def dependency(
        current: Annotated[CurrentAccount, Depends(get_current_account)],
    ) -> CurrentAccount:
        if current.role not in allowed:
            raise ForbiddenError()
        return current

    return dependency


require_admin = require_roles("admin")
require_author = require_roles("writer", "admin")
