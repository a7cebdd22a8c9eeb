"""Account registration, login, token refresh, profile lookup and access checks.

The service depends only on narrow collaborators (an AccountRepository, a
PasswordHasher, two TokenIssuers and an optional RevocationStore) so it can be
exercised without HTTP and with any store implementation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from bookcircle.core.errors import (
    ConflictError,
    ExpiredTokenError,
    InputValidationError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    InvalidTokenError,
    NotFoundError,
)
from bookcircle.core.security import (
    NAME_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    PasswordHasher,
    TokenClaims,
    TokenIssuer,
    build_access_issuer,
    build_refresh_issuer,
)
from bookcircle.models import Account
from bookcircle.models.account import DEFAULT_ROLE, ROLES
from bookcircle.repositories import (
    AccountRepository,
    RevocationStore,
    SqlAccountRepository,
    SqlRevocationStore,
)
from bookcircle.schemas.auth import CurrentAccount

if TYPE_CHECKING:
    from bookcircle.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """Account plus a freshly minted access/refresh pair."""

    account: Account
    access_token: str
    refresh_token: str


@dataclass
class RefreshResult:
    access_token: str
    refresh_token: str | None = None


@lru_cache(maxsize=8)
def _dummy_hash(rounds: int) -> str:
    # Verified against when the identifier is unknown so both failure paths cost one bcrypt check.
    return PasswordHasher(rounds).hash("bookcircle-timing-equalizer")


class AuthService:
    """Orchestrates the account and token lifecycle for one request."""

    def __init__(
        self,
        accounts: AccountRepository,
        hasher: PasswordHasher,
        access_tokens: TokenIssuer,
        refresh_tokens: TokenIssuer,
        revocations: RevocationStore | None = None,
        live_role: bool = True,
        rotate_refresh_tokens: bool = False,
    ) -> None:
        self.accounts = accounts
        self.hasher = hasher
        self.access_tokens = access_tokens
        self.refresh_tokens = refresh_tokens
        self.revocations = revocations
        self.live_role = live_role
        self.rotate_refresh_tokens = rotate_refresh_tokens

    @classmethod
    def from_settings(cls, session: Session, settings: Settings) -> AuthService:
        """Build a service wired to SQL stores and the configured secrets."""
        return cls(
            accounts=SqlAccountRepository(session),
            hasher=PasswordHasher(settings.BCRYPT_ROUNDS),
            access_tokens=build_access_issuer(settings),
            refresh_tokens=build_refresh_issuer(settings),
            revocations=SqlRevocationStore(session) if settings.TOKEN_REVOCATION_ENABLED else None,
            live_role=settings.AUTH_LIVE_ROLE,
            rotate_refresh_tokens=settings.REFRESH_TOKEN_ROTATION,
        )

    def register(
        self,
        username: str,
        password: str,
        name: str,
        email: str | None = None,
        role: str | None = None,
        now: datetime | None = None,
    ) -> AuthResult:
        """
        Create an account and return it with a token pair.
        Raises ConflictError when the username or email is taken; nothing is persisted then.
        """
        username = (username or "").strip()
        name = (name or "").strip()
        email = email.strip().lower() if email and email.strip() else None
        role = role or DEFAULT_ROLE

        if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
            raise InputValidationError("Invalid username length.")
        if "@" in username:
            raise InputValidationError("Username must not contain '@'.")
        if not name or len(name) > NAME_MAX_LEN:
            raise InputValidationError("Invalid display name length.")
        if not password or not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
            raise InputValidationError("Invalid password length.")
        if role not in ROLES:
            raise InputValidationError(f"Role must be one of: {', '.join(ROLES)}.")

        if self.accounts.exists(username, email):
            logger.info("Registration rejected: username or email taken")
            raise ConflictError()

        account = Account(
            username=username,
            name=name,
            email=email,
            password_hash=self.hasher.hash(password),
            role=role,
        )
        account = self.accounts.insert(account)
        logger.info(
            "Account registered",
            extra={"account_id": account.id, "role": account.role},
        )
        return self._issue_pair(account, now)

    def login(self, identifier: str, password: str, now: datetime | None = None) -> AuthResult:
        """
        Authenticate by username (or email) and password.
        Unknown identifier and wrong password raise the same InvalidCredentialsError.
        """
        identifier = (identifier or "").strip()
        if not identifier or not password:
            raise InputValidationError("Identifier and password are required.")

        account = self.accounts.find_by_identifier(identifier)
        if account is None:
            self.hasher.verify(password, _dummy_hash(self.hasher.rounds))
            logger.info("Login failed", extra={"reason": "unknown_identifier"})
            raise InvalidCredentialsError()
        if not self.hasher.verify(password, account.password_hash):
            logger.info(
                "Login failed",
                extra={"reason": "bad_password", "account_id": account.id},
            )
            raise InvalidCredentialsError()

        logger.info("Login succeeded", extra={"account_id": account.id})
        return self._issue_pair(account, now)

    def refresh(self, refresh_token: str, now: datetime | None = None) -> RefreshResult:
        """
        Mint a new access token from a valid refresh token.

        Any verification failure (bad signature, expiry, revoked, vanished account)
        raises InvalidRefreshTokenError. With live_role the account is re-read so a
        role change takes effect at the next refresh. With rotation enabled the old
        refresh token is revoked and a new one returned.
        """
        try:
            claims = self.refresh_tokens.verify(refresh_token, now=now)
        except ExpiredTokenError as e:
            raise InvalidRefreshTokenError("Refresh token expired.") from e
        except InvalidTokenError as e:
            raise InvalidRefreshTokenError() from e

        if self.revocations is not None and self.revocations.is_revoked(claims.jti):
            logger.info("Refresh rejected: token revoked", extra={"account_id": claims.account_id})
            raise InvalidRefreshTokenError()

        account_id, username, role = claims.account_id, claims.username, claims.role
        if self.live_role:
            account = self.accounts.find_by_id(claims.account_id)
            if account is None:
                raise InvalidRefreshTokenError()
            username, role = account.username, account.role

        access_token = self.access_tokens.issue(account_id, username, role, now=now)
        new_refresh_token = None
        if self.rotate_refresh_tokens and self.revocations is not None:
            self._revoke(self.revocations, claims)
            new_refresh_token = self.refresh_tokens.issue(account_id, username, role, now=now)

        logger.info(
            "Access token refreshed",
            extra={"account_id": account_id, "rotated": new_refresh_token is not None},
        )
        return RefreshResult(access_token=access_token, refresh_token=new_refresh_token)

    def authenticate(self, access_token: str, now: datetime | None = None) -> CurrentAccount:
        """
        Resolve the caller behind an access token (the access guard's core).
        Raises ExpiredTokenError or InvalidTokenError.
        """
        claims = self.access_tokens.verify(access_token, now=now)
        if self.revocations is not None and self.revocations.is_revoked(claims.jti):
            raise InvalidTokenError()

        username, role = claims.username, claims.role
        if self.live_role:
            account = self.accounts.find_by_id(claims.account_id)
            if account is None:
                raise InvalidTokenError("Account no longer exists.")
            username, role = account.username, account.role

        if role not in ROLES:
            raise InvalidTokenError()
        return CurrentAccount(
            id=claims.account_id,
            username=username,
            role=role,
            token_jti=claims.jti,
            token_expires_at=claims.expires_at,
        )

    def get_profile(self, account_id: int) -> Account:
        """Return the account; NotFoundError if it vanished after the token was issued."""
        account = self.accounts.find_by_id(account_id)
        if account is None:
            raise NotFoundError("Account not found.")
        return account

    def logout(
        self,
        current: CurrentAccount,
        refresh_token: str | None = None,
        now: datetime | None = None,
    ) -> None:
        """Revoke the current access token and, if given, the caller's refresh token."""
        if self.revocations is None:
            logger.info("Logout without revocation store", extra={"account_id": current.id})
            return

        refresh_claims: TokenClaims | None = None
        if refresh_token:
            try:
                refresh_claims = self.refresh_tokens.verify(refresh_token, now=now)
            except ExpiredTokenError:
                refresh_claims = None
            except InvalidTokenError as e:
                raise InvalidRefreshTokenError() from e
            if refresh_claims is not None and refresh_claims.account_id != current.id:
                raise InvalidRefreshTokenError()

        self.revocations.revoke(
            current.token_jti, "access", current.id, current.token_expires_at
        )
        if refresh_claims is not None:
            self._revoke(self.revocations, refresh_claims)
        logger.info(
            "Logged out",
            extra={"account_id": current.id, "refresh_revoked": refresh_claims is not None},
        )

    def change_role(self, account_id: int, role: str) -> Account:
        """Administrative role change. Takes effect at once when live_role is on."""
        if role not in ROLES:
            raise InputValidationError(f"Role must be one of: {', '.join(ROLES)}.")
        account = self.accounts.find_by_id(account_id)
        if account is None:
            raise NotFoundError("Account not found.")
        previous = account.role
        account = self.accounts.update_role(account, role)
        logger.info(
            "Account role changed",
            extra={"account_id": account.id, "from_role": previous, "to_role": role},
        )
        return account

    def list_accounts(self) -> list[Account]:
        return self.accounts.list_all()

    def _issue_pair(self, account: Account, now: datetime | None) -> AuthResult:
        return AuthResult(
            account=account,
            access_token=self.access_tokens.issue(account.id, account.username, account.role, now=now),
            refresh_token=self.refresh_tokens.issue(account.id, account.username, account.role, now=now),
        )

    @staticmethod
    def _revoke(store: RevocationStore, claims: TokenClaims) -> None:
        store.revoke(
            claims.jti, claims.token_type, claims.account_id, claims.expires_at
        )

