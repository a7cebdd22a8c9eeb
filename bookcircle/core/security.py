"""Password hashing and JWT issuance/verification for authentication."""

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Literal

import bcrypt
import jwt

from bookcircle.core.config import Settings
from bookcircle.core.errors import ExpiredTokenError, InternalError, InvalidTokenError

logger = logging.getLogger(__name__)

# Bcrypt cost (rounds); matches the work factor the mobile backend has always used.
DEFAULT_BCRYPT_ROUNDS = 10

# Min/max lengths for account fields (input validation).
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 64
NAME_MAX_LEN = 255
EMAIL_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

TokenType = Literal["access", "refresh"]

REQUIRED_CLAIMS = ("sub", "username", "role", "typ", "jti", "iat", "exp")


class PasswordHasher:
    """Salted one-way bcrypt hashing with a fixed cost factor."""

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        self.rounds = rounds

    def hash(self, plain_password: str) -> str:
        """Hash a plain-text password for storage. Do not store plain passwords."""
        # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
        pw_bytes = plain_password.encode("utf-8")[:72]
        try:
            hashed = bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=self.rounds))
        except (ValueError, TypeError) as e:
            logger.exception("Password hashing failed")
            raise InternalError() from e
        return hashed.decode("utf-8")

    def verify(self, plain_password: str, hashed: str) -> bool:
        """Verify a plain password against a stored hash."""
        pw_bytes = plain_password.encode("utf-8")[:72]
        try:
            return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False


@dataclass(frozen=True)
class TokenClaims:
    """Decoded, verified token payload."""

    account_id: int
    username: str
    role: str
    token_type: TokenType
    jti: str
    issued_at: datetime
    expires_at: datetime


class TokenIssuer:
    """
    Signs and verifies one kind of token (access or refresh) with its own secret.

    Expiry is inclusive: a token checked at exactly its ``exp`` instant is expired.
    ``now`` can be injected for deterministic issuance and verification.
    """

    def __init__(
        self,
        secret: str,
        ttl: timedelta,
        token_type: TokenType,
        algorithm: str = "HS256",
    ) -> None:
        if not secret:
            raise ValueError(f"A signing secret is required for {token_type} tokens")
        if ttl <= timedelta(0):
            raise ValueError("Token TTL must be positive")
        self._secret = secret
        self.ttl = ttl
        self.token_type = token_type
        self.algorithm = algorithm

    def issue(
        self,
        account_id: int,
        username: str,
        role: str,
        now: datetime | None = None,
    ) -> str:
        """Create a signed token with sub, username, role, typ, jti, iat and exp."""
        issued = _whole_seconds(now or datetime.now(UTC))
        payload: dict[str, Any] = {
            "sub": str(account_id),
            "username": username,
            "role": role,
            "typ": self.token_type,
            "jti": uuid.uuid4().hex,
            "iat": issued,
            "exp": issued + self.ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str, now: datetime | None = None) -> TokenClaims:
        """
        Check signature, claims and expiry; return the claims.
        Raises ExpiredTokenError past expiry and InvalidTokenError for anything else.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                # Expiry is compared below against the injectable clock.
                options={"verify_exp": False, "verify_iat": False, "require": list(REQUIRED_CLAIMS)},
            )
        except jwt.PyJWTError as e:
            raise InvalidTokenError() from e

        if payload.get("typ") != self.token_type:
            raise InvalidTokenError()
        try:
            account_id = int(payload["sub"])
            issued_at = datetime.fromtimestamp(int(payload["iat"]), UTC)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), UTC)
        except (TypeError, ValueError, OverflowError) as e:
            raise InvalidTokenError() from e

        current = now or datetime.now(UTC)
        if current.tzinfo is None:
            current = current.replace(tzinfo=UTC)
        if current >= expires_at:
            raise ExpiredTokenError()

        return TokenClaims(
            account_id=account_id,
            username=str(payload["username"]),
            role=str(payload["role"]),
            token_type=self.token_type,
            jti=str(payload["jti"]),
            issued_at=issued_at,
            expires_at=expires_at,
        )


def _whole_seconds(moment: datetime) -> datetime:
    # JWT NumericDate is encoded as whole seconds; keep exp/iat exact across a round-trip.
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.replace(microsecond=0)


def build_access_issuer(settings: Settings) -> TokenIssuer:
    return TokenIssuer(
        settings.access_secret(),
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        "access",
        algorithm=settings.JWT_ALGORITHM,
    )


def build_refresh_issuer(settings: Settings) -> TokenIssuer:
    return TokenIssuer(
        settings.refresh_secret(),
        timedelta(minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES),
        "refresh",
        algorithm=settings.JWT_ALGORITHM,
    )
