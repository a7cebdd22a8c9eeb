"""Revocation set: token ids that must be rejected before their natural expiry."""

import logging
from datetime import UTC, datetime
from typing import Protocol

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bookcircle.core.errors import InternalError
from bookcircle.models import RevokedToken

logger = logging.getLogger(__name__)


class RevocationStore(Protocol):
    def revoke(
        self, jti: str, token_type: str, account_id: int, expires_at: datetime
    ) -> None: ...

    def is_revoked(self, jti: str) -> bool: ...

    def purge_expired(self, now: datetime | None = None) -> int: ...


class SqlRevocationStore:
    """RevocationStore backed by the revoked_tokens table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def revoke(
        self, jti: str, token_type: str, account_id: int, expires_at: datetime
    ) -> None:
        """Record the token's jti. Revoking an already revoked token is a no-op."""
        if self.is_revoked(jti):
            return
        row = RevokedToken(
            jti=jti,
            token_type=token_type,
            account_id=account_id,
            expires_at=expires_at,
        )
        try:
            self.session.add(row)
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Token revocation failed", extra={"jti": jti})
            raise InternalError() from e

    def is_revoked(self, jti: str) -> bool:
        try:
            return self.session.get(RevokedToken, jti) is not None
        except SQLAlchemyError as e:
            logger.exception("Revocation lookup failed", extra={"jti": jti})
            raise InternalError() from e

    def purge_expired(self, now: datetime | None = None) -> int:
        """
        Delete entries whose token has expired anyway. Returns the number deleted.
        Idempotent: safe to run repeatedly.
        """
        cutoff = now or datetime.now(UTC)
        try:
            deleted_count = (
                self.session.query(RevokedToken)
                .filter(RevokedToken.expires_at <= cutoff)
                .delete(synchronize_session=False)
            )
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Revocation purge failed", extra={"cutoff": cutoff.isoformat()})
            raise InternalError() from e
        if deleted_count > 0:
            logger.info(
                "Revocation purge: cutoff=%s, entries_deleted=%s",
                cutoff.isoformat(),
                deleted_count,
            )
        return deleted_count
