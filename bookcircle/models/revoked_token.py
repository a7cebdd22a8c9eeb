"""ORM model for revoked token ids (logout / refresh rotation)."""

from sqlalchemy import Column, DateTime, Integer, String

from bookcircle.models.base import Base


class RevokedToken(Base):
    """
    A token that must no longer be accepted, identified by its jti claim.

    Rows are only needed until expires_at; the cleanup job purges them after that.
    """

    __tablename__ = "revoked_tokens"

    jti = Column(String(64), primary_key=True)
    token_type = Column(String(16), nullable=False)
    account_id = Column(Integer, nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
