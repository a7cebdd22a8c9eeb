"""ORM model for registered accounts (auth and RBAC)."""

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, func

from bookcircle.models.base import Base

ROLES = ("reader", "writer", "admin")
DEFAULT_ROLE = "reader"


class Account(Base):
    """
    Registered user of the platform.

    username is the login identifier; email is optional but unique when set.
    role: 'reader', 'writer' or 'admin'
    """

    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint("role IN ('reader', 'writer', 'admin')", name="ck_accounts_role"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(64), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=DEFAULT_ROLE)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
