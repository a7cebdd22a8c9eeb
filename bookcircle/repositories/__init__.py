"""Persistence interfaces and their SQLAlchemy implementations."""

from bookcircle.repositories.accounts import AccountRepository, SqlAccountRepository
from bookcircle.repositories.revocations import RevocationStore, SqlRevocationStore

__all__ = [
    "AccountRepository",
    "RevocationStore",
    "SqlAccountRepository",
    "SqlRevocationStore",
]
