"""SQLAlchemy ORM models."""

from bookcircle.models.account import Account
from bookcircle.models.base import Base
from bookcircle.models.book import Book
from bookcircle.models.revoked_token import RevokedToken

__all__ = ["Account", "Base", "Book", "RevokedToken"]
