"""ORM model for books; only the fields role-gated handlers need."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func

from bookcircle.models.base import Base

BOOK_STATUSES = ("draft", "published", "finished")


class Book(Base):
    """A writer's book. status moves draft -> published -> finished (finished is admin-only)."""

    __tablename__ = "books"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    genre = Column(String(64), nullable=False, default="")
    preview_text = Column(Text, nullable=False, default="")
    status = Column(String(16), nullable=False, default="draft", index=True)
    author_id = Column(
        Integer,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
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
