"""Role-gated book queries and status transitions."""

import logging

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from bookcircle.core.errors import ForbiddenError, InternalError, NotFoundError
from bookcircle.models import Book
from bookcircle.schemas.auth import CurrentAccount

logger = logging.getLogger(__name__)

# Roles allowed to create books.
AUTHOR_ROLES = frozenset({"writer", "admin"})
# Transitions an author may make on their own book; admins may make any.
AUTHOR_TRANSITIONS = frozenset({("draft", "published"), ("published", "draft")})


def visible_books_query(session: Session, scope: str, caller: CurrentAccount) -> Query:
    """
    Build the listing query for a status scope as seen by the caller.

    - draft / published: the caller's own books in that status; admins see every
      published book (drafts stay private to their author).
    - finished: every finished book, for everyone.
    - all: admins see everything; others see their own books plus finished ones.
    """
    query = session.query(Book)
    if scope in ("draft", "published"):
        if caller.role == "admin" and scope == "published":
            return query.filter(Book.status == scope)
        return query.filter(Book.status == scope, Book.author_id == caller.id)
    if scope == "finished":
        return query.filter(Book.status == "finished")
    if scope == "all":
        if caller.role == "admin":
            return query
        return query.filter(or_(Book.author_id == caller.id, Book.status == "finished"))
    raise ValueError(f"Unknown book scope: {scope}")


def list_books(session: Session, scope: str, caller: CurrentAccount) -> list[Book]:
    try:
        return visible_books_query(session, scope, caller).order_by(Book.id).all()
    except SQLAlchemyError as e:
        logger.exception("Book listing failed", extra={"scope": scope})
        raise InternalError() from e


def create_book(
    session: Session,
    caller: CurrentAccount,
    title: str,
    genre: str = "",
    preview_text: str = "",
    status: str = "draft",
) -> Book:
    """Persist a book authored by the caller. Only writers and admins may publish."""
    if caller.role not in AUTHOR_ROLES:
        raise ForbiddenError("Only writers can create books.")
    if status == "finished":
        raise ForbiddenError("Only an admin can mark a book as finished.")
    book = Book(
        title=title.strip(),
        genre=genre.strip(),
        preview_text=preview_text,
        status=status,
        author_id=caller.id,
    )
    try:
        session.add(book)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Book insert failed")
        raise InternalError() from e
    session.refresh(book)
    logger.info("Book created", extra={"book_id": book.id, "author_id": caller.id})
    return book


def check_transition(book: Book, new_status: str, caller: CurrentAccount) -> None:
    """Raise ForbiddenError unless the caller may move the book to new_status."""
    if caller.role == "admin":
        return
    if new_status == "finished":
        raise ForbiddenError("Only an admin can mark a book as finished.")
    if book.author_id != caller.id:
        raise ForbiddenError("Only the author can change this book.")
    if book.status != new_status and (book.status, new_status) not in AUTHOR_TRANSITIONS:
        raise ForbiddenError(f"Cannot move a {book.status} book to {new_status}.")


def transition_book(
    session: Session, book_id: int, new_status: str, caller: CurrentAccount
) -> Book:
    book = session.get(Book, book_id)
    if book is None:
        raise NotFoundError("Book not found.")
    check_transition(book, new_status, caller)
    previous = book.status
    try:
        book.status = new_status
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Book status update failed", extra={"book_id": book_id})
        raise InternalError() from e
    session.refresh(book)
    logger.info(
        "Book status changed",
        extra={
            "book_id": book.id,
            "from_status": previous,
            "to_status": new_status,
            "actor_id": caller.id,
        },
    )
    return book
