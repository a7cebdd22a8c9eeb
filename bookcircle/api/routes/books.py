"""Book listing, creation and status transitions, gated by the caller's role."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from bookcircle.api.deps import get_current_account, require_author
from bookcircle.core.database import get_db
from bookcircle.schemas.auth import CurrentAccount
from bookcircle.schemas.books import (
    BookCreateRequest,
    BookListScope,
    BookOut,
    BooksListResponse,
    BookStatusRequest,
)
from bookcircle.services.books import create_book, list_books, transition_book

router = APIRouter()


@router.get("/read/{scope}", response_model=BooksListResponse)
def get_books(
    scope: BookListScope,
    current: Annotated[CurrentAccount, Depends(get_current_account)],
    db: Annotated[Session, Depends(get_db)],
) -> BooksListResponse:
    """
    List books in a status scope (draft, published, finished or all).

    Writers see only their own drafts and published books; admins see every
    published book; everyone sees finished books.
    """
    books = list_books(db, scope, current)
    return BooksListResponse(books=[BookOut.model_validate(b) for b in books])


@router.post("", response_model=BookOut, status_code=status.HTTP_201_CREATED)
def post_book(
    body: BookCreateRequest,
    current: Annotated[CurrentAccount, Depends(require_author)],
    db: Annotated[Session, Depends(get_db)],
) -> BookOut:
    """Create a book authored by the caller (writers and admins only)."""
    book = create_book(
        db,
        current,
        title=body.title,
        genre=body.genre,
        preview_text=body.preview_text,
        status=body.status,
    )
    return BookOut.model_validate(book)


@router.patch("/{book_id}/status", response_model=BookOut)
def patch_book_status(
    book_id: int,
    body: BookStatusRequest,
    current: Annotated[CurrentAccount, Depends(get_current_account)],
    db: Annotated[Session, Depends(get_db)],
) -> BookOut:
    """Move a book between statuses. Only admins may mark a book finished."""
    return BookOut.model_validate(transition_book(db, book_id, body.status, current))
