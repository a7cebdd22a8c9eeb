"""Request/response schemas for book endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

BookStatus = Literal["draft", "published", "finished"]
BookListScope = Literal["draft", "published", "finished", "all"]


class BookCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    genre: str = Field(default="", max_length=64)
    preview_text: str = Field(default="", max_length=10_000)
    status: Literal["draft", "published"] = "draft"


class BookStatusRequest(BaseModel):
    status: BookStatus


class BookOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    genre: str
    preview_text: str
    status: BookStatus
    author_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BooksListResponse(BaseModel):
    books: list[BookOut]
