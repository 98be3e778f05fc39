from fastapi import APIRouter, Query
from typing import Annotated
import uuid
from starlette.status import HTTP_201_CREATED

from bookstore.api.deps import DbSession
from bookstore.core.config import settings
from bookstore.services.book_service import BookService
from bookstore.schemas.book import BookCreate, BookRead, BookUpdate
from bookstore.schemas.common import ApiResponse

router = APIRouter(prefix="/books", tags=["books"])


@router.post("", response_model=ApiResponse[BookRead], status_code=HTTP_201_CREATED)
def create_book(data: BookCreate, db: DbSession):
    book = BookService.create_book(db, data)
    return ApiResponse(message="Book created successfully", data=BookRead.model_validate(book))


@router.get("", response_model=ApiResponse[list[BookRead]])
def list_books(
    db: DbSession,
    title: Annotated[str | None, Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=settings.MAX_PAGE_SIZE)] = settings.DEFAULT_PAGE_SIZE,
):
    books = BookService.list_books(db, title=title, page=page, limit=limit)
    return ApiResponse(
        message="Get all books successfully",
        data=[BookRead.model_validate(b) for b in books],
    )


@router.get("/{book_id}", response_model=ApiResponse[BookRead])
def get_book(book_id: uuid.UUID, db: DbSession):
    book = BookService.get_book(db, book_id)
    return ApiResponse(message="Get book detail successfully", data=BookRead.model_validate(book))


@router.patch("/{book_id}", response_model=ApiResponse[BookRead])
def update_book(book_id: uuid.UUID, data: BookUpdate, db: DbSession):
    book = BookService.update_book(db, book_id, data)
    return ApiResponse(message="Book updated successfully", data=BookRead.model_validate(book))


@router.delete("/{book_id}", response_model=ApiResponse[None])
def delete_book(book_id: uuid.UUID, db: DbSession):
    BookService.delete_book(db, book_id)
    return ApiResponse(message="Book deleted successfully")
