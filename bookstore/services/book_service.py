from __future__ import annotations
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import uuid

from bookstore.core.errors import ConflictError, NotFoundError
from bookstore.schemas.book import BookCreate, BookUpdate
from bookstore.repos.book_repo import BookRepository
from bookstore.repos.genre_repo import GenreRepository
from bookstore.models.book import Book


class BookService:
    @staticmethod
    def _require_genre(db: Session, genre_id: uuid.UUID) -> None:
        if GenreRepository.get_active(db, genre_id) is None:
            raise NotFoundError("Genre not found", details={"genre_id": str(genre_id)})

    @staticmethod
    # Create book
    def create_book(db: Session, data: BookCreate) -> Book:
        if BookRepository.title_taken(db, data.title):
            raise ConflictError("Book title already exists")
        BookService._require_genre(db, data.genre_id)

        try:
            book = BookRepository.create(db, data)
        except IntegrityError as e:
            db.rollback()
            raise ConflictError("Book title already exists") from e
        # reload with genre
        return BookService.get_book(db, book.id)

    @staticmethod
    # List books
    def list_books(
        db: Session,
        title: str | None = None,
        page: int = 1,
        limit: int = 5,
    ) -> list[Book]:
        return BookRepository.list(db, title=title, page=page, limit=limit)

    @staticmethod
    # Get book
    def get_book(db: Session, book_id: uuid.UUID) -> Book:
        book = BookRepository.get_active(db, book_id)
        if book is None:
            raise NotFoundError("Book not found")
        return book

    @staticmethod
    # Update book
    def update_book(db: Session, book_id: uuid.UUID, data: BookUpdate) -> Book:
        book = BookService.get_book(db, book_id)
        changes = data.model_dump(exclude_unset=True)

        if "title" in changes and BookRepository.title_taken(db, changes["title"], exclude_id=book.id):
            raise ConflictError("Book title already exists")
        if "genre_id" in changes:
            BookService._require_genre(db, changes["genre_id"])

        try:
            BookRepository.apply_changes(db, book, changes)
        except IntegrityError as e:
            db.rollback()
            raise ConflictError("Book title already exists") from e
        return BookService.get_book(db, book_id)

    @staticmethod
    # Soft delete book
    def delete_book(db: Session, book_id: uuid.UUID) -> None:
        book = BookService.get_book(db, book_id)
        book.soft_delete()
        db.commit()
