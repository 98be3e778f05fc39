from sqlalchemy.orm import Session, joinedload
from sqlalchemy import select, update
from sqlalchemy.engine import CursorResult
from typing import Any, cast
import uuid

from bookstore.models.book import Book
from bookstore.schemas.book import BookCreate
from bookstore.utils.pagination import page_to_limit_offset


class BookRepository:
    @staticmethod
    # Create a new book
    def create(db: Session, data: BookCreate) -> Book:
        book = Book(**data.model_dump())
        db.add(book)
        db.commit()
        db.refresh(book)
        return book

    @staticmethod
    # List active books, newest first
    def list(
        db: Session,
        title: str | None = None,
        page: int = 1,
        limit: int = 5,
    ) -> list[Book]:
        limit, offset = page_to_limit_offset(page, limit)

        stmt = select(Book).where(Book.active()).options(joinedload(Book.genre))

        # filters
        if title and title.strip():
            stmt = stmt.where(Book.title.icontains(title.strip(), autoescape=True))

        # sorting & pagination
        stmt = (
            stmt.order_by(Book.created_at.desc(), Book.title.asc())
            .limit(limit)
            .offset(offset)
        )

        return list(db.scalars(stmt).all())

    @staticmethod
    # Get an active book by ID
    def get_active(db: Session, book_id: uuid.UUID) -> Book | None:
        stmt = (
            select(Book)
            .where(Book.id == book_id, Book.active())
            .options(joinedload(Book.genre))
        )
        return db.scalars(stmt).first()

    @staticmethod
    # Check for an active book with the same title
    def title_taken(db: Session, title: str, exclude_id: uuid.UUID | None = None) -> bool:
        stmt = select(Book.id).where(Book.title == title, Book.active())
        if exclude_id is not None:
            stmt = stmt.where(Book.id != exclude_id)
        return db.scalars(stmt).first() is not None

    @staticmethod
    # Apply partial changes to a loaded book
    def apply_changes(db: Session, book: Book, changes: dict[str, Any]) -> Book:
        for field, value in changes.items():
            setattr(book, field, value)
        db.commit()
        db.refresh(book)
        return book

    @staticmethod
    # Decrement stock if enough is left
    def try_decrement_stock(db: Session, book_id: uuid.UUID, quantity: int) -> bool:
        """
        Guarded UPDATE; the caller owns the transaction.
        Returns False when the book is gone or the stock would go negative.
        """
        stmt = (
            update(Book)
            .where(
                Book.id == book_id,
                Book.active(),
                Book.stock_quantity >= quantity,
            )
            .values(stock_quantity=Book.stock_quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        result = cast(CursorResult[Any], db.execute(stmt))
        return result.rowcount == 1
