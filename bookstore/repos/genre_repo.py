import uuid
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from bookstore.models.book import Book
from bookstore.models.genre import Genre
from bookstore.schemas.genre import GenreCreate


class GenreRepository:

    @staticmethod
    # Create a new genre
    def create(db: Session, data: GenreCreate) -> Genre:
        genre = Genre(name=data.name)
        db.add(genre)
        db.commit()
        db.refresh(genre)
        return genre

    @staticmethod
    # List active genres with their active books
    def list_with_books(db: Session) -> list[Genre]:
        stmt = (
            select(Genre)
            .where(Genre.active())
            .options(selectinload(Genre.books.and_(Book.active())))
            .order_by(Genre.name.asc())
        )
        return list(db.scalars(stmt).all())

    @staticmethod
    # Get an active genre by ID
    def get_active(db: Session, genre_id: uuid.UUID, with_books: bool = False) -> Genre | None:
        stmt = select(Genre).where(Genre.id == genre_id, Genre.active())
        if with_books:
            stmt = stmt.options(selectinload(Genre.books.and_(Book.active())))
        return db.scalars(stmt).first()

    @staticmethod
    # Check for an active genre with the same name
    def name_taken(db: Session, name: str, exclude_id: uuid.UUID | None = None) -> bool:
        stmt = select(Genre.id).where(Genre.name == name, Genre.active())
        if exclude_id is not None:
            stmt = stmt.where(Genre.id != exclude_id)
        return db.scalars(stmt).first() is not None
