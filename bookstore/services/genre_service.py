from __future__ import annotations
import uuid
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookstore.core.errors import ConflictError, NotFoundError
from bookstore.models.genre import Genre
from bookstore.repos.genre_repo import GenreRepository
from bookstore.schemas.genre import GenreCreate, GenreUpdate


class GenreService:
    @staticmethod
    # Create genre
    def create_genre(db: Session, data: GenreCreate) -> Genre:
        if GenreRepository.name_taken(db, data.name):
            raise ConflictError("Genre already exists")
        try:
            return GenreRepository.create(db, data)
        except IntegrityError as e:
            db.rollback()
            raise ConflictError("Genre already exists") from e

    @staticmethod
    # List genres with their books
    def list_genres(db: Session) -> list[Genre]:
        return GenreRepository.list_with_books(db)

    @staticmethod
    # Get genre
    def get_genre(db: Session, genre_id: uuid.UUID, with_books: bool = False) -> Genre:
        genre = GenreRepository.get_active(db, genre_id, with_books=with_books)
        if genre is None:
            raise NotFoundError("Genre not found")
        return genre

    @staticmethod
    # Rename genre
    def update_genre(db: Session, genre_id: uuid.UUID, data: GenreUpdate) -> Genre:
        genre = GenreService.get_genre(db, genre_id)
        if GenreRepository.name_taken(db, data.name, exclude_id=genre.id):
            raise ConflictError("Genre already exists")
        genre.name = data.name
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise ConflictError("Genre already exists") from e
        db.refresh(genre)
        return genre

    @staticmethod
    # Soft delete genre
    def delete_genre(db: Session, genre_id: uuid.UUID) -> None:
        genre = GenreService.get_genre(db, genre_id)
        genre.soft_delete()
        db.commit()
