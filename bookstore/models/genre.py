from __future__ import annotations
import uuid
from typing import TYPE_CHECKING
from sqlalchemy import Index, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from bookstore.models.base import Base, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from bookstore.models.book import Book

#Genre
class Genre(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__: str = "genres"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    books: Mapped[list[Book]] = relationship(back_populates="genre")

    __table_args__: tuple[Index, ...] = (
        Index(
            "uq_genres_name_active",
            "name",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )
