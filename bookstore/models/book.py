from __future__ import annotations
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.sql.schema import SchemaItem
from bookstore.models.base import Base, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from bookstore.models.genre import Genre

#Book
class Book(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__: str = "books"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    writer: Mapped[str] = mapped_column(String(255), nullable=False)
    publisher: Mapped[str | None] = mapped_column(String(255), nullable=True)
    publication_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, server_default="0")
    stock_quantity: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    genre_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("genres.id", ondelete="RESTRICT"),
        nullable=False,
    )

    genre: Mapped[Genre] = relationship(back_populates="books")

    __table_args__: tuple[SchemaItem, ...] = (
            CheckConstraint("price >= 0", name="books_price_nonneg"),
            CheckConstraint("stock_quantity >= 0", name="books_stock_nonneg"),
            Index(
                "uq_books_title_active",
                "title",
                unique=True,
                postgresql_where=text("deleted_at IS NULL"),
                sqlite_where=text("deleted_at IS NULL"),
            ),
    )
