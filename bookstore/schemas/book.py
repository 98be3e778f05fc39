from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from typing import ClassVar
from datetime import datetime
from decimal import Decimal
import uuid

from bookstore.schemas.genre import GenreRead, GenreSummary


def _trim_required(v: object, field: str) -> object:
    if isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValueError(f"{field} cannot be empty")
    return v


# Book base schema
class BookBase(BaseModel):
    title: str
    writer: str
    publisher: str | None = None
    publication_year: int | None = Field(default=None, ge=0, le=9999)
    description: str | None = None
    price: Decimal = Field(max_digits=12, decimal_places=2)
    genre_id: uuid.UUID

    @field_validator("title", "writer", mode="before")
    @classmethod
    def trim_and_check(cls, v: object, info: ValidationInfo) -> object:
        return _trim_required(v, info.field_name)

    @field_validator("price")
    @classmethod
    def non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("price must be >= 0")
        return v


# Book create schema
class BookCreate(BookBase):
    stock_quantity: int

    @field_validator("stock_quantity")
    @classmethod
    def non_negative_stock(cls, v: int) -> int:
        if v < 0:
            raise ValueError("stock_quantity must be >= 0")
        return v


# Book update schema (partial; stock only changes through transactions)
class BookUpdate(BaseModel):
    title: str | None = None
    writer: str | None = None
    publisher: str | None = None
    publication_year: int | None = Field(default=None, ge=0, le=9999)
    description: str | None = None
    price: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    genre_id: uuid.UUID | None = None

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")

    @field_validator("title", "writer", mode="before")
    @classmethod
    def trim_and_check(cls, v: object, info: ValidationInfo) -> object:
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return _trim_required(v, info.field_name)

    @field_validator("genre_id", mode="before")
    @classmethod
    def genre_not_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("genre_id cannot be null")
        return v

    @field_validator("price")
    @classmethod
    def non_negative(cls, v: Decimal | None) -> Decimal:
        if v is None:
            raise ValueError("price cannot be null")
        if v < 0:
            raise ValueError("price must be >= 0")
        return v


# Book nested inside a genre listing
class BookSummary(BaseModel):
    id: uuid.UUID
    title: str
    writer: str
    price: Decimal
    stock_quantity: int

    model_config: ClassVar[ConfigDict] = ConfigDict(from_attributes=True)


# Book read schema
class BookRead(BaseModel):
    id: uuid.UUID
    title: str
    writer: str
    publisher: str | None = None
    publication_year: int | None = None
    description: str | None = None
    price: Decimal
    stock_quantity: int
    genre_id: uuid.UUID
    genre: GenreSummary | None = None
    created_at: datetime
    updated_at: datetime

    model_config: ClassVar[ConfigDict] = ConfigDict(from_attributes=True)

    @field_validator("genre", mode="before")
    @classmethod
    def hide_deleted_genre(cls, v: object) -> object:
        if getattr(v, "deleted_at", None) is not None:
            return None
        return v


# Genre with its active books
class GenreWithBooks(GenreRead):
    books: list[BookSummary] = []
