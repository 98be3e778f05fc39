from pydantic import BaseModel, field_validator
from datetime import datetime
from decimal import Decimal
import uuid

from bookstore.schemas.auth import UserSummary
from bookstore.schemas.genre import GenreSummary


# Transaction line item
class TransactionItemCreate(BaseModel):
    book_id: uuid.UUID
    quantity: int

    @field_validator("quantity")
    @classmethod
    def positive_quantity(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("quantity must be > 0")
        return v


# Transaction create; user_id defaults to the caller
class TransactionCreate(BaseModel):
    user_id: uuid.UUID | None = None
    items: list[TransactionItemCreate] = []


# Transaction item read
class TransactionItemRead(BaseModel):
    book_id: uuid.UUID
    title: str
    genre: GenreSummary | None = None
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


# Transaction read
class TransactionRead(BaseModel):
    id: uuid.UUID
    user: UserSummary
    items: list[TransactionItemRead] = []
    total_quantity: int
    total_price: Decimal
    created_at: datetime


class TransactionStatistics(BaseModel):
    total_transaction: int
    average_transaction: Decimal
    most_popular_genre: str | None = None
    least_popular_genre: str | None = None
