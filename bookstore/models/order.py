from __future__ import annotations
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    CheckConstraint,
    Constraint,
    ForeignKey,
    Integer,
    Numeric,
    Uuid,
)
from bookstore.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from bookstore.models.book import Book
    from bookstore.models.user import User

#Order
class Order(TimestampMixin, Base):
    __tablename__: str = "orders"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    user: Mapped[User] = relationship(back_populates="orders")
    items: Mapped[list[OrderItem]] = relationship(
        back_populates="order",
        order_by="OrderItem.position",
    )

    __table_args__: tuple[Constraint, ...] = (
        CheckConstraint("total_price >= 0", name="orders_total_nonneg"),
    )

#Order Items
class OrderItem(Base):
    __tablename__: str = "order_items"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    book_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("books.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    # submission order within the transaction
    position: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        comment="book price at the time of purchase",
    )

    order: Mapped[Order] = relationship(back_populates="items")
    book: Mapped[Book] = relationship()

    __table_args__: tuple[Constraint, ...] = (
        CheckConstraint("quantity > 0", name="order_items_quantity_positive"),
    )
