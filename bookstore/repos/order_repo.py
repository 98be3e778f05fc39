import uuid
from decimal import Decimal
from typing import Any
from sqlalchemy import Row, func, select
from sqlalchemy.orm import Session, joinedload, selectinload

from bookstore.models.book import Book
from bookstore.models.genre import Genre
from bookstore.models.order import Order, OrderItem


class OrderRepository:
    """Repository for Order model."""

    @staticmethod
    # Stage a new order (service decides when to commit)
    def add_order(db: Session, user_id: uuid.UUID, total_price: Decimal) -> Order:
        order = Order(user_id=user_id, total_price=total_price)
        db.add(order)
        db.flush()  # ensure order.id
        return order

    @staticmethod
    # Stage an order item
    def add_item(
        db: Session,
        order_id: uuid.UUID,
        book_id: uuid.UUID,
        quantity: int,
        unit_price: Decimal,
        position: int,
    ) -> OrderItem:
        item = OrderItem(
            order_id=order_id,
            book_id=book_id,
            quantity=quantity,
            unit_price=unit_price,
            position=position,
        )
        db.add(item)
        return item

    @staticmethod
    def _with_details():
        return (
            joinedload(Order.user),
            selectinload(Order.items)
            .joinedload(OrderItem.book)
            .joinedload(Book.genre),
        )

    @staticmethod
    # Get order with user and item details
    def get(db: Session, order_id: uuid.UUID) -> Order | None:
        stmt = select(Order).where(Order.id == order_id).options(*OrderRepository._with_details())
        return db.scalars(stmt).first()

    @staticmethod
    # List orders with details, newest first
    def list(db: Session) -> list[Order]:
        stmt = (
            select(Order)
            .options(*OrderRepository._with_details())
            .order_by(Order.created_at.desc())
        )
        return list(db.scalars(stmt).unique().all())

    # ---- Statistics ----
    @staticmethod
    def count(db: Session) -> int:
        return db.scalar(select(func.count()).select_from(Order)) or 0

    @staticmethod
    def average_total(db: Session) -> Decimal | None:
        value = db.scalar(select(func.avg(Order.total_price)))
        return Decimal(str(value)) if value is not None else None

    @staticmethod
    # Genre with the most (or fewest) order items, active books and genres only
    def genre_by_item_count(db: Session, most_first: bool) -> Row[Any] | None:
        total = func.count(OrderItem.id).label("total")
        stmt = (
            select(Genre.name, total)
            .select_from(OrderItem)
            .join(Book, Book.id == OrderItem.book_id)
            .join(Genre, Genre.id == Book.genre_id)
            .where(Book.active(), Genre.active())
            .group_by(Genre.id, Genre.name)
            # ties resolve by genre name
            .order_by(total.desc() if most_first else total.asc(), Genre.name.asc())
            .limit(1)
        )
        return db.execute(stmt).first()
