from __future__ import annotations
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookstore.core.errors import (
    ConflictError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from bookstore.core.logging import get_logger
from bookstore.core.security import Identity
from bookstore.models.book import Book
from bookstore.models.order import Order
from bookstore.repos.book_repo import BookRepository
from bookstore.repos.order_repo import OrderRepository
from bookstore.repos.user_repo import UserRepository
from bookstore.schemas.auth import UserSummary
from bookstore.schemas.genre import GenreSummary
from bookstore.schemas.transaction import (
    TransactionCreate,
    TransactionItemCreate,
    TransactionItemRead,
    TransactionRead,
    TransactionStatistics,
)

_CENTS = Decimal("0.01")

logger = get_logger(__name__)


@dataclass(frozen=True)
class PricedLine:
    """A validated line item, priced at the book's current price."""

    book: Book
    quantity: int
    unit_price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


class OrderService:
    @staticmethod
    def _price_items(
        db: Session, items: Sequence[TransactionItemCreate]
    ) -> tuple[list[PricedLine], Decimal, int]:
        """
        Validation pass: resolve every book and check stock, in submitted order.
        Nothing is written here.
        """
        lines: list[PricedLine] = []
        books: dict[uuid.UUID, Book] = {}
        requested: dict[uuid.UUID, int] = {}
        total_price = Decimal("0")
        total_quantity = 0

        for item in items:
            book = books.get(item.book_id) or BookRepository.get_active(db, item.book_id)
            if book is None:
                raise NotFoundError(
                    f"Book {item.book_id} not found",
                    details={"book_id": str(item.book_id)},
                )
            books[book.id] = book

            # the same book may appear on several lines
            requested[book.id] = requested.get(book.id, 0) + item.quantity
            if requested[book.id] > book.stock_quantity:
                logger.warning(
                    "Insufficient stock for book %s: requested %d, available %d",
                    book.id, requested[book.id], book.stock_quantity,
                )
                raise InsufficientStockError(
                    book.id, book.title, requested[book.id], book.stock_quantity
                )

            line = PricedLine(book=book, quantity=item.quantity, unit_price=book.price)
            lines.append(line)
            total_price += line.subtotal
            total_quantity += item.quantity

        return lines, total_price, total_quantity

    @staticmethod
    def create_transaction(
        db: Session, identity: Identity, data: TransactionCreate
    ) -> TransactionRead:
        user_id = data.user_id or identity.id
        user = UserRepository.get(db, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found", details={"user_id": str(user_id)})
        if not data.items:
            raise ValidationError("Transaction items cannot be empty")

        lines, total_price, total_quantity = OrderService._price_items(db, data.items)

        # Commit pass: order, items and stock in one transaction
        try:
            order = OrderRepository.add_order(db, user.id, total_price)
            for position, line in enumerate(lines):
                OrderRepository.add_item(
                    db,
                    order_id=order.id,
                    book_id=line.book.id,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    position=position,
                )
                if not BookRepository.try_decrement_stock(db, line.book.id, line.quantity):
                    raise ConflictError(
                        f"Stock for book '{line.book.title}' changed, please retry",
                        details={"book_id": str(line.book.id)},
                    )
            order_id = order.id
            db.commit()
        except ConflictError:
            db.rollback()
            logger.warning("Transaction rolled back: concurrent stock change")
            raise
        except IntegrityError as e:
            db.rollback()
            raise ConflictError("Transaction could not be committed") from e
        except Exception:
            db.rollback()
            raise

        logger.info(
            "Transaction %s created by %s: %d items, total %s",
            order_id, identity.id, total_quantity, total_price,
        )
        return OrderService.get_transaction_by_id(db, order_id)

    @staticmethod
    def get_all_transactions(db: Session) -> list[TransactionRead]:
        return [OrderService._to_read(order) for order in OrderRepository.list(db)]

    @staticmethod
    def get_transaction_by_id(db: Session, order_id: uuid.UUID) -> TransactionRead:
        order = OrderRepository.get(db, order_id)
        if order is None:
            raise NotFoundError("Transaction not found")
        return OrderService._to_read(order)

    @staticmethod
    def get_statistics(db: Session) -> TransactionStatistics:
        average = OrderRepository.average_total(db) or Decimal("0")
        most = OrderRepository.genre_by_item_count(db, most_first=True)
        least = OrderRepository.genre_by_item_count(db, most_first=False)
        return TransactionStatistics(
            total_transaction=OrderRepository.count(db),
            average_transaction=average.quantize(_CENTS),
            most_popular_genre=most.name if most else None,
            least_popular_genre=least.name if least else None,
        )

    @staticmethod
    def _to_read(order: Order) -> TransactionRead:
        # historical view: books and genres are shown even if deleted since
        items = [
            TransactionItemRead(
                book_id=item.book_id,
                title=item.book.title,
                genre=GenreSummary.model_validate(item.book.genre) if item.book.genre else None,
                quantity=item.quantity,
                unit_price=item.unit_price,
                subtotal=item.unit_price * item.quantity,
            )
            for item in order.items
        ]
        return TransactionRead(
            id=order.id,
            user=UserSummary.model_validate(order.user),
            items=items,
            total_quantity=sum(item.quantity for item in order.items),
            total_price=order.total_price,
            created_at=order.created_at,
        )
