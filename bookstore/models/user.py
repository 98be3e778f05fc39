from __future__ import annotations
import uuid
from typing import TYPE_CHECKING
from sqlalchemy import String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from bookstore.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from bookstore.models.order import Order

#User
class User(TimestampMixin, Base):
    __tablename__: str = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    username: Mapped[str | None] = mapped_column(String(100), nullable=True)
    password: Mapped[str] = mapped_column(Text, nullable=False, comment="bcrypt hash")

    orders: Mapped[list[Order]] = relationship(back_populates="user")
