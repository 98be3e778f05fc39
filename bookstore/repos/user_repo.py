import uuid
from sqlalchemy import select
from sqlalchemy.orm import Session

from bookstore.models.user import User


class UserRepository:

    @staticmethod
    # Create a new user (password already hashed)
    def create(db: Session, email: str, password_hash: str, username: str | None) -> User:
        user = User(email=email, password=password_hash, username=username)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    # Get a user by ID
    def get(db: Session, user_id: uuid.UUID) -> User | None:
        return db.get(User, user_id)

    @staticmethod
    # Get a user by email
    def get_by_email(db: Session, email: str) -> User | None:
        stmt = select(User).where(User.email == email)
        return db.scalars(stmt).first()
