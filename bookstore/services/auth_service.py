from email_validator import EmailNotValidError, validate_email
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookstore.core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from bookstore.core.logging import get_logger
from bookstore.core.security import (
    Identity,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from bookstore.models.user import User
from bookstore.repos.user_repo import UserRepository
from bookstore.schemas.auth import LoginRequest, LoginResult, RegisterRequest, UserSummary

MIN_PASSWORD_LENGTH = 8

logger = get_logger(__name__)


class AuthService:
    @staticmethod
    def register(db: Session, data: RegisterRequest) -> User:
        if not data.email or not data.password:
            raise ValidationError("Email and password are required")
        try:
            validate_email(data.email, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValidationError("Invalid email format") from e
        if len(data.password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )

        if UserRepository.get_by_email(db, data.email):
            raise ConflictError("Email already registered")

        try:
            user = UserRepository.create(
                db, data.email, hash_password(data.password), data.username
            )
        except IntegrityError as e:
            # lost a race against another registration
            db.rollback()
            raise ConflictError("Email already registered") from e

        logger.info("User registered: %s", user.id)
        return user

    @staticmethod
    def login(db: Session, data: LoginRequest) -> LoginResult:
        if not data.email or not data.password:
            raise ValidationError("Email and password are required")

        user = UserRepository.get_by_email(db, data.email)
        # same answer for unknown email and wrong password
        if user is None or not verify_password(data.password, user.password):
            logger.info("Failed login attempt")
            raise AuthError("Invalid credentials")

        identity = Identity(id=user.id, email=user.email, username=user.username)
        token = create_access_token(identity)
        return LoginResult(access_token=token, user=UserSummary.model_validate(user))

    @staticmethod
    def verify(token: str) -> Identity:
        return decode_access_token(token)

    @staticmethod
    def get_profile(db: Session, identity: Identity) -> User:
        user = UserRepository.get(db, identity.id)
        if user is None:
            raise NotFoundError("User not found")
        return user
