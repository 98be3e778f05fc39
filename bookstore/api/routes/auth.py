from fastapi import APIRouter, Request
from starlette.status import HTTP_201_CREATED

from bookstore.api.deps import CurrentIdentity, DbSession
from bookstore.core.logging import get_logger
from bookstore.schemas.auth import (
    LoginRequest,
    LoginResult,
    RegisterRequest,
    UserProfile,
    UserPublic,
)
from bookstore.schemas.common import ApiResponse
from bookstore.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=ApiResponse[UserPublic], status_code=HTTP_201_CREATED)
def register(data: RegisterRequest, db: DbSession):
    user = AuthService.register(db, data)
    return ApiResponse(
        message="User registered successfully",
        data=UserPublic.model_validate(user),
    )


@router.post("/login", response_model=ApiResponse[LoginResult])
def login(data: LoginRequest, db: DbSession):
    return ApiResponse(message="Login successful", data=AuthService.login(db, data))


@router.get("/me", response_model=ApiResponse[UserProfile])
def me(request: Request, identity: CurrentIdentity, db: DbSession):
    logger = get_logger(__name__, request)
    logger.info("Fetching profile")
    user = AuthService.get_profile(db, identity)
    return ApiResponse(
        message="Profile fetched successfully",
        data=UserProfile.model_validate(user),
    )
