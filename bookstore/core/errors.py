from collections.abc import Mapping, Sequence
from typing import Any, ClassVar, cast
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

from bookstore.core.logging import get_logger


class AppError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: ClassVar[int] = HTTP_500_INTERNAL_SERVER_ERROR
    error_type: ClassVar[str] = "server_error"
    default_message: ClassVar[str] = "Internal Server Error"

    def __init__(self, message: str | None = None, details: dict[str, object] | None = None):
        self.message: str = message or self.default_message
        self.details: dict[str, object] | None = details
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = HTTP_400_BAD_REQUEST
    error_type = "validation_error"
    default_message = "Invalid request"


class InsufficientStockError(ValidationError):
    error_type = "insufficient_stock"

    def __init__(self, book_id: object, title: str, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for book '{title}' ({book_id}): "
            f"requested {requested}, available {available}",
            details={
                "book_id": str(book_id),
                "title": title,
                "requested": requested,
                "available": available,
            },
        )


class AuthError(AppError):
    status_code = HTTP_401_UNAUTHORIZED
    error_type = "auth_error"
    default_message = "Unauthorized"


class TokenExpiredError(AuthError):
    error_type = "token_expired"
    default_message = "Token expired"


class InvalidTokenError(AuthError):
    error_type = "invalid_token"
    default_message = "Invalid token"


class NotFoundError(AppError):
    status_code = HTTP_404_NOT_FOUND
    error_type = "not_found"
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = HTTP_409_CONFLICT
    error_type = "conflict"
    default_message = "Resource conflict"


class ServerError(AppError):
    pass


class ErrorBody(BaseModel):
    """Structured error body."""
    type: str
    details: dict[str, object] | None = None
    request_id: str = "-"


class ErrorEnvelope(BaseModel):
    success: bool = False
    message: str
    error: ErrorBody


def _request_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", "-")


def _error_response(
    request: Request,
    status_code: int,
    error_type: str,
    message: str,
    details: dict[str, object] | None = None,
) -> JSONResponse:
    body = ErrorEnvelope(
        message=message,
        error=ErrorBody(type=error_type, details=details, request_id=_request_id(request)),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _serialize_validation_errors(errors: Sequence[Mapping[Any, Any]]) -> list[dict[str, object]]:
    """Serialize validation errors, handling non-serializable objects in context."""

    serialized_errors: list[dict[str, object]] = []

    for error in errors:
        serialized_error: dict[str, object] = dict(error)
        # raw input may hold bytes or other non-JSON values
        serialized_error.pop("input", None)
        serialized_error.pop("url", None)

        if "ctx" in serialized_error and isinstance(serialized_error["ctx"], dict):
            ctx: dict[str, object] = cast(dict[str, object], serialized_error["ctx"]).copy()

            if "error" in ctx:
                ctx["error"] = str(ctx["error"])
            serialized_error["ctx"] = ctx
        if "loc" in serialized_error:
            serialized_error["loc"] = list(cast(Sequence[object], serialized_error["loc"]))
        serialized_errors.append(serialized_error)
    return serialized_errors


def _first_error_message(errors: list[dict[str, object]]) -> str:
    if not errors:
        return "Invalid request payload"
    first = errors[0]
    loc = [str(part) for part in cast(list[object], first.get("loc", [])) if part != "body"]
    msg = str(first.get("msg", "invalid value"))
    return f"{'.'.join(loc)}: {msg}" if loc else msg


def register_exception_handlers(app: FastAPI) -> None:
    """Register centralized exception."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        logger = get_logger(__name__, request)
        if exc.status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("Server error: %s", exc.message)
        else:
            logger.info("%s: %s", exc.error_type, exc.message)
        return _error_response(
            request, exc.status_code, exc.error_type, exc.message, exc.details
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning("HTTP error", extra={"status_code": exc.status_code})
        if exc.status_code == HTTP_404_NOT_FOUND:
            message = "Route not found"
            error_type = "route_not_found"
        else:
            message = str(exc.detail) if exc.detail else "HTTP error"
            error_type = "http_error"
        return _error_response(request, exc.status_code, error_type, message)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.info("Validation error")
        errors = _serialize_validation_errors(exc.errors())
        return _error_response(
            request,
            HTTP_400_BAD_REQUEST,
            "validation_error",
            _first_error_message(errors),
            {"errors": errors},
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning("Database integrity error", extra={"error": str(exc.orig)})

        error_message = str(exc.orig).lower() if exc.orig else str(exc).lower()

        if "foreign key" in error_message:
            message = "Referenced resource not found"
        elif "unique" in error_message:
            message = "Resource already exists"
        elif "check constraint" in error_message:
            message = "Invalid data value"
        else:
            message = "Data integrity violation"

        return _error_response(request, HTTP_409_CONFLICT, "conflict", message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.exception("Unhandled server error", exc_info=exc)
        return _error_response(
            request, HTTP_500_INTERNAL_SERVER_ERROR, "server_error", "Internal Server Error"
        )
