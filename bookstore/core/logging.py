import logging
import sys
from collections.abc import MutableMapping
from typing import Any, Final
from logging import LoggerAdapter, LogRecord
from typing_extensions import override
from fastapi import Request

# every record carries these, "-" outside a request
CONTEXT_FIELDS: Final[tuple[str, ...]] = ("request_id", "user_id")

_LOG_FORMAT: Final[str] = (
    "%(asctime)s %(levelname)s %(name)s :: %(message)s "
    "[req=%(request_id)s user=%(user_id)s]"
)
_SERVER_LOGGERS: Final[tuple[str, ...]] = ("uvicorn", "uvicorn.error", "uvicorn.access")


class RequestLogFilter(logging.Filter):
    """Fill missing context fields so the format string never fails."""

    @override
    def filter(self, record: LogRecord) -> bool:
        for field in CONTEXT_FIELDS:
            if not hasattr(record, field):
                setattr(record, field, "-")
        return True


class RequestContextAdapter(LoggerAdapter):  # type: ignore[type-arg]
    """
    Adds request context to every record while keeping the caller's own
    `extra` keys (plain LoggerAdapter replaces them).
    """

    @override
    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        context = dict(self.extra or {})
        context.update(kwargs.get("extra") or {})
        kwargs["extra"] = context
        return msg, kwargs


def resolve_level(level: int | str) -> int:
    """Accept 10 / "debug" / "INFO"; unknown names fall back to INFO."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Send app, uvicorn and SQLAlchemy output through one stdout handler.
    SQL statement logging only shows up at DEBUG.
    """
    level = resolve_level(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(RequestLogFilter())
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)

    for name in _SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.setLevel(level)
        server_logger.addHandler(handler)
        server_logger.propagate = False

    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if level <= logging.DEBUG else logging.WARNING
    )


def get_logger(name: str, request: Request | None = None) -> RequestContextAdapter:
    """
    Logger bound to the current request, if any.
    Usage: logger = get_logger(__name__, request)
    """
    context: dict[str, str] = {}
    if request is not None:
        context["request_id"] = getattr(request.state, "correlation_id", "-")
        context["user_id"] = str(getattr(request.state, "user_id", "-"))
    return RequestContextAdapter(logging.getLogger(name), context)
