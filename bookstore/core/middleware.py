import time
import uuid
from collections.abc import Awaitable
from typing import Callable
from typing_extensions import override
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from bookstore.core.logging import get_logger


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Per-request context and access log.
    - Reads or generates the correlation id (`X-Request-ID`)
    - Sets `request.state.correlation_id`
    - Echoes the id on the response
    - Logs `METHOD path status duration`
    """

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID"):
        super().__init__(app)
        self.header_name: str = header_name

    @override
    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        corr_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.correlation_id = corr_id

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        response.headers[self.header_name] = corr_id

        logger = get_logger("bookstore.access", request)
        line = "%s %s %d - %.1fms"
        args = (request.method, request.url.path, response.status_code, duration_ms)
        if response.status_code >= 500:
            logger.error(line, *args)
        elif response.status_code >= 400:
            logger.warning(line, *args)
        else:
            logger.info(line, *args)
        return response
