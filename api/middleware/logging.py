"""Request logging middleware."""

import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("cookiecogs.api")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with a short id and logs method, path, status and
    duration. Both values are echoed back as response headers.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        started = time.perf_counter()

        logger.debug(f"[{request_id}] {request.method} {request.url.path}")

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed = (time.perf_counter() - started) * 1000
            logger.error(
                f"[{request_id}] {request.method} {request.url.path} - "
                f"failed after {elapsed:.2f}ms: {e}"
            )
            raise

        elapsed = (time.perf_counter() - started) * 1000
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time-Ms"] = f"{elapsed:.2f}"

        # 4xx/5xx at WARNING
        level = logging.INFO if response.status_code < 400 else logging.WARNING
        logger.log(
            level,
            f"[{request_id}] {request.method} {request.url.path} - "
            f"{response.status_code} in {elapsed:.2f}ms"
        )
        return response
