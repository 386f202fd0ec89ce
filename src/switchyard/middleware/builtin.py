"""Built-in middleware: access logging and response timing."""

import logging
import time

from switchyard._internal.types import Handler
from switchyard.http.request import Request
from switchyard.http.response import Response

access_logger = logging.getLogger("switchyard.access")


def access_log(next_handler: Handler) -> Handler:
    """Log one INFO line per request: method, path, status, duration."""

    async def handler(request: Request) -> Response:
        start = time.monotonic()
        response = await next_handler(request)
        elapsed_ms = (time.monotonic() - start) * 1000
        access_logger.info(
            "%s %s %d %.1fms", request.method, request.url, response.status, elapsed_ms
        )
        return response

    return handler


def timing(next_handler: Handler) -> Handler:
    """Add an ``X-Response-Time`` header (seconds) to every response."""

    async def handler(request: Request) -> Response:
        start = time.monotonic()
        response = await next_handler(request)
        elapsed = time.monotonic() - start
        return response.with_header("X-Response-Time", f"{elapsed:.3f}s")

    return handler
