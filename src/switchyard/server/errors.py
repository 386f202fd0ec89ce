"""Error handling pipeline for switchyard requests.

Maps HTTPError exceptions and unexpected failures to Response objects.
"""

import logging
import traceback

from switchyard.errors import HTTPError
from switchyard.http.request import Request
from switchyard.http.response import Response

logger = logging.getLogger("switchyard.server")


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Map an HTTPError raised by a handler or middleware to a Response."""
    logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)

    resp = Response(body=exc.detail or f"Error {exc.status}", status=exc.status)
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


def handle_internal_error(exc: Exception, request: Request, *, debug: bool) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)

    if debug:
        body = "".join(traceback.format_exception(exc))
        return Response(body=body, status=500)
    return Response(body="Internal Server Error", status=500)
