"""Return-value coercion — maps handler return values to Response objects.

isinstance-based dispatch, no magic, fully predictable.
"""

import json as json_module
from typing import Any

from switchyard.http.response import Response


def to_response(value: Any) -> Response:
    """Convert a route handler's return value to a Response.

    Dispatch order:

    1. ``Response``            -> pass through
    2. ``None``                -> 204, empty body
    3. ``str``                 -> 200, text/plain
    4. ``bytes``               -> 200, application/octet-stream
    5. ``dict`` / ``list``     -> 200, application/json
    6. ``(value, int)``        -> coerce value, override status
    7. ``(value, int, dict)``  -> coerce value, override status + headers
    """
    match value:
        case Response():
            return value
        case None:
            return Response(status=204)
        case str():
            return Response(body=value)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case dict() | list():
            return Response(
                body=json_module.dumps(value),
                content_type="application/json",
            )
        case (inner, int() as status):
            return to_response(inner).with_status(status)
        case (inner, int() as status, dict() as headers):
            return to_response(inner).with_status(status).with_headers(headers)

    msg = (
        f"Handler returned {type(value).__name__!r}, which cannot be turned into a "
        "response. Return a Response, str, bytes, dict, list, None, or a "
        "(value, status[, headers]) tuple."
    )
    raise TypeError(msg)
