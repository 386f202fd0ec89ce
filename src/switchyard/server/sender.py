"""Writes a switchyard Response to an ASGI send channel."""

from switchyard._internal.asgi import Send
from switchyard.http.response import Response

# 1xx are excluded separately
BODYLESS_STATUSES = frozenset({204, 304})


def _encode_headers(response: Response, content_length: int) -> list[tuple[bytes, bytes]]:
    pairs = [
        ("content-type", response.content_type),
        *response.headers,
        ("content-length", str(content_length)),
    ]
    return [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in pairs]


async def send_response(response: Response, send: Send) -> None:
    """Send *response* as one ``http.response.start`` and one body message.

    Header values must be Latin-1; redirect locations are percent-encoded
    before they get here.
    """
    if response.status < 200 or response.status in BODYLESS_STATUSES:
        body = b""
    else:
        body = response.body_bytes

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": _encode_headers(response, len(body)),
        }
    )
    await send({"type": "http.response.body", "body": body})
