"""In-process test client for switchyard routers.

Drives the router through its ASGI entry point, so 404, 405 and 303
answers come back exactly as a server would send them.
"""

from typing import Any
from urllib.parse import quote, unquote

from switchyard._internal.asgi import Message, Scope
from switchyard.http.response import Response
from switchyard.router import Router

# RFC 3986 pchar plus "/" and "%"; everything else is escaped in raw_path
_RAW_PATH_SAFE = "/%:@!$&'()*+,;="


def build_scope(method: str, target: str, headers: dict[str, str] | None = None) -> Scope:
    """Build the ASGI HTTP scope for *target* (a path with optional query).

    ``path`` is percent-decoded and ``raw_path`` percent-encoded, the way
    ASGI servers fill them in, so non-ASCII paths can be sent as is.
    """
    path, _, query = target.partition("?")
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method.upper(),
        "path": unquote(path),
        "raw_path": quote(path, safe=_RAW_PATH_SAFE).encode("ascii"),
        "query_string": quote(query, safe="=&%+").encode("ascii"),
        "root_path": "",
        "headers": [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in (headers or {}).items()
        ],
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 0),
    }


class _ResponseRecorder:
    """ASGI send channel that assembles the messages into a Response."""

    def __init__(self) -> None:
        self.status = 0
        self.raw_headers: list[tuple[bytes, bytes]] = []
        self.body = bytearray()

    async def __call__(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self.status = message["status"]
            self.raw_headers = list(message.get("headers", ()))
        elif message["type"] == "http.response.body":
            self.body += message.get("body", b"")

    def response(self) -> Response:
        content_type = ""
        headers: list[tuple[str, str]] = []
        for raw_name, raw_value in self.raw_headers:
            name, value = raw_name.decode("latin-1"), raw_value.decode("latin-1")
            if name == "content-type":
                content_type = value
            elif name != "content-length":
                headers.append((name, value))
        return Response(
            body=bytes(self.body),
            status=self.status,
            content_type=content_type,
            headers=tuple(headers),
        )


class TestClient:
    """Async test client for switchyard routers.

    Entering the client freezes the router, as the first request would.
    Response header names come back lower-cased.

    Usage::

        async with TestClient(router) as client:
            response = await client.post("/articles")
            assert response.header("allow") == "GET"
    """

    __test__ = False

    __slots__ = ("router",)

    def __init__(self, router: Router) -> None:
        self.router = router

    async def __aenter__(self) -> "TestClient":
        self.router.freeze()
        return self

    async def __aexit__(self, *args: object) -> None:
        pass

    async def request(
        self,
        method: str,
        target: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes = b"",
    ) -> Response:
        """Send one request and return the router's answer."""
        delivered = False

        async def receive() -> dict[str, Any]:
            nonlocal delivered
            if delivered:
                return {"type": "http.disconnect"}
            delivered = True
            return {"type": "http.request", "body": body, "more_body": False}

        recorder = _ResponseRecorder()
        await self.router(build_scope(method, target, headers), receive, recorder)
        return recorder.response()

    async def get(self, target: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("GET", target, headers=headers)

    async def post(
        self, target: str, *, headers: dict[str, str] | None = None, body: bytes = b""
    ) -> Response:
        return await self.request("POST", target, headers=headers, body=body)

    async def put(
        self, target: str, *, headers: dict[str, str] | None = None, body: bytes = b""
    ) -> Response:
        return await self.request("PUT", target, headers=headers, body=body)

    async def delete(self, target: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("DELETE", target, headers=headers)
