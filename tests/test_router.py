"""Tests for switchyard.router — dispatch through the ASGI interface."""

import asyncio

import pytest

from switchyard import Router, RouterConfig, get_param
from switchyard.errors import InvalidRegistration, MethodNotAllowed, NotFound
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.testing import TestClient


def _show_article(request: Request) -> str:
    return f"article {get_param(request, 'id')}"


class TestDispatch:
    async def test_matched_route(self) -> None:
        router = Router()
        router.handle("GET", "/articles/:id", _show_article)

        async with TestClient(router) as client:
            response = await client.get("/articles/42")

        assert response.status == 200
        assert response.text == "article 42"

    async def test_async_handler(self) -> None:
        router = Router()

        @router.get("/ping")
        async def ping(request: Request) -> str:
            await asyncio.sleep(0)
            return "pong"

        async with TestClient(router) as client:
            response = await client.get("/ping")
        assert response.text == "pong"

    async def test_not_found(self) -> None:
        router = Router()
        router.handle("GET", "/articles", _show_article)

        async with TestClient(router) as client:
            response = await client.get("/users")

        assert response.status == 404
        assert response.text == "Not Found"
        assert response.content_type.startswith("text/plain")

    async def test_method_not_allowed(self) -> None:
        router = Router()
        router.handle("GET", "/articles", _show_article)

        async with TestClient(router) as client:
            response = await client.post("/articles")

        assert response.status == 405
        assert response.header("allow") == "GET"
        assert response.text == "Method Not Allowed"

    async def test_allow_lists_every_method(self) -> None:
        router = Router()
        router.handle("GET", "/articles/:id", _show_article)
        router.handle("PUT", "/articles/:id", _show_article)
        router.handle("DELETE", "/articles/:id", _show_article)

        async with TestClient(router) as client:
            response = await client.post("/articles/1")

        assert response.header("allow") == "GET, PUT, DELETE"

    async def test_catch_all(self) -> None:
        router = Router()
        router.handle("GET", "/static/*filepath", lambda r: get_param(r, "filepath"))

        async with TestClient(router) as client:
            response = await client.get("/static/css/site.css")
        assert response.text == "css/site.css"

    async def test_missing_param_is_empty(self) -> None:
        router = Router()
        router.handle("GET", "/articles/:id", lambda r: repr(get_param(r, "slug")))

        async with TestClient(router) as client:
            response = await client.get("/articles/1")
        assert response.text == "''"

    async def test_unclean_request_path(self) -> None:
        router = Router()
        router.handle("GET", "/articles/:id", _show_article)

        async with TestClient(router) as client:
            response = await client.get("//articles/./7")
        assert response.text == "article 7"

    async def test_group(self) -> None:
        router = Router()

        def update_user(request: Request) -> dict[str, str]:
            return dict(request.path_params)

        router.group("/api/", lambda api: api.handle("POST", "user/:id", update_user))

        async with TestClient(router) as client:
            response = await client.post("/api/user/123")

        assert response.status == 200
        assert response.content_type == "application/json"
        assert response.text == '{"id": "123"}'

    async def test_handler_return_values_are_coerced(self) -> None:
        router = Router()
        router.handle("POST", "/items", lambda r: ({"created": True}, 201))
        router.handle("DELETE", "/items/:id", lambda r: None)

        async with TestClient(router) as client:
            created = await client.post("/items")
            deleted = await client.delete("/items/1")

        assert created.status == 201
        assert deleted.status == 204
        assert deleted.body_bytes == b""

    async def test_handler_reads_body_from_receive(self) -> None:
        router = Router()

        @router.post("/echo")
        async def echo(request: Request) -> bytes:
            assert request.receive is not None
            message = await request.receive()
            return message["body"]

        async with TestClient(router) as client:
            response = await client.post("/echo", body=b"hello")
        assert response.body_bytes == b"hello"
        assert response.content_type == "application/octet-stream"


class TestTrailingSlash:
    async def test_not_found_by_default(self) -> None:
        router = Router()
        router.handle("GET", "/articles", _show_article)

        async with TestClient(router) as client:
            response = await client.get("/articles/")
        assert response.status == 404

    async def test_redirect_when_enabled(self) -> None:
        router = Router(RouterConfig(redirect_trailing_slash=True))
        router.handle("GET", "/articles", _show_article)

        async with TestClient(router) as client:
            response = await client.get("/articles/")

        assert response.status == 303
        assert response.header("location") == "/articles"

    async def test_redirect_adds_missing_slash(self) -> None:
        router = Router(RouterConfig(redirect_trailing_slash=True))
        router.handle("GET", "/docs/", _show_article)

        async with TestClient(router) as client:
            response = await client.get("/docs")
        assert response.header("location") == "/docs/"

    async def test_redirect_keeps_query_string(self) -> None:
        router = Router(RouterConfig(redirect_trailing_slash=True))
        router.handle("GET", "/articles", _show_article)

        async with TestClient(router) as client:
            response = await client.get("/articles/?page=2")
        assert response.header("location") == "/articles?page=2"

    async def test_redirect_location_is_percent_encoded(self) -> None:
        router = Router(RouterConfig(redirect_trailing_slash=True))
        router.handle("GET", "/tags/:name", lambda r: get_param(r, "name"))

        async with TestClient(router) as client:
            redirected = await client.get("/tags/文/")
            matched = await client.get("/tags/文")

        assert redirected.status == 303
        assert redirected.header("location") == "/tags/%E6%96%87"
        assert matched.text == "文"

    async def test_non_ascii_redirect_through_asgi(self) -> None:
        router = Router(RouterConfig(redirect_trailing_slash=True))
        router.handle("GET", "/tags/:name", lambda r: get_param(r, "name"))
        scope = {
            "type": "http",
            "method": "GET",
            "path": "/tags/文/",
            "query_string": b"",
            "headers": [],
        }
        sent: list[dict] = []

        async def receive() -> dict:
            return {"type": "http.request", "body": b"", "more_body": False}

        async def send(message: dict) -> None:
            sent.append(message)

        await router(scope, receive, send)

        assert sent[0]["status"] == 303
        assert (b"location", b"/tags/%E6%96%87") in sent[0]["headers"]

    async def test_redirect_keeps_encoded_reserved_characters(self) -> None:
        router = Router(RouterConfig(redirect_trailing_slash=True))
        router.handle("GET", "/files/:name", lambda r: get_param(r, "name"))

        response = await router.serve(Request(method="GET", path="/files/50% off/"))
        assert response.header("Location") == "/files/50%25%20off"

    async def test_exact_match_needs_no_redirect(self) -> None:
        router = Router(RouterConfig(redirect_trailing_slash=True))
        router.handle("GET", "/articles", lambda r: "list")

        async with TestClient(router) as client:
            response = await client.get("/articles")
        assert response.status == 200


class TestErrors:
    async def test_http_error_from_handler(self) -> None:
        router = Router()

        def missing(request: Request) -> str:
            raise NotFound("No such article")

        router.handle("GET", "/articles/:id", missing)

        async with TestClient(router) as client:
            response = await client.get("/articles/1")
        assert response.status == 404
        assert response.text == "No such article"

    async def test_http_error_headers(self) -> None:
        router = Router()

        def readonly(request: Request) -> str:
            raise MethodNotAllowed(("GET", "HEAD"))

        router.handle("POST", "/archive", readonly)

        async with TestClient(router) as client:
            response = await client.post("/archive")
        assert response.status == 405
        assert response.header("allow") == "GET, HEAD"

    async def test_unexpected_error_is_500(self) -> None:
        router = Router()

        def boom(request: Request) -> str:
            raise ValueError("boom")

        router.handle("GET", "/boom", boom)

        async with TestClient(router) as client:
            response = await client.get("/boom")
        assert response.status == 500
        assert response.text == "Internal Server Error"

    async def test_debug_shows_traceback(self) -> None:
        router = Router(RouterConfig(debug=True))

        def boom(request: Request) -> str:
            raise ValueError("boom")

        router.handle("GET", "/boom", boom)

        async with TestClient(router) as client:
            response = await client.get("/boom")
        assert response.status == 500
        assert "ValueError: boom" in response.text

    async def test_bad_return_value_is_500(self) -> None:
        router = Router()
        router.handle("GET", "/bad", lambda r: object())

        async with TestClient(router) as client:
            response = await client.get("/bad")
        assert response.status == 500


class TestServe:
    async def test_serve_request_directly(self) -> None:
        router = Router()
        router.handle("GET", "/articles/:id", _show_article)

        response = await router.serve(Request(method="GET", path="/articles/5"))
        assert isinstance(response, Response)
        assert response.text == "article 5"

    async def test_original_request_is_not_modified(self) -> None:
        router = Router()
        router.handle("GET", "/articles/:id", _show_article)

        request = Request(method="GET", path="/articles/5")
        await router.serve(request)
        assert request.path_params == {}

    async def test_concurrent_requests_keep_their_params(self) -> None:
        router = Router()

        async def slow(request: Request) -> str:
            await asyncio.sleep(0.01 if get_param(request, "id") == "1" else 0)
            return get_param(None, "id")

        router.handle("GET", "/items/:id", slow)

        async with TestClient(router) as client:
            responses = await asyncio.gather(
                *(client.get(f"/items/{n}") for n in range(1, 6))
            )

        assert [r.text for r in responses] == ["1", "2", "3", "4", "5"]


class TestFreeze:
    async def test_routes_cannot_be_added_after_first_request(self) -> None:
        router = Router()
        router.handle("GET", "/", lambda r: "home")
        await router.serve(Request(method="GET", path="/"))

        with pytest.raises(RuntimeError, match="Cannot add routes"):
            router.handle("GET", "/late", lambda r: "late")

    def test_middleware_cannot_be_added_after_freeze(self) -> None:
        router = Router()
        router.freeze()
        with pytest.raises(RuntimeError, match="Cannot modify the router"):
            router.add_middleware(lambda h: h)

    def test_freeze_is_idempotent(self) -> None:
        router = Router()
        router.freeze()
        router.freeze()

    def test_non_callable_middleware(self) -> None:
        router = Router()
        with pytest.raises(InvalidRegistration):
            router.add_middleware("nope")  # type: ignore[arg-type]

    def test_routes_property(self) -> None:
        router = Router()
        router.handle("GET", "/a", _show_article)
        router.group("/b", lambda t: t.handle("POST", "/c", _show_article))
        assert [(r.method, r.path) for r in router.routes] == [("GET", "/a"), ("POST", "/b/c")]


class TestRun:
    def test_run_freezes_and_starts_server(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[tuple[object, ...]] = []

        def fake_run_dev_server(app, host, port, *, reload, log_level) -> None:
            calls.append((app, host, port, reload, log_level))

        monkeypatch.setattr("switchyard.server.dev.run_dev_server", fake_run_dev_server)

        router = Router(RouterConfig(port=3000, log_level="debug"))
        router.run(host="0.0.0.0")

        assert calls == [(router, "0.0.0.0", 3000, False, "debug")]
        with pytest.raises(RuntimeError):
            router.handle("GET", "/late", _show_article)
