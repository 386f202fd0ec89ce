"""Switchyard router.

Mutable during setup (route registration, groups, middleware).
Frozen at runtime when ``serve()``, ``__call__()`` or ``run()`` is first
invoked.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import replace

from switchyard._internal.asgi import Receive, Scope, Send
from switchyard._internal.types import Handler, RouteHandler
from switchyard.config import RouterConfig
from switchyard.context import request_var
from switchyard.errors import HTTPError, InvalidRegistration
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.middleware.compose import as_handler, use
from switchyard.middleware.protocol import Middleware
from switchyard.routing.route import Matched, MethodMismatch, NoMatch, Route, TrailingSlashOnly
from switchyard.routing.table import RouteTable
from switchyard.server.errors import handle_http_error, handle_internal_error
from switchyard.server.handler import handle_request

logger = logging.getLogger("switchyard.server")


class Router:
    """An embeddable HTTP request router and ASGI application.

    Usage::

        router = Router()

        @router.get("/articles/:id")
        def show(request):
            return f"article {get_param(request, 'id')}"

        router.group("/api", lambda api: api.handle("POST", "user/:id", update))

    Thread safety:
        Registration is single-threaded setup work. The freeze transition
        uses a Lock + double-check so exactly one thread freezes the
        route table, even when an ASGI server calls ``__call__()`` from
        several threads on the first request. After freezing the table is
        only read.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_middleware_list",
        "_pipeline",
        "_table",
        "config",
    )

    def __init__(self, config: RouterConfig | None = None) -> None:
        self.config: RouterConfig = config or RouterConfig()
        self._table = RouteTable()
        self._middleware_list: list[Middleware] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state — set during _freeze()
        self._pipeline: Handler | None = None

    # -- Route registration --

    def handle(self, method: str, pattern: str, handler: RouteHandler) -> Route:
        """Register *handler* for *method* requests matching *pattern*.

        Raises ``InvalidRegistration`` or ``InvalidPattern`` immediately on
        a bad registration.
        """
        return self._table.handle(method, pattern, handler)

    def route(
        self,
        pattern: str,
        *,
        methods: list[str] | None = None,
    ) -> Callable[[RouteHandler], RouteHandler]:
        """Register a route handler via decorator. Methods default to ``["GET"]``."""
        return self._table.route(pattern, methods=methods)

    def get(self, pattern: str) -> Callable[[RouteHandler], RouteHandler]:
        return self._table.get(pattern)

    def post(self, pattern: str) -> Callable[[RouteHandler], RouteHandler]:
        return self._table.post(pattern)

    def put(self, pattern: str) -> Callable[[RouteHandler], RouteHandler]:
        return self._table.put(pattern)

    def patch(self, pattern: str) -> Callable[[RouteHandler], RouteHandler]:
        return self._table.patch(pattern)

    def delete(self, pattern: str) -> Callable[[RouteHandler], RouteHandler]:
        return self._table.delete(pattern)

    def head(self, pattern: str) -> Callable[[RouteHandler], RouteHandler]:
        return self._table.head(pattern)

    def options(self, pattern: str) -> Callable[[RouteHandler], RouteHandler]:
        return self._table.options(pattern)

    def group(self, prefix: str, fn: Callable[[RouteTable], object]) -> None:
        """Mount the routes *fn* registers under *prefix*.

        *fn* receives a child ``RouteTable`` with the same registration
        API (``handle``, ``route``, ``get``..., nested ``group``).
        """
        self._table.group(prefix, fn)

    @property
    def routes(self) -> tuple[Route, ...]:
        """All registered routes, in registration order."""
        return self._table.routes

    # -- Middleware --

    def add_middleware(self, middleware: Middleware) -> None:
        """Wrap the whole router in *middleware*.

        Router-wide middleware runs for every request, including the ones
        answered with 404, 405 or a redirect. The first added is the
        outermost.
        """
        self._check_not_frozen()
        if not callable(middleware):
            msg = f"Middleware must be callable, got {middleware!r}."
            raise InvalidRegistration(msg)
        self._middleware_list.append(middleware)

    # -- Dispatch --

    async def serve(self, request: Request) -> Response:
        """Handle one request and return its response.

        Never raises for request-time outcomes: unknown paths, wrong
        methods and handler errors all come back as responses.
        """
        self._ensure_frozen()
        assert self._pipeline is not None

        token = request_var.set(request)
        try:
            return await self._pipeline(request)
        except HTTPError as exc:
            return handle_http_error(exc, request)
        except Exception as exc:
            return handle_internal_error(exc, request, debug=self.config.debug)
        finally:
            request_var.reset(token)

    async def _dispatch(self, request: Request) -> Response:
        """Resolve the request against the route table and act on the outcome."""
        outcome = self._table.resolve(
            request.method,
            request.path,
            redirect_trailing_slash=self.config.redirect_trailing_slash,
        )

        match outcome:
            case Matched(route=route, params=params):
                bound = replace(request, path_params=params)
                token = request_var.set(bound)
                try:
                    return await as_handler(route.handler)(bound)
                finally:
                    request_var.reset(token)

            case TrailingSlashOnly(location=location):
                if request.query.raw:
                    location = f"{location}?{request.query.raw}"
                logger.debug("303 %s %s -> %s", request.method, request.path, location)
                return Response.redirect(location, status=303)

            case MethodMismatch(allowed=allowed):
                logger.debug("405 %s %s", request.method, request.path)
                return Response(body="Method Not Allowed", status=405).with_header(
                    "Allow", ", ".join(allowed)
                )

            case NoMatch():
                logger.debug("404 %s %s", request.method, request.path)
                return Response(body="Not Found", status=404)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Answers the lifespan protocol directly (freezing the router at
        startup), then delegates HTTP scopes to the request handler.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await handle_request(scope, receive, send, router=self)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the router before the server accepts its first request.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Freeze the router and serve it with pounce.

        Requires the ``server`` extra (``pip install switchyard[server]``).
        """
        self._ensure_frozen()

        from switchyard.server.dev import run_dev_server

        run_dev_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.reload,
            log_level=self.config.log_level,
        )

    # -- Internal --

    def freeze(self) -> None:
        """Freeze the router now instead of on the first request."""
        self._ensure_frozen()

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the router into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        self._table.freeze()
        self._pipeline = use(*self._middleware_list)(self._dispatch)
        self._frozen = True
        logger.debug(
            "Router frozen with %d route(s) and %d middleware",
            len(self._table),
            len(self._middleware_list),
        )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the router after it has started serving requests. "
                "Register routes and middleware before the first request."
            )
            raise RuntimeError(msg)
