"""Ordered route table with prefix-scoped grouping.

Routes are kept in registration order and scanned linearly. When two
patterns overlap, the route registered first wins: order is part of the
routing contract, not an accident of storage.
"""

import logging
from collections.abc import Callable
from http import HTTPMethod
from urllib.parse import quote

from switchyard._internal.types import RouteHandler
from switchyard.errors import InvalidRegistration
from switchyard.routing.matcher import match, split_trailing_slash
from switchyard.routing.pattern import clean_path, join_paths, parse_pattern
from switchyard.routing.route import (
    Matched,
    MatchOutcome,
    MethodMismatch,
    NoMatch,
    Route,
    TrailingSlashOnly,
)

logger = logging.getLogger("switchyard.routing")

HTTP_METHODS: frozenset[str] = frozenset(m.value for m in HTTPMethod)

# Characters left as is in a redirect location (RFC 3986 pchar and "/")
LOCATION_SAFE = "/:@!$&'()*+,;="


def normalize_method(method: str) -> str:
    """Upper-case *method* and check it is a known HTTP verb.

    Raises ``InvalidRegistration`` for an empty or unknown method.
    """
    if not method or not method.strip():
        msg = "Route registration requires an HTTP method."
        raise InvalidRegistration(msg)
    verb = method.strip().upper()
    if verb not in HTTP_METHODS:
        msg = f"Unknown HTTP method {method!r}. Expected one of: {', '.join(sorted(HTTP_METHODS))}."
        raise InvalidRegistration(msg)
    return verb


def _slash_form(path: str, trailing_slash: bool) -> str:
    """Return *path* with or without a trailing slash."""
    stripped, _ = split_trailing_slash(path)
    if trailing_slash and stripped != "/":
        return stripped + "/"
    return stripped


class RouteTable:
    """An ordered collection of routes.

    Usage::

        table = RouteTable()
        table.handle("GET", "/articles/:id", show_article)

        def api(t: RouteTable) -> None:
            t.handle("POST", "user/:id", update_user)

        table.group("/api", api)
        outcome = table.resolve("POST", "/api/user/123")

    A table is mutable until ``freeze()``; after that every registration
    call raises ``RuntimeError``.
    """

    __slots__ = ("_frozen", "_identities", "_prefix", "_routes")

    def __init__(self, prefix: str = "") -> None:
        self._prefix = prefix
        self._routes: list[Route] = []
        self._identities: set[tuple[str, str]] = set()
        self._frozen = False

    @property
    def prefix(self) -> str:
        """Mount path applied to every pattern registered here."""
        return self._prefix

    @property
    def routes(self) -> tuple[Route, ...]:
        """All registered routes, in registration order."""
        return tuple(self._routes)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._routes)

    # -- Registration --

    def handle(self, method: str, pattern: str, handler: RouteHandler) -> Route:
        """Register *handler* for *method* requests matching *pattern*.

        Raises ``InvalidRegistration`` for a missing method or a
        non-callable handler, and ``InvalidPattern`` for a malformed
        pattern. Nothing is registered when either is raised.
        """
        self._check_not_frozen()
        verb = normalize_method(method)
        if handler is None or not callable(handler):
            msg = f"Route {verb} {pattern!r} has no callable handler (got {handler!r})."
            raise InvalidRegistration(msg)

        parsed = parse_pattern(pattern)
        if self._prefix:
            parsed = parse_pattern(join_paths(self._prefix, parsed.path))

        route = Route(method=verb, pattern=parsed, handler=handler)
        self._append(route)
        logger.debug("Registered %s %s", verb, parsed.path)
        return route

    def route(
        self,
        pattern: str,
        *,
        methods: list[str] | None = None,
    ) -> Callable[[RouteHandler], RouteHandler]:
        """Register a handler via decorator.

        Args:
            pattern: Route pattern. Use ``:name`` for a segment capture
                and ``*name`` for a trailing catch-all.
            methods: HTTP methods. Defaults to ``["GET"]``.
        """

        def decorator(func: RouteHandler) -> RouteHandler:
            for method in methods or ["GET"]:
                self.handle(method, pattern, func)
            return func

        return decorator

    def get(self, pattern: str) -> Callable[[RouteHandler], RouteHandler]:
        return self.route(pattern, methods=["GET"])

    def post(self, pattern: str) -> Callable[[RouteHandler], RouteHandler]:
        return self.route(pattern, methods=["POST"])

    def put(self, pattern: str) -> Callable[[RouteHandler], RouteHandler]:
        return self.route(pattern, methods=["PUT"])

    def patch(self, pattern: str) -> Callable[[RouteHandler], RouteHandler]:
        return self.route(pattern, methods=["PATCH"])

    def delete(self, pattern: str) -> Callable[[RouteHandler], RouteHandler]:
        return self.route(pattern, methods=["DELETE"])

    def head(self, pattern: str) -> Callable[[RouteHandler], RouteHandler]:
        return self.route(pattern, methods=["HEAD"])

    def options(self, pattern: str) -> Callable[[RouteHandler], RouteHandler]:
        return self.route(pattern, methods=["OPTIONS"])

    def group(self, prefix: str, fn: Callable[["RouteTable"], object]) -> None:
        """Mount the routes registered by *fn* under *prefix*.

        *fn* receives a temporary child table whose registrations are
        prefixed with the mount path. When *fn* returns, the child's
        routes are appended here in their registration order and the
        child is dropped. If *fn* raises, nothing is appended.
        """
        self._check_not_frozen()
        mount = parse_pattern(prefix).path
        if self._prefix:
            mount = join_paths(self._prefix, mount)

        child = RouteTable(prefix=mount)
        fn(child)

        for route in child._routes:
            self._append(route)
        logger.debug("Mounted %d route(s) under %s", len(child), mount)

    def _append(self, route: Route) -> None:
        if route.identity in self._identities:
            logger.warning(
                "Route %s %s registered twice; the first registration wins.",
                route.method,
                route.path,
            )
        self._identities.add(route.identity)
        self._routes.append(route)

    # -- Lookup --

    def freeze(self) -> None:
        """Make the table read-only. No more routes can be added."""
        self._frozen = True

    def resolve(
        self,
        method: str,
        path: str,
        *,
        redirect_trailing_slash: bool = False,
    ) -> MatchOutcome:
        """Find the route for a request.

        Scans in registration order. Routes whose pattern fits but whose
        method differs are collected for the ``Allow`` header and the
        scan goes on. The first fitting route with the right method
        ends the scan: as a ``Matched`` outcome on an exact fit, or as a
        ``TrailingSlashOnly`` outcome when only the trailing slash
        differs and *redirect_trailing_slash* is set. Without the flag,
        trailing-slash-only fits are skipped.
        """
        verb = method.upper()
        cleaned = clean_path(path)
        allowed: list[str] = []

        for route in self._routes:
            result = match(route.pattern, cleaned)
            if not result.matched:
                continue
            if route.method != verb:
                allowed.append(route.method)
                continue
            if result.trailing_slash_differs:
                if redirect_trailing_slash:
                    location = quote(
                        _slash_form(cleaned, route.pattern.trailing_slash), safe=LOCATION_SAFE
                    )
                    return TrailingSlashOnly(route=route, location=location)
                continue
            return Matched(route=route, params=result.params)

        if allowed:
            return MethodMismatch(allowed=tuple(dict.fromkeys(allowed)))
        return NoMatch()

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot add routes after the router has started serving requests. "
                "Register routes and groups before the first request."
            )
            raise RuntimeError(msg)
