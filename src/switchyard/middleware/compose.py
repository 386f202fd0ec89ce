"""Middleware composition.

``use(a, b)`` returns one middleware equivalent to ``a(b(handler))``:
the first middleware listed is the outermost, so it sees the request
first and the response last.
"""

import functools
import inspect
from typing import Any

from switchyard._internal.types import Handler, RouteHandler
from switchyard.errors import InvalidRegistration
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.middleware.protocol import AroundFunc, Middleware
from switchyard.server.coerce import to_response


async def _resolve(result: Any) -> Any:
    """Await *result* if a handler returned an awaitable."""
    if inspect.isawaitable(result):
        return await result
    return result


def as_handler(handler: RouteHandler) -> Handler:
    """Adapt a user handler to ``async (Request) -> Response``.

    Sync and async callables are both accepted; the return value goes
    through ``to_response()``.
    """

    @functools.wraps(handler)
    async def endpoint(request: Request) -> Response:
        return to_response(await _resolve(handler(request)))

    return endpoint


def use(*middlewares: Middleware) -> Middleware:
    """Compose *middlewares* into a single middleware.

    Pure: the arguments are not modified and nothing is called until the
    composed handler itself handles a request. Every layer's output is
    normalized with ``as_handler()``, so a middleware may return a sync
    wrapper or a wrapper that returns plain values.

    Usage::

        chain = use(access_log, timing)
        router.handle("GET", "/", chain(index))

    Raises ``InvalidRegistration`` if an argument is not callable.
    """
    for mw in middlewares:
        if not callable(mw):
            msg = f"Middleware must be callable, got {mw!r}."
            raise InvalidRegistration(msg)
    chain = tuple(middlewares)

    def composed(handler: RouteHandler) -> Handler:
        wrapped = as_handler(handler)
        for mw in reversed(chain):
            wrapped = as_handler(mw(wrapped))
        return wrapped

    return composed


def around(fn: AroundFunc) -> Middleware:
    """Adapt a ``(request, next)`` function into a middleware.

    Usage::

        @around
        async def require_token(request, next):
            if "authorization" not in request.headers:
                return Response("Unauthorized", status=401)
            return await next(request)
    """

    def middleware(next_handler: Handler) -> Handler:
        async def handler(request: Request) -> object:
            return await _resolve(fn(request, next_handler))

        return handler

    functools.update_wrapper(middleware, fn)
    return middleware
