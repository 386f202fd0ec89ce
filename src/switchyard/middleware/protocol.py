"""Middleware and Handler type aliases.

A handler, once normalized, is::

    async def handler(request: Request) -> Response: ...

A middleware is any callable that takes a handler and returns a new one::

    def timing(next: Handler) -> Handler:
        async def handler(request: Request) -> Response:
            start = time.monotonic()
            response = await next(request)
            return response.with_header("X-Time", f"{time.monotonic() - start:.3f}")
        return handler

No base class required. The composer checks the shape, not the lineage.
"""

from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias

from switchyard._internal.types import Handler
from switchyard.http.request import Request

# Handler → handler wrapper
Middleware: TypeAlias = Callable[[Handler], Handler]

# The ``next`` argument of a (request, next) style middleware function
Next: TypeAlias = Handler

# A (request, next) style middleware function, adapted by ``around()``
AroundFunc: TypeAlias = Callable[[Request, Handler], Awaitable[Any] | Any]
