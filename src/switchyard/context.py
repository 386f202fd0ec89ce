"""Request-scoped context via ContextVar.

Provides:
- ``request_var``: The current ``Request`` for this task/thread.
- ``get_param``: Read a captured path parameter.

``request_var`` is set by the router for the duration of one request and
reset afterwards. It holds the request with its path parameters bound
once a route has matched.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local under
    threads. Concurrent requests never see each other's parameters.
"""

from contextvars import ContextVar

from switchyard.http.request import Request

request_var: ContextVar[Request] = ContextVar("switchyard_request")
"""The current request. Set by the router before dispatch."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request context.
    """
    return request_var.get()


def get_param(request: Request | None, name: str) -> str:
    """Return the path parameter *name* captured for *request*.

    Returns the empty string when the matched pattern has no capture of
    that name. Pass ``None`` to read from the current request context.

    Usage::

        router.handle("GET", "/articles/:id", show)

        def show(request):
            return f"article {get_param(request, 'id')}"
    """
    if request is None:
        request = get_request()
    return request.path_params.get(name, "")
