"""Switchyard — an embeddable HTTP request router.

Matches a request's method and path against ``:name`` / ``*name``
patterns, hands the captured parameters to the handler on the request,
and speaks ASGI so any ASGI server can host it.

Basic usage::

    from switchyard import Router, get_param

    router = Router()

    @router.get("/articles/:id")
    def article(request):
        return f"article {get_param(request, 'id')}"

    router.run()
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "HTTPError",
    "InvalidPattern",
    "InvalidRegistration",
    "MethodNotAllowed",
    "Middleware",
    "NotFound",
    "Request",
    "Response",
    "RouteTable",
    "Router",
    "RouterConfig",
    "SwitchyardError",
    "around",
    "get_param",
    "get_request",
    "use",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import switchyard`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from switchyard.router import Router

        return Router

    if name == "RouterConfig":
        from switchyard.config import RouterConfig

        return RouterConfig

    if name == "RouteTable":
        from switchyard.routing.table import RouteTable

        return RouteTable

    if name == "Request":
        from switchyard.http.request import Request

        return Request

    if name == "Response":
        from switchyard.http.response import Response

        return Response

    if name in ("Middleware", "around", "use"):
        from switchyard import middleware as _mw

        return getattr(_mw, name)

    if name in ("get_param", "get_request"):
        from switchyard import context as _ctx

        return getattr(_ctx, name)

    if name in (
        "ConfigurationError",
        "HTTPError",
        "InvalidPattern",
        "InvalidRegistration",
        "MethodNotAllowed",
        "NotFound",
        "SwitchyardError",
    ):
        from switchyard import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
