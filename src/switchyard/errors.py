"""Switchyard exception hierarchy.

Shared across the route table, router, handlers and middleware so every
module raises and catches the same types.

Registration faults (``InvalidPattern``, ``InvalidRegistration``) are
raised from the registering call. Request-time outcomes (404, 405, 303)
are ordinary responses, never exceptions; ``HTTPError`` exists for
handlers that want to short-circuit with a status code.
"""

from dataclasses import dataclass


class SwitchyardError(Exception):
    """Base for all switchyard-specific errors."""


class ConfigurationError(SwitchyardError):
    """Raised when route setup is invalid.

    Always raised at registration time, before the router serves a
    request.
    """


class InvalidPattern(ConfigurationError):  # noqa: N818
    """A route pattern string could not be parsed."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid route pattern {pattern!r}: {reason}")


class InvalidRegistration(ConfigurationError):  # noqa: N818
    """A route registration is missing its method or handler."""


@dataclass(frozen=True, slots=True)
class HTTPError(SwitchyardError):
    """An error that maps directly to an HTTP status code.

    Raised by handlers or middleware. The ASGI pipeline catches it and
    answers with ``status``, ``detail`` and ``headers``.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — nothing to serve at the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — the path exists but not for this HTTP method.

    Carries an ``Allow`` header listing the valid methods in the order
    given.
    """

    def __init__(self, allowed: tuple[str, ...], detail: str = "Method Not Allowed") -> None:
        super().__init__(
            status=405,
            detail=detail,
            headers=(("Allow", ", ".join(allowed)),),
        )
