"""Immutable HTTP request.

Path parameters live on the request itself, so every request carries
its own set.
"""

from dataclasses import dataclass, field

from switchyard._internal.asgi import Receive, Scope
from switchyard.http.headers import Headers
from switchyard.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is the percent-decoded request path. ``path_params`` is
    empty until a route matches; the router then hands the handler a
    copy with the captured parameters filled in.

    ``receive`` is the ASGI receive channel, for handlers that read the
    request body themselves. It is ``None`` on requests built by hand.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query: QueryParams = field(default_factory=QueryParams)
    path_params: dict[str, str] = field(default_factory=dict)
    receive: Receive | None = field(default=None, repr=False, compare=False)

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Path plus query string."""
        if self.query.raw:
            return f"{self.path}?{self.query.raw}"
        return self.path

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> "Request":
        """Build a Request from an ASGI HTTP scope."""
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(scope.get("headers", ())),
            query=QueryParams(scope.get("query_string", b"")),
            receive=receive,
        )
