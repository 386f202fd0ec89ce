"""Route and match-outcome frozen dataclasses."""

from dataclasses import dataclass, field
from typing import TypeAlias

from switchyard._internal.types import RouteHandler
from switchyard.routing.pattern import Pattern


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route.

    Created by ``RouteTable.handle()``; never modified afterwards.
    """

    method: str
    pattern: Pattern
    handler: RouteHandler

    @property
    def path(self) -> str:
        return self.pattern.path

    @property
    def identity(self) -> tuple[str, str]:
        return (self.pattern.path, self.method)


# -- Resolution outcomes --


@dataclass(frozen=True, slots=True)
class NoMatch:
    """No registered pattern fits the request path."""


@dataclass(frozen=True, slots=True)
class MethodMismatch:
    """Patterns fit the path, but none for the request method.

    ``allowed`` lists each fitting route's method once, in registration
    order.
    """

    allowed: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class TrailingSlashOnly:
    """The request differs from a route only by a trailing slash.

    ``location`` is the request path in the route's slash form,
    percent-encoded so it can go straight into a ``Location`` header.
    """

    route: Route
    location: str


@dataclass(frozen=True, slots=True)
class Matched:
    """A route matched; ``params`` belongs to this request alone."""

    route: Route
    params: dict[str, str] = field(default_factory=dict)


MatchOutcome: TypeAlias = NoMatch | MethodMismatch | TrailingSlashOnly | Matched
