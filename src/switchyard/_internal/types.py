"""Shared type aliases used across switchyard modules."""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from switchyard.http.request import Request
    from switchyard.http.response import Response

# User handler — sync or async, takes the request, returns anything
# the response coercion understands
RouteHandler: TypeAlias = Callable[..., Any]

# Normalized handler — what middleware wraps and the router calls
Handler: TypeAlias = Callable[["Request"], Awaitable["Response"]]
