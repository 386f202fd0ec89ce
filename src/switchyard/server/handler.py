"""ASGI handler — translates ASGI scope/messages to switchyard types.

The only component that touches raw HTTP ASGI messages directly. Builds
a typed Request from the scope, lets the router turn it into a Response,
and sends that back through ASGI send().
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from switchyard._internal.asgi import Receive, Scope, Send
from switchyard.http.request import Request
from switchyard.server.sender import send_response

if TYPE_CHECKING:
    from switchyard.router import Router


async def handle_request(scope: Scope, receive: Receive, send: Send, *, router: Router) -> None:
    """Process a single HTTP request through the router."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    response = await router.serve(request)
    await send_response(response, send)
