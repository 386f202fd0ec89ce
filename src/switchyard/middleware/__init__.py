"""Middleware — handler-wrapping functions, no inheritance required.

A middleware is any callable matching:
    def mw(next: Handler) -> Handler

Compose with ``use(a, b, ...)``; the first listed runs outermost.

Built-in middleware:
    access_log -- One INFO log line per request
    timing -- X-Response-Time header
"""

from switchyard.middleware.builtin import access_log, timing
from switchyard.middleware.compose import around, as_handler, use
from switchyard.middleware.protocol import Middleware, Next

__all__ = [
    "Middleware",
    "Next",
    "access_log",
    "around",
    "as_handler",
    "timing",
    "use",
]
