"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(redirect_trailing_slash=True, port=3000)

    The router reads ``redirect_trailing_slash`` and ``debug`` on every
    request, so assigning a new config to ``router.config`` takes effect
    on the next request.
    """

    # Dispatch
    redirect_trailing_slash: bool = False  # 303 to the route's slash form instead of 404

    # Error pages
    debug: bool = False  # Include tracebacks in 500 bodies

    # Server (Router.run only)
    host: str = "127.0.0.1"
    port: int = 8000
    reload: bool = False
    log_level: str = "info"
