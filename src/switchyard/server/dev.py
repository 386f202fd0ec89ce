"""Development server.

Starts a pounce ASGI server with the live Router object. The router is
the whole application; pounce owns sockets, workers and reloading.
"""


def run_dev_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    log_level: str = "info",
) -> None:
    """Start a single-worker pounce server for *app*.

    Pounce's ``run()`` takes an import string (e.g., ``"myapp:router"``),
    but we hold a live ``Router`` object, so ``pounce.Server`` is used
    directly with the ASGI callable.

    Requires the ``server`` extra (``pip install switchyard[server]``).
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=reload,
        log_level=log_level,
    )
    server = Server(config, app)
    server.run()
