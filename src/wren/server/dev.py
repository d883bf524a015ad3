"""Run an app on the pounce ASGI server."""

from __future__ import annotations


def run_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
) -> None:
    """Serve *app* with pounce on ``host:port``.

    Wren serialises request handling itself, so one worker is enough;
    ``reload`` restarts on source changes during development.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=reload,
    )
    server = Server(config, app)
    server.run()
