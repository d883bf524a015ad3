"""The wren ``App``: route table, middleware chain and ASGI entry point.

An app is configured first (routes, a fallback, error handlers,
middleware, hooks) and then served. The first request, lifespan event
or ``app.run()`` freezes it; registration after that is an error.
"""

import inspect
import logging
import threading
from collections.abc import Callable, Iterable
from typing import Any

import anyio

from wren._internal.asgi import Receive, Scope, Send
from wren.config import AppConfig
from wren.middleware.protocol import Middleware
from wren.routing.router import Route, Router
from wren.server.handler import handle_request

logger = logging.getLogger("wren.server")

type Handler = Callable[..., Any]


async def _run_hooks(hooks: Iterable[Handler]) -> None:
    for hook in hooks:
        outcome = hook()
        if inspect.isawaitable(outcome):
            await outcome


class App:
    """A single-site wren application.

    Requests are served one at a time: each HTTP request holds an
    ``anyio.Lock`` from routing until its last body byte is sent, so
    handlers may read and write site files inline without interleaving
    with another request. Freezing is guarded by a ``threading.Lock``
    and happens exactly once.
    """

    __slots__ = (
        "_chain",
        "_compile_lock",
        "_compiled",
        "_fallback",
        "_handlers",
        "_on_shutdown",
        "_on_startup",
        "_router",
        "_serial",
        "_stack",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or AppConfig()
        self._router = Router()
        self._stack: list[Middleware] = []
        self._chain: tuple[Middleware, ...] = ()
        self._handlers: dict[int | type, Handler] = {}
        self._fallback: Handler | None = None
        self._on_startup: list[Handler] = []
        self._on_shutdown: list[Handler] = []
        self._compiled = False
        self._compile_lock = threading.Lock()
        # Bound to the running event loop, so made on the first request.
        self._serial: anyio.Lock | None = None

    # -- setup --

    def add_route(
        self,
        path: str,
        handler: Handler,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> None:
        """Map the exact *path* to *handler*.

        *methods* defaults to GET (which also answers HEAD). *name* only
        shows up in ``wren routes``.
        """
        self._refuse_if_compiled()
        allowed = frozenset(method.upper() for method in methods or ("GET",))
        self._router.add(Route(path=path, handler=handler, methods=allowed, name=name))

    def fallback(self, func: Handler) -> Handler:
        """Use *func* for paths no route claims; it may raise ``NotFound``."""
        self._refuse_if_compiled()
        self._fallback = func
        return func

    def error(self, key: int | type[Exception]) -> Callable[[Handler], Handler]:
        """Handle a status code, or an exception class and its subclasses."""

        def register(func: Handler) -> Handler:
            self._refuse_if_compiled()
            self._handlers[key] = func
            return func

        return register

    def add_middleware(self, middleware: Middleware) -> None:
        """Append to the chain; earlier middleware wraps later middleware."""
        self._refuse_if_compiled()
        self._stack.append(middleware)

    def on_startup(self, func: Handler) -> Handler:
        self._refuse_if_compiled()
        self._on_startup.append(func)
        return func

    def on_shutdown(self, func: Handler) -> Handler:
        self._refuse_if_compiled()
        self._on_shutdown.append(func)
        return func

    # -- lifecycle --

    async def startup(self) -> None:
        await _run_hooks(self._on_startup)

    async def shutdown(self) -> None:
        await _run_hooks(self._on_shutdown)

    @property
    def routes(self) -> list[Route]:
        """Registered routes in registration order (freezes the app)."""
        self.freeze()
        return self._router.routes

    def freeze(self) -> None:
        """Stop accepting registrations. Safe to call from any thread."""
        if self._compiled:
            return
        with self._compile_lock:
            if not self._compiled:
                self._router.compile()
                self._chain = tuple(self._stack)
                self._compiled = True

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve on pounce until interrupted."""
        from wren.server.dev import run_server

        self.freeze()
        bind_host = host or self.config.host
        bind_port = port or self.config.port
        logger.info("Serving %s on http://%s:%d", self.config.root, bind_host, bind_port)
        run_server(self, bind_host, bind_port, reload=self.config.debug)

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        self.freeze()
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return

        if self._serial is None:
            self._serial = anyio.Lock()
        async with self._serial:
            await handle_request(
                scope,
                receive,
                send,
                router=self._router,
                middleware=self._chain,
                error_handlers=self._handlers,
                fallback=self._fallback,
                debug=self.config.debug,
            )

    async def _lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            event = (await receive())["type"]
            if event == "lifespan.startup":
                try:
                    await self.startup()
                except Exception as exc:
                    logger.exception("Startup hook failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif event == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    def _refuse_if_compiled(self) -> None:
        if self._compiled:
            msg = (
                "Cannot modify a wren app once it is serving; "
                "register routes, hooks and middleware before the first request."
            )
            raise RuntimeError(msg)
