"""One HTTP exchange: ASGI scope in, response bytes out.

This is the only module that sees raw ASGI messages. It builds the
``Request``, threads it through the middleware chain to the matched
route (or the app's fallback), converts failures to error pages and
hands the result to the sender.
"""

from collections.abc import Callable
from functools import partial
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.invoke import invoke
from wren.errors import NotFound
from wren.http.request import Request
from wren.http.response import Response
from wren.middleware.protocol import Next
from wren.routing.router import Router
from wren.server.errors import ErrorHandlers, error_response
from wren.server.negotiation import negotiate
from wren.server.sender import send_response


def build_chain(middleware: tuple[Callable[..., Any], ...], endpoint: Next) -> Next:
    """Wrap *endpoint* so ``middleware[0]`` sees the request first."""
    chain = endpoint
    for layer in reversed(middleware):
        chain = partial(_call_layer, layer, chain)
    return chain


async def _call_layer(layer: Callable[..., Any], downstream: Next, request: Request) -> Response:
    return await layer(request, downstream)


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: tuple[Callable[..., Any], ...],
    error_handlers: ErrorHandlers,
    fallback: Callable[..., Any] | None = None,
    debug: bool = False,
) -> None:
    if scope["type"] != "http":
        return

    async def endpoint(request: Request) -> Response:
        try:
            handler = router.match(request.method, request.path).route.handler
        except NotFound:
            if fallback is None:
                raise
            handler = fallback
        return negotiate(await invoke(handler, request))

    request = Request.from_asgi(scope, receive)
    try:
        response = await build_chain(middleware, endpoint)(request)
    except Exception as exc:
        response = await error_response(exc, request, error_handlers, debug=debug)
    await send_response(response, send, method=request.method)
