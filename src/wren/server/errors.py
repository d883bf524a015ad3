"""Turn exceptions raised while serving into responses.

``HTTPError`` subclasses carry their own status; a handler registered
for the exception class or for that status may render the page. Any
other exception is a 500: it goes to the nearest handler registered
for one of its classes (or for 500), else to a bare text body.
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any

from wren._internal.invoke import invoke
from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import Response
from wren.server.negotiation import negotiate

logger = logging.getLogger("wren.server")

type ErrorHandlers = dict[int | type, Callable[..., Any]]


def find_handler(error_handlers: ErrorHandlers, exc: Exception) -> Callable[..., Any] | None:
    """The handler registered for the closest class in *exc*'s MRO."""
    return next(
        (error_handlers[cls] for cls in type(exc).__mro__ if cls in error_handlers),
        None,
    )


async def render_with(handler: Callable[..., Any], request: Request, exc: Exception) -> Response:
    """Call *handler* with as many of ``(request, exc)`` as it accepts."""
    arity = min(len(inspect.signature(handler).parameters), 2)
    return negotiate(await invoke(handler, *(request, exc)[:arity]))


async def error_response(
    exc: Exception,
    request: Request,
    error_handlers: ErrorHandlers,
    *,
    debug: bool = False,
) -> Response:
    if isinstance(exc, HTTPError):
        return await _http_error(exc, request, error_handlers, debug)
    return await _server_error(exc, request, error_handlers, debug)


async def _http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: ErrorHandlers,
    debug: bool,
) -> Response:
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
    handler = error_handlers.get(type(exc)) or error_handlers.get(exc.status)
    if handler is None:
        text = f"{exc.status}: {exc.detail}" if debug and exc.detail else exc.detail
        return Response(body=text or f"Error {exc.status}", status=exc.status).with_headers(
            dict(exc.headers)
        )

    response = await render_with(handler, request, exc)
    # A handler that left the default 200 gets the error's status.
    if response.status == 200:
        response = response.with_status(exc.status)
    missing = {name: value for name, value in exc.headers if response.header(name) is None}
    return response.with_headers(missing) if missing else response


async def _server_error(
    exc: Exception,
    request: Request,
    error_handlers: ErrorHandlers,
    debug: bool,
) -> Response:
    handler = find_handler(error_handlers, exc) or error_handlers.get(500)
    if handler is None:
        logger.exception("500 %s %s", request.method, request.path)
        body = f"<pre>{type(exc).__name__}: {exc}</pre>" if debug else "Internal Server Error"
        return Response(body=body, status=500)

    logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.path, exc)
    response = await render_with(handler, request, exc)
    return response.with_status(500) if response.status == 200 else response
