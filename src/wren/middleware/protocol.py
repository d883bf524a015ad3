"""The shape of a wren middleware.

Access logging and admin auth are both middleware: async callables that
take the request and the rest of the chain, and return a response.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from wren.http.request import Request
from wren.http.response import Response

type Next = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Any ``async (request, next) -> Response`` callable, function or object.

    Returning without awaiting *next* short-circuits the route::

        async def no_robots(request: Request, next: Next) -> Response:
            if request.path == "/robots.txt":
                return Response("no robots here", status=404)
            return await next(request)
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...
