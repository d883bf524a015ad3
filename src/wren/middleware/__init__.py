"""Middleware: Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware:
    AccessLog -- One traffic-log line per public request
    BasicAuth -- HTTP Basic gate for a path prefix
"""

from wren.middleware.access_log import AccessLog
from wren.middleware.basic_auth import BasicAuth
from wren.middleware.protocol import Middleware, Next

__all__ = [
    "AccessLog",
    "BasicAuth",
    "Middleware",
    "Next",
]
