"""HTTP Basic authentication for the admin surface.

Every request whose path starts with the configured prefix must carry
credentials matching the single configured account. Anything else is
rejected with ``AuthRequired`` before the handler runs; the error
pipeline turns that into a 401 with the ``WWW-Authenticate`` challenge.

Usage::

    app.add_middleware(BasicAuth("admin", "admin123", prefix="/admin"))
"""

import logging

from wren.auth import verify
from wren.errors import AuthRequired
from wren.http.request import Request
from wren.http.response import Response
from wren.middleware.protocol import Next

logger = logging.getLogger("wren.auth")


def is_under(path: str, prefix: str) -> bool:
    """True for *prefix* itself and for any path below it."""
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


class BasicAuth:
    """Gate a path prefix behind one user/password pair."""

    __slots__ = ("_password", "_prefix", "_realm", "_user")

    def __init__(
        self,
        user: str,
        password: str,
        *,
        prefix: str = "/admin",
        realm: str = "Admin Panel",
    ) -> None:
        self._user = user
        self._password = password
        self._prefix = prefix
        self._realm = realm

    async def __call__(self, request: Request, next: Next) -> Response:
        if not is_under(request.path, self._prefix):
            return await next(request)
        if not verify(request.authorization, self._user, self._password):
            logger.info("Rejected admin request %s %s", request.method, request.path)
            raise AuthRequired(self._realm)
        return await next(request)
