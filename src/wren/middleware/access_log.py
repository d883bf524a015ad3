"""Traffic logging middleware.

Records one line per request through an ``AccessLogger``, after the
response status is known. Error statuses are recorded too: an
``HTTPError`` raised further in is logged with its status and then
re-raised for the error pipeline, and any other exception is logged
as a 500.

Paths under the excluded prefixes (the admin surface) are not logged.
"""

from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import Response
from wren.logger import AccessLogger
from wren.middleware.basic_auth import is_under
from wren.middleware.protocol import Next


class AccessLog:
    """Append a traffic-log entry for every non-excluded request."""

    __slots__ = ("_exclude", "_logger")

    def __init__(self, logger: AccessLogger, *, exclude: tuple[str, ...] = ("/admin",)) -> None:
        self._logger = logger
        self._exclude = exclude

    async def __call__(self, request: Request, next: Next) -> Response:
        if any(is_under(request.path, prefix) for prefix in self._exclude):
            return await next(request)
        try:
            response = await next(request)
        except HTTPError as exc:
            self._logger.record(request, exc.status)
            raise
        except Exception:
            self._logger.record(request, 500)
            raise
        self._logger.record(request, response.status)
        return response
