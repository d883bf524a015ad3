"""Turn handler return values into a ``Response``.

Handlers may return a ``Response``, a ``Redirect``, or a ``str`` /
``bytes`` body that becomes a 200 HTML response.
"""

from typing import Any

from wren.http.response import Redirect, Response


def negotiate(value: Any) -> Response:
    """Convert a handler's return value to a ``Response``."""
    match value:
        case Response():
            return value
        case Redirect():
            return value.to_response()
        case str() | bytes():
            return Response(body=value)
        case None:
            msg = "Handler returned None; return a Response, Redirect, or body"
            raise TypeError(msg)
        case _:
            msg = f"Cannot convert {type(value).__name__} to a Response"
            raise TypeError(msg)
