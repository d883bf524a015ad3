"""Write a ``Response`` to the ASGI ``send`` channel."""

from wren._internal.asgi import Send
from wren.http.response import Response

_BODYLESS = frozenset({204, 304})


def has_body(status: int) -> bool:
    """False for 1xx, 204 and 304, which never carry a body."""
    return status >= 200 and status not in _BODYLESS


async def send_response(response: Response, send: Send, *, method: str = "GET") -> None:
    """Emit the start and body messages for *response*.

    HEAD gets the same headers a GET would, Content-Length included, and
    an empty body.
    """
    payload = response.body_bytes if has_body(response.status) else b""
    headers = [
        (b"content-type", response.content_type.encode("latin-1")),
        (b"content-length", b"%d" % len(payload)),
    ]
    headers += [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in response.headers
    ]
    await send({"type": "http.response.start", "status": response.status, "headers": headers})
    await send({"type": "http.response.body", "body": b"" if method == "HEAD" else payload})
