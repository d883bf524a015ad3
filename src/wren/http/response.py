"""HTTP response with chainable ``.with_*()`` transformations.

Each transformation returns a new Response. Handlers build one, the
middleware chain may decorate it, and the sender turns it into ASGI
messages.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from urllib.parse import quote

HTML = "text/html; charset=utf-8"
PLAIN = "text/plain; charset=utf-8"
# Reserved characters and existing escapes pass through a Location value.
URL_SAFE = "/:?#[]@!$&'()*+,;=%~"


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations."""

    body: str | bytes = ""
    status: int = 200
    content_type: str = HTML
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        return replace(self, headers=(*self.headers, *headers.items()))

    # -- Accessors --

    def header(self, name: str, default: str | None = None) -> str | None:
        """First value of header *name* (case-insensitive)."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return default

    @property
    def body_bytes(self) -> bytes:
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body


@dataclass(frozen=True, slots=True)
class Redirect:
    """A redirect to *url*; the pipeline sends it with an empty body.

    Characters outside ASCII are sent UTF-8 percent-encoded, so a target
    like ``/posts/café`` arrives as ``/posts/caf%C3%A9``.
    """

    url: str
    status: int = 302
    headers: tuple[tuple[str, str], ...] = ()

    def to_response(self) -> Response:
        return Response(
            body="",
            status=self.status,
            headers=(("Location", quote(self.url, safe=URL_SAFE)), *self.headers),
        )
