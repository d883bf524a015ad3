"""The request object handed to every handler and middleware."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from wren._internal.asgi import Receive
from wren.http.headers import Headers
from wren.http.query import QueryParams

if TYPE_CHECKING:
    from wren.http.forms import FormData


@dataclass(slots=True)
class _Payload:
    """Body bytes and parsed form, filled in on first read."""

    raw: bytes | None = None
    form: FormData | None = None


@dataclass(frozen=True, slots=True)
class Request:
    """One HTTP request.

    The envelope (method, path, headers, query string, peer) is fixed
    when the request is built. The body is pulled from the server on the
    first ``await request.body()`` or ``await request.form()`` and kept,
    so middleware and the handler can both read it.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    client: tuple[str, int] | None
    _receive: Receive = field(repr=False, compare=False)
    _payload: _Payload = field(default_factory=_Payload, repr=False, compare=False)

    @classmethod
    def from_asgi(cls, scope: dict[str, Any], receive: Receive) -> Request:
        peer = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            client=(peer[0], peer[1]) if peer else None,
            _receive=receive,
        )

    @property
    def uri(self) -> str:
        """Path and query string as the client sent them, for the traffic log."""
        if self.query.raw:
            return f"{self.path}?{self.query.raw}"
        return self.path

    @property
    def client_ip(self) -> str:
        return self.client[0] if self.client else "-"

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent") or ""

    @property
    def authorization(self) -> str | None:
        return self.headers.get("authorization")

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    async def body(self) -> bytes:
        if self._payload.raw is None:
            received = bytearray()
            more = True
            while more:
                message = await self._receive()
                received += message.get("body", b"")
                more = message.get("more_body", False)
            self._payload.raw = bytes(received)
        return self._payload.raw

    async def form(self) -> FormData:
        """The body decoded as a form; ``ValueError`` for other media types.

        A request with no ``Content-Type`` is read as URL-encoded.
        """
        if self._payload.form is None:
            from wren.http.forms import URLENCODED, parse_form_data

            self._payload.form = parse_form_data(
                await self.body(), self.content_type or URLENCODED
            )
        return self._payload.form
