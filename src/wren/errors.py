"""Wren exception hierarchy.

Shared across the store, router, site handlers, and middleware so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """A settings value is out of range or an env override does not parse.

    ``wren serve`` reports it on stderr and exits with status 1.
    """


class StorageError(WrenError):
    """A file store operation (open, write, delete, copy) failed.

    Mapped to a 500 response with a minimal body. Never retried.
    """

    def __init__(self, path: str, action: str, reason: str = "") -> None:
        self.path = path
        self.action = action
        self.reason = reason
        message = f"cannot {action} {path!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class EmptyPayload(WrenError):
    """A save request arrived with zero-length content."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"refusing to save empty content to {path!r}")


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """Abort the request with *status*.

    *detail* is the default body; *headers* are added to whatever
    response is finally sent, including one from an ``@app.error()``
    handler.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: unmapped route, missing file, or out-of-range page."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow = ", ".join(sorted(allowed))
        super().__init__(
            status=405,
            detail=detail or f"Method not allowed; this path accepts {allow}",
            headers=(("Allow", allow),),
        )


class AuthRequired(HTTPError):  # noqa: N818
    """401: missing or invalid Basic credentials on an admin route.

    Carries the ``WWW-Authenticate`` challenge so the default error
    pipeline emits it without a registered handler.
    """

    def __init__(self, realm: str = "Admin Panel") -> None:
        super().__init__(
            status=401,
            detail="<h1>401 Unauthorized</h1><p>Authentication required.</p>",
            headers=(("WWW-Authenticate", f'Basic realm="{realm}"'),),
        )
