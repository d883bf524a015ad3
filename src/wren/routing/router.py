"""Exact-path route table.

Each site route is a literal path, so the table is a dict of path to
method to route. It stops accepting routes once the app freezes.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from wren.errors import MethodNotAllowed, NotFound


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition."""

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str]
    name: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route


def normalize_path(path: str) -> str:
    """Collapse a trailing slash: ``/admin/`` and ``/admin`` are one route."""
    if len(path) > 1 and path.endswith("/"):
        return path.rstrip("/") or "/"
    return path


class Router:
    """Compiled exact-path router.

    Usage::

        router = Router()
        router.add(Route("/archive", handler, frozenset({"GET"})))
        router.compile()
        match = router.match("GET", "/archive")
    """

    __slots__ = ("_compiled", "_routes", "_table")

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._table: dict[str, dict[str, Route]] = {}
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route. Must be called before compile()."""
        if self._compiled:
            msg = "Router is compiled; no more routes can be added."
            raise RuntimeError(msg)
        by_method = self._table.setdefault(normalize_path(route.path), {})
        for method in route.methods:
            by_method[method] = route
        # GET routes also answer HEAD.
        if "GET" in route.methods:
            by_method.setdefault("HEAD", route)
        self._routes.append(route)

    @property
    def routes(self) -> list[Route]:
        """All registered routes, in registration order."""
        return list(self._routes)

    def compile(self) -> None:
        """Refuse further ``add`` calls."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request against the table.

        Raises ``NotFound`` if no route has this path and
        ``MethodNotAllowed`` if the path exists for other methods only.
        """
        by_method = self._table.get(normalize_path(path))
        if by_method is None:
            raise NotFound(f"No route matches {method} {path!r}")
        route = by_method.get(method)
        if route is None:
            raise MethodNotAllowed(frozenset(by_method))
        return RouteMatch(route=route)
