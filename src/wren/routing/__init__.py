"""Routing: fixed routes matched by exact path and method.

Anything the table does not match falls through to the site's content
dispatcher (redirects, static files, posts).
"""

from wren.routing.router import Route, RouteMatch, Router

__all__ = ["Route", "RouteMatch", "Router"]
