"""Wren, a tiny flat-file content server.

Serves a small blog from a plain directory tree: posts mapped by a
pipe-delimited route list, static assets, redirects, and a Basic-auth
admin surface for editing files in place.

Basic usage::

    from wren import AppConfig, create_app

    app = create_app(AppConfig(root="site"))
    app.run()

Site layout::

    site/
      config/routes.txt      # /posts/hello|hello.md|Hello World
      config/redirects.txt   # /old|/posts/hello
      templates/home.html    # {{HEADER}} {{POSTS}} {{PAGINATION}} {{FOOTER}}
      posts/hello.md
      static/style.css
      logs/access.log
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "AuthRequired",
    "ConfigStore",
    "HTTPError",
    "NotFound",
    "Redirect",
    "Request",
    "Response",
    "Site",
    "TemplateEngine",
    "WrenError",
    "create_app",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` cheap while providing a flat top-level API.
    """
    if name == "App":
        from wren.app import App

        return App

    if name == "AppConfig":
        from wren.config import AppConfig

        return AppConfig

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name in ("Response", "Redirect"):
        from wren.http import response as _resp

        return getattr(_resp, name)

    if name in ("Site", "create_app"):
        from wren import site as _site

        return getattr(_site, name)

    if name == "ConfigStore":
        from wren.store import ConfigStore

        return ConfigStore

    if name == "TemplateEngine":
        from wren.templating.engine import TemplateEngine

        return TemplateEngine

    if name in ("WrenError", "HTTPError", "NotFound", "AuthRequired"):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
