"""The content site: listing pages, posts, static files and redirects.

``Site`` owns the collaborators every handler needs (file store, config
store, template engine, access logger) and exposes the public handlers.
``create_app()`` wires a ``Site`` into an ``App``::

    from wren import AppConfig, create_app

    app = create_app(AppConfig(root="./site"))

Requests that match no fixed route go through ``Site.dispatch``, which
tries, in order: redirect, static file, post mapping, then not-found.
"""

import logging
import mimetypes
import time
from collections.abc import Callable

from wren.app import App
from wren.config import AppConfig
from wren.errors import NotFound, StorageError
from wren.http.request import Request
from wren.http.response import PLAIN, Redirect, Response
from wren.logger import AccessLogger
from wren.pagination import Page, paginate, pagination_html
from wren.preview import extract_preview
from wren.storage import FileStore
from wren.store import ConfigStore, PostMapping, ReloadReport
from wren.templating.engine import TemplateEngine, escape

logger = logging.getLogger("wren.server")

CONTENT_TYPES: dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".ico": "image/x-icon",
    ".css": "text/css",
    ".js": "application/javascript",
    ".html": "text/html",
    ".txt": "text/plain",
}

STYLESHEET = "/static/style.css"


def content_type_for(path: str) -> str:
    """Content type by extension: fixed table, then ``mimetypes``."""
    lowered = path.lower()
    for extension, content_type in CONTENT_TYPES.items():
        if lowered.endswith(extension):
            return content_type
    guessed, _ = mimetypes.guess_type(path)
    return guessed or "application/octet-stream"


def preview_markup(post: PostMapping, preview: str) -> str:
    return (
        f"<div class='post-preview'><h2><a href='{escape(post.url_path)}'>"
        f"{escape(post.title)}</a></h2><p>{escape(preview)}</p></div>"
    )


def archive_markup(post: PostMapping) -> str:
    return f"<li><a href='{escape(post.url_path)}'>{escape(post.title)}</a></li>"


class Site:
    """Per-app state and the public request handlers.

    Every handler takes the request explicitly and reads one
    ``RouteTables`` snapshot, so a concurrent reload never changes the
    tables halfway through a request.
    """

    __slots__ = ("access", "config", "engine", "files", "store")

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        clock: Callable[[], float] = time.time,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or AppConfig()
        self.files = FileStore(self.config.root)
        self.store = ConfigStore(
            self.files,
            routes_file=self.config.routes_file,
            redirects_file=self.config.redirects_file,
        )
        self.engine = TemplateEngine(self.files, self.config.templates_dir, clock=clock)
        self.access = AccessLogger(
            self.files,
            self.config.log_path,
            self.config.rotated_log_path,
            max_size=self.config.max_log_size,
            clock=clock,
            monotonic=monotonic,
        )

    def load(self) -> ReloadReport:
        """(Re)load the route and redirect tables."""
        report = self.store.reload()
        logger.info(
            "Site tables v%d: %d posts, %d redirects",
            report.version,
            report.posts,
            report.redirects,
        )
        return report

    def post_path(self, file_name: str) -> str:
        return f"{self.config.posts_dir.rstrip('/')}/{file_name}"

    # -- Listing pages --

    def home(self, request: Request) -> Response:
        return self.render_page(0)

    def page(self, request: Request) -> Response:
        return self.render_page(request.query.get_int("p", 0))

    def render_page(self, number: int) -> Response:
        """Render page *number* of the post listing with ``home.html``."""
        tables = self.store.snapshot()
        page = paginate(
            tables.posts,
            number,
            page_size=self.config.posts_per_page,
            prefix=self.config.posts_prefix,
        )
        body = self.engine.render(
            "home.html",
            {
                "TITLE": f"{self.config.site_title} - Home",
                "POSTS": self.listing_html(page),
                "PAGINATION": pagination_html(page),
            },
        )
        return Response(body=body)

    def listing_html(self, page: Page) -> str:
        parts = []
        for post in page.entries:
            text = self.files.read_text(self.post_path(post.file_name))
            parts.append(preview_markup(post, extract_preview(text)))
        return "".join(parts)

    def archive(self, request: Request) -> Response:
        posts = self.store.snapshot().eligible_posts(self.config.posts_prefix)
        body = self.engine.render(
            "archive.html",
            {
                "TITLE": "Archive - All Posts",
                "POST_COUNT": len(posts),
                "POST_LIST": "".join(archive_markup(post) for post in posts),
            },
        )
        return Response(body=body)

    def stylesheet(self, request: Request) -> Response:
        data = self.files.read_bytes(STYLESHEET)
        if data is None:
            return Response(body="CSS file not found", status=404, content_type=PLAIN)
        return Response(body=data, content_type="text/css")

    # -- Content dispatch --

    def dispatch(self, request: Request) -> Response | Redirect:
        """Resolve a path no fixed route matched.

        Redirects win over everything; then static files under the static
        prefix; then post mappings. Anything else is ``NotFound``.
        """
        path = request.path
        tables = self.store.snapshot()

        redirect = tables.find_redirect(path)
        if redirect is not None:
            logger.debug("Redirect %s -> %s", path, redirect.to_path)
            return Redirect(redirect.to_path)

        if path.startswith(self.config.static_prefix):
            return self.serve_static(path)

        post = tables.find_post(path)
        if post is not None:
            return self.serve_post(post)

        raise NotFound(f"No content at {path!r}")

    def serve_static(self, path: str) -> Response:
        # Static URLs never climb out of the static tree.
        if ".." in path.split("/"):
            raise NotFound(f"Static path {path!r} rejected")
        data = self.files.read_bytes(path)
        if data is None:
            raise NotFound(f"Static file {path!r} not found")
        if len(data) > self.config.large_file_warning:
            logger.warning("Serving large file (%d bytes): %s", len(data), path)
        return Response(body=data, content_type=content_type_for(path)).with_header(
            "Cache-Control", self.config.cache_control
        )

    def serve_post(self, post: PostMapping) -> Response:
        text = self.files.read_text(self.post_path(post.file_name))
        if text is None:
            raise NotFound(f"Post file {post.file_name!r} missing")
        title = escape(post.title)
        body = self.engine.render(
            "post.html",
            {"TITLE": title, "POST_TITLE": title, "CONTENT": escape(text)},
        )
        return Response(body=body)

    # -- Error pages --

    def not_found(self, request: Request) -> Response:
        return Response(body=self.engine.render("404.html"), status=404)

    def storage_failure(self, request: Request, exc: StorageError) -> Response:
        logger.error("Storage failure on %s %s: %s", request.method, request.path, exc)
        return Response(body="<h1>Storage Error</h1>", status=500)


def create_app(config: AppConfig | None = None, *, site: Site | None = None) -> App:
    """Build the ASGI app for a site.

    The route tables are loaded at startup, before the first request.
    """
    site = site or Site(config)
    config = site.config
    app = App(config)

    if config.traffic_log:
        from wren.middleware.access_log import AccessLog

        app.add_middleware(AccessLog(site.access, exclude=("/admin",)))

    app.add_route("/", site.home, name="home")
    app.add_route("/page", site.page, name="page")
    app.add_route("/archive", site.archive, name="archive")
    app.add_route("/style.css", site.stylesheet, name="stylesheet")

    if config.admin_enabled:
        from wren.admin.views import register_admin
        from wren.middleware.basic_auth import BasicAuth

        app.add_middleware(
            BasicAuth(
                config.admin_user,
                config.admin_password,
                prefix="/admin",
                realm=config.admin_realm,
            )
        )
        register_admin(app, site)

    app.fallback(site.dispatch)
    app.error(404)(site.not_found)
    app.error(StorageError)(site.storage_failure)
    app.on_startup(site.load)
    return app
