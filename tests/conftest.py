"""Shared fixtures: a small site tree on disk and an app serving it."""

from collections.abc import Callable
from pathlib import Path

import pytest

from wren.app import App
from wren.config import AppConfig
from wren.site import Site, create_app
from wren.testing import basic_auth

# 2023-11-14, in every timezone
FIXED_NOW = 1_700_000_000.0

ROUTES = """\
# url|file|title
/posts/hello|hello.md|Hello <World>
/posts/second|second.md|Second Post
/posts/ghost|ghost.md|Ghost
/about|about.md|About
not a record
"""

REDIRECTS = """\
/old-hello|/posts/hello
/about|/posts/hello
"""

TEMPLATES = {
    "header.html": "<header>site header</header>",
    "footer.html": "<footer>site footer</footer>",
    "home.html": "{{HEADER}}<title>{{TITLE}}</title>{{POSTS}}{{PAGINATION}}<p>{{YEAR}}</p>{{FOOTER}}",
    "post.html": "<title>{{TITLE}}</title><h1>{{POST_TITLE}}</h1><article>{{CONTENT}}</article>",
    "archive.html": "<title>{{TITLE}}</title><p>{{POST_COUNT}} posts</p><ul>{{POST_LIST}}</ul>",
    "404.html": "<h1>Nothing here</h1>",
    "admin.html": "<h1>Admin</h1><p>{{POST_COUNT}} posts, {{REDIRECT_COUNT}} redirects</p>",
    "admin-files.html": "<h2>{{DIRECTORY}}</h2><ul>{{FILE_LIST}}</ul>",
    "admin-edit.html": (
        "<h2>{{FILE_PATH}}</h2><textarea>{{CONTENT}}</textarea><p>{{CONTENT_LENGTH}}</p>"
    ),
    "admin-save-error.html": "<h1>Nothing to save for {{FILE_PATH}}</h1>",
    "admin-success.html": (
        "<meta http-equiv='refresh' content='2;url={{REDIRECT_URL}}'>"
        "<p>{{ICON}} {{MESSAGE}}</p>{{DETAILS}}"
    ),
}

POSTS = {
    "hello.md": "# Hello\n\n![cover](/static/cover.png)\n\nFirst paragraph of hello.\n\nMore text.\n",
    "second.md": "Second body with <b>bold</b> & more\n",
    "about.md": "About this site\n",
}


def build_site(root: Path) -> Path:
    """Write the sample site under *root* and return it."""
    (root / "config").mkdir(parents=True)
    (root / "config" / "routes.txt").write_text(ROUTES)
    (root / "config" / "redirects.txt").write_text(REDIRECTS)

    templates = root / "templates"
    templates.mkdir()
    for name, text in TEMPLATES.items():
        (templates / name).write_text(text)

    posts = root / "posts"
    posts.mkdir()
    for name, text in POSTS.items():
        (posts / name).write_text(text)

    static = root / "static"
    static.mkdir()
    (static / "style.css").write_text("body { color: #333; }")
    (static / "cover.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    (static / "notes.unknownext").write_bytes(b"\x00\x01")
    return root


@pytest.fixture
def site_root(tmp_path) -> Path:
    return build_site(tmp_path / "site")


@pytest.fixture
def config(site_root) -> AppConfig:
    return AppConfig(root=site_root)


def _build_app(config: AppConfig) -> App:
    return create_app(config, site=Site(config, clock=lambda: FIXED_NOW))


@pytest.fixture
def make_app() -> Callable[[AppConfig], App]:
    """Factory for apps over a custom config, with the fixed clock."""
    return _build_app


@pytest.fixture
def app(config) -> App:
    return _build_app(config)


@pytest.fixture
def admin() -> dict[str, str]:
    """Authorization header for the default admin account."""
    return basic_auth("admin", "admin123")
