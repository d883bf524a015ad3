"""Admin request handlers.

The dashboard, file browser, editor and result pages are site templates
rendered by the placeholder engine, so a site can restyle its admin
panel. The log viewer is a built-in kida template shipped with the
package; it autoescapes every log line.
"""

import logging
from pathlib import PurePosixPath

from kida import Environment, PackageLoader

from wren.app import App
from wren.errors import EmptyPayload, StorageError
from wren.http.forms import FormData
from wren.http.request import Request
from wren.http.response import Response
from wren.site import Site
from wren.templating.engine import escape

logger = logging.getLogger("wren.admin")

EDITABLE_SUFFIXES = (".md", ".txt", ".css", ".html")
DEFAULT_DIRECTORY = "/posts"
DASHBOARD = "/admin"


def file_item(name: str, path: str, size: int) -> str:
    """One ``<li>`` of the file browser: name, size, edit link, delete form."""
    safe_name = escape(name)
    safe_path = escape(path)
    parts = [
        "<li class='file-item'>",
        f"<span class='file-name'>{safe_name} ({size} bytes)</span>",
        "<div class='actions'>",
    ]
    if name.endswith(EDITABLE_SUFFIXES):
        parts.append(f"<a href='/admin/edit?file={safe_path}' class='btn'>✏️ Edit</a>")
    parts.append(
        "<form method='POST' action='/admin/delete' style='display:inline;margin:0'>"
        f"<input type='hidden' name='file' value='{safe_path}'>"
        "<button type='submit' class='btn btn-danger' "
        f"onclick='return confirm(&quot;Delete {safe_name}?&quot;)'>🗑️ Delete</button>"
        "</form>"
    )
    parts.append("</div></li>")
    return "".join(parts)


def upload_target(form: FormData, filename: str) -> str:
    """Destination for an upload: explicit ``path``, else ``dir`` + file name."""
    path = form.get("path")
    if path:
        return path
    directory = form.get("dir") or DEFAULT_DIRECTORY
    return f"{directory.rstrip('/')}/{PurePosixPath(filename).name}"


class AdminViews:
    """Handlers for every ``/admin`` route of one site."""

    __slots__ = ("_env", "site")

    def __init__(self, site: Site) -> None:
        self.site = site
        self._env = Environment(
            loader=PackageLoader("wren.admin", "templates"),
            autoescape=True,
        )

    def success(self, message: str, details: str, icon: str = "✅") -> Response:
        body = self.site.engine.render(
            "admin-success.html",
            {
                "REDIRECT_URL": DASHBOARD,
                "ICON": icon,
                "MESSAGE": message,
                "DETAILS": details,
            },
        )
        return Response(body=body)

    # -- Read-only views --

    def dashboard(self, request: Request) -> Response:
        tables = self.site.store.snapshot()
        body = self.site.engine.render(
            "admin.html",
            {
                "TITLE": "Admin Panel",
                "POST_COUNT": len(tables.posts),
                "REDIRECT_COUNT": len(tables.redirects),
            },
        )
        return Response(body=body)

    def files(self, request: Request) -> Response:
        directory = request.query.get("dir") or DEFAULT_DIRECTORY
        try:
            entries = self.site.files.list_dir(directory)
        except StorageError as exc:
            logger.warning("Cannot list %s: %s", directory, exc)
            return Response(body="<h1>Error: Cannot open directory</h1>", status=404)

        items = [
            file_item(entry.name, entry.path, entry.size)
            for entry in entries
            if not entry.is_dir and not entry.name.startswith(".")
        ]
        if not items:
            items = ["<li class='file-item'><em>No files found in this directory</em></li>"]
        body = self.site.engine.render(
            "admin-files.html",
            {"DIRECTORY": escape(directory), "FILE_LIST": "".join(items)},
        )
        return Response(body=body)

    def edit(self, request: Request) -> Response:
        path = request.query.get("file") or ""
        content = self.site.files.read_text(path) if path else None
        if content is None:
            return Response(body="<h1>File not found</h1>", status=404)

        length = f"{len(content)} characters"
        limit = self.site.config.edit_warning_chars
        if len(content) > limit:
            length += f" ⚠️ WARNING: files over {limit} characters may fail to save!"
        body = self.site.engine.render(
            "admin-edit.html",
            {
                "FILE_PATH": escape(path),
                "CONTENT": escape(content),
                "CONTENT_LENGTH": length,
            },
        )
        return Response(body=body)

    def logs(self, request: Request) -> Response:
        tail = self.site.access.tail(self.site.config.log_tail_lines)
        log_dir = str(PurePosixPath(self.site.access.log_path).parent)
        template = self._env.get_template("logs.html")
        body = template.render({"tail": tail, "shown": len(tail.lines), "log_dir": log_dir})
        return Response(body=body)

    # -- Mutations --

    async def save(self, request: Request) -> Response:
        try:
            form = await request.form()
        except ValueError as exc:
            logger.error("Save body rejected: %s", exc)
            raise EmptyPayload("") from exc
        path = form.get("file") or ""
        content = form.get("content") or ""
        if not content:
            raise EmptyPayload(path)
        try:
            written = self.site.files.write_text(path, content)
        except StorageError as exc:
            logger.error("Save failed: %s", exc)
            return Response(body="<h1>Error: Cannot open file for writing</h1>", status=500)
        logger.info("Saved %s (%d bytes)", path, written)
        return self.success(
            "File Saved Successfully!",
            f"<p>{escape(path)}</p><p>{written} bytes written</p>",
        )

    def save_rejected(self, request: Request, exc: EmptyPayload) -> Response:
        logger.warning("Refused empty save to %s", exc.path)
        body = self.site.engine.render("admin-save-error.html", {"FILE_PATH": escape(exc.path)})
        return Response(body=body, status=500)

    async def upload(self, request: Request) -> Response:
        try:
            form = await request.form()
        except ValueError as exc:
            logger.error("Upload body rejected: %s", exc)
            return Response(body="<h1>Upload Failed</h1>", status=500)
        upload = form.first_file()
        if upload is None or not upload.filename:
            logger.error("Upload without a file part")
            return Response(body="<h1>Upload Failed</h1>", status=500)
        target = upload_target(form, upload.filename)
        try:
            written = self.site.files.write_bytes(target, upload.content)
        except StorageError as exc:
            logger.error("Upload failed: %s", exc)
            return Response(body="<h1>Upload Failed</h1>", status=500)
        logger.info("Uploaded %s (%d bytes)", target, written)
        return self.success(
            "File Uploaded Successfully!",
            f"<p>{escape(target)}</p><p>{written} bytes</p>",
        )

    async def delete(self, request: Request) -> Response:
        try:
            form = await request.form()
        except ValueError as exc:
            logger.error("Delete body rejected: %s", exc)
            return Response(body="<h1>Delete Failed</h1>", status=500)
        path = form.get("file") or ""
        try:
            self.site.files.remove(path)
        except StorageError as exc:
            logger.error("Delete failed: %s", exc)
            return Response(body="<h1>Delete Failed</h1>", status=500)
        logger.info("Deleted %s", path)
        return self.success("File Deleted Successfully!", f"<p>{escape(path)}</p>")

    def reload(self, request: Request) -> Response:
        report = self.site.load()
        return self.success(
            "Configuration Reloaded!",
            f"<p>Posts: {report.posts}</p><p>Redirects: {report.redirects}</p>",
            icon="🔄",
        )


def register_admin(app: App, site: Site) -> AdminViews:
    """Add the ``/admin`` routes for *site* to *app*."""
    views = AdminViews(site)
    app.add_route("/admin", views.dashboard, name="admin")
    app.add_route("/admin/files", views.files, name="admin-files")
    app.add_route("/admin/edit", views.edit, name="admin-edit")
    app.add_route("/admin/save", views.save, methods=["POST"], name="admin-save")
    app.add_route("/admin/upload", views.upload, methods=["POST"], name="admin-upload")
    app.add_route("/admin/delete", views.delete, methods=["POST"], name="admin-delete")
    app.add_route("/admin/reload", views.reload, name="admin-reload")
    app.add_route("/admin/logs", views.logs, name="admin-logs")
    app.error(EmptyPayload)(views.save_rejected)
    return views
