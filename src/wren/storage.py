"""Flat-file store, the site's only persistence layer.

Every path is site-absolute (``/posts/hello.md``) and resolved inside a
single root directory. Resolution follows symlinks and rejects anything
that lands outside the root, the same traversal guard static serving uses.

Read helpers are tolerant (a missing file reads as ``None``) because
templates, posts, and config files are all optional from the server's
point of view. Write helpers raise ``StorageError`` because a failed
write is always reported to the caller.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from wren.errors import StorageError

logger = logging.getLogger("wren.storage")


@dataclass(frozen=True, slots=True)
class FileEntry:
    """One entry of a directory listing."""

    name: str
    path: str
    size: int
    is_dir: bool


class FileStore:
    """Byte-stream file access confined to one root directory.

    Usage::

        store = FileStore("./site")
        text = store.read_text("/templates/home.html")  # None if missing
        store.write_text("/posts/new.md", "# Hello")
    """

    __slots__ = ("_root",)

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, path: str) -> Path:
        """Map a site-absolute path to a filesystem path inside the root.

        Raises ``StorageError`` if the path escapes the root.
        """
        relative = path.replace("\\", "/").lstrip("/")
        resolved = (self._root / relative).resolve() if relative else self._root
        if not resolved.is_relative_to(self._root):
            raise StorageError(path, "resolve", "outside the content root")
        return resolved

    def _safe_resolve(self, path: str) -> Path | None:
        try:
            return self.resolve(path)
        except StorageError:
            logger.warning("Rejected path outside content root: %r", path)
            return None

    # -- Queries --

    def exists(self, path: str) -> bool:
        resolved = self._safe_resolve(path)
        return resolved is not None and resolved.exists()

    def is_file(self, path: str) -> bool:
        resolved = self._safe_resolve(path)
        return resolved is not None and resolved.is_file()

    def is_dir(self, path: str) -> bool:
        resolved = self._safe_resolve(path)
        return resolved is not None and resolved.is_dir()

    def size(self, path: str) -> int | None:
        """Size in bytes, or ``None`` when the file does not exist."""
        resolved = self._safe_resolve(path)
        if resolved is None or not resolved.is_file():
            return None
        return resolved.stat().st_size

    # -- Reads --

    def read_bytes(self, path: str) -> bytes | None:
        """Return file content, or ``None`` if missing or unreadable."""
        resolved = self._safe_resolve(path)
        if resolved is None or not resolved.is_file():
            return None
        try:
            return resolved.read_bytes()
        except OSError as exc:
            logger.warning("Cannot read %s: %s", path, exc)
            return None

    def read_text(self, path: str) -> str | None:
        """Return file content decoded as UTF-8, or ``None`` if missing."""
        data = self.read_bytes(path)
        if data is None:
            return None
        return data.decode("utf-8", errors="replace")

    def list_dir(self, path: str) -> list[FileEntry]:
        """List a directory, sorted by name.

        Raises ``StorageError`` if *path* is not a readable directory.
        """
        resolved = self.resolve(path)
        if not resolved.is_dir():
            raise StorageError(path, "open directory", "not a directory")
        base = "/" + path.strip("/")
        entries: list[FileEntry] = []
        try:
            children = sorted(resolved.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            raise StorageError(path, "open directory", str(exc)) from exc
        for child in children:
            is_dir = child.is_dir()
            entries.append(
                FileEntry(
                    name=child.name,
                    path=f"{base.rstrip('/')}/{child.name}",
                    size=0 if is_dir else child.stat().st_size,
                    is_dir=is_dir,
                )
            )
        return entries

    # -- Writes --

    def write_bytes(self, path: str, data: bytes) -> int:
        """Overwrite *path* with *data*, creating parent directories.

        Returns the number of bytes written.
        """
        resolved = self.resolve(path)
        try:
            resolved.parent.mkdir(parents=True, exist_ok=True)
            resolved.write_bytes(data)
        except OSError as exc:
            raise StorageError(path, "write", str(exc)) from exc
        return len(data)

    def write_text(self, path: str, text: str) -> int:
        return self.write_bytes(path, text.encode("utf-8"))

    def append_text(self, path: str, text: str) -> None:
        """Append UTF-8 text to *path*, creating it (and parents) if needed."""
        resolved = self.resolve(path)
        try:
            resolved.parent.mkdir(parents=True, exist_ok=True)
            with resolved.open("a", encoding="utf-8") as fh:
                fh.write(text)
        except OSError as exc:
            raise StorageError(path, "append to", str(exc)) from exc

    def copy(self, source: str, destination: str) -> None:
        """Copy *source* over *destination* (overwriting it)."""
        src = self.resolve(source)
        dst = self.resolve(destination)
        try:
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(src, dst)
        except OSError as exc:
            raise StorageError(source, "copy", str(exc)) from exc

    def remove(self, path: str) -> None:
        """Delete a file. Raises ``StorageError`` if it cannot be removed."""
        resolved = self.resolve(path)
        if not resolved.is_file():
            raise StorageError(path, "delete", "no such file")
        try:
            resolved.unlink()
        except OSError as exc:
            raise StorageError(path, "delete", str(exc)) from exc
