"""Config store: post mappings and redirects from flat route files.

Two pipe-delimited files drive all content routing::

    # /config/routes.txt   urlPath|fileName|title
    /posts/hello|hello.md|Hello World
    /about|about.md|About

    # /config/redirects.txt   fromPath|toPath
    /old-hello|/posts/hello

Both tables are parsed in one pass into tuples and published together as
an immutable ``RouteTables`` snapshot. ``reload()`` builds a complete new
snapshot before swapping the reference, so a handler holding the previous
snapshot keeps a fully-formed table for the rest of its request.
"""

import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from wren.storage import FileStore

logger = logging.getLogger("wren.store")

COMMENT_MARKER = "#"
DELIMITER = "|"


@dataclass(frozen=True, slots=True)
class PostMapping:
    """A public URL path bound to a stored post file and display title."""

    url_path: str
    file_name: str
    title: str


@dataclass(frozen=True, slots=True)
class Redirection:
    """A source path that answers with a redirect to ``to_path``."""

    from_path: str
    to_path: str


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Records parsed from one file plus the count of dropped lines."""

    records: tuple[Any, ...] = ()
    skipped: int = 0
    found: bool = True


@dataclass(frozen=True, slots=True)
class RouteTables:
    """One immutable version of both routing tables.

    Lookups return the first record with a matching key, which is the
    record that appears first in the source file.
    """

    posts: tuple[PostMapping, ...] = ()
    redirects: tuple[Redirection, ...] = ()
    version: int = 0
    _post_index: dict[str, PostMapping] = field(
        default_factory=dict, repr=False, compare=False
    )
    _redirect_index: dict[str, Redirection] = field(
        default_factory=dict, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        for post in self.posts:
            self._post_index.setdefault(post.url_path, post)
        for redirect in self.redirects:
            self._redirect_index.setdefault(redirect.from_path, redirect)

    def find_post(self, path: str) -> PostMapping | None:
        return self._post_index.get(path)

    def find_redirect(self, path: str) -> Redirection | None:
        return self._redirect_index.get(path)

    def eligible_posts(self, prefix: str) -> tuple[PostMapping, ...]:
        """Posts whose URL lies under *prefix*, in file order."""
        return tuple(p for p in self.posts if p.url_path.startswith(prefix))


@dataclass(frozen=True, slots=True)
class ReloadReport:
    """Counts published by a load or reload."""

    posts: int
    redirects: int
    skipped_posts: int
    skipped_redirects: int
    version: int
    missing: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Line parsing
# ---------------------------------------------------------------------------


def eligible_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, trimmed_line)`` for non-blank, non-comment lines."""
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if line and not line.startswith(COMMENT_MARKER):
            yield number, line


def parse_post_line(line: str) -> PostMapping | None:
    """Parse ``urlPath|fileName|title``; ``None`` when malformed.

    The URL path must be non-empty. Everything after the second pipe is
    the title, pipes included.
    """
    first = line.find(DELIMITER)
    if first <= 0:
        return None
    second = line.find(DELIMITER, first + 1)
    if second < 0:
        return None
    return PostMapping(
        url_path=line[:first],
        file_name=line[first + 1 : second],
        title=line[second + 1 :],
    )


def parse_redirect_line(line: str) -> Redirection | None:
    """Parse ``fromPath|toPath``; ``None`` when malformed."""
    pipe = line.find(DELIMITER)
    if pipe <= 0:
        return None
    return Redirection(from_path=line[:pipe], to_path=line[pipe + 1 :])


def _parse[T](
    source: str,
    lines: Iterable[tuple[int, str]],
    parse_line: Callable[[str], T | None],
) -> ParseResult:
    records: list[T] = []
    skipped = 0
    for number, line in lines:
        record = parse_line(line)
        if record is None:
            skipped += 1
            logger.warning("%s:%d: malformed record dropped: %r", source, number, line)
            continue
        records.append(record)
    return ParseResult(records=tuple(records), skipped=skipped)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class ConfigStore:
    """Owner of the published ``RouteTables`` snapshot.

    Usage::

        store = ConfigStore(FileStore("./site"))
        store.reload()
        tables = store.snapshot()     # hold for the whole request
        tables.find_post("/posts/hello")

    Thread safety:
        Readers never lock; they read one reference. Writers serialize on
        a lock and publish by a single attribute assignment.
    """

    __slots__ = ("_files", "_lock", "_redirects_file", "_routes_file", "_tables")

    def __init__(
        self,
        files: FileStore,
        *,
        routes_file: str = "/config/routes.txt",
        redirects_file: str = "/config/redirects.txt",
    ) -> None:
        self._files = files
        self._routes_file = routes_file
        self._redirects_file = redirects_file
        self._lock = threading.Lock()
        self._tables = RouteTables()

    def snapshot(self) -> RouteTables:
        """The currently published tables."""
        return self._tables

    def load_posts(self) -> ParseResult:
        return self._load(self._routes_file, parse_post_line, "post mappings")

    def load_redirects(self) -> ParseResult:
        return self._load(self._redirects_file, parse_redirect_line, "redirections")

    def _load[T](
        self,
        path: str,
        parse_line: Callable[[str], T | None],
        label: str,
    ) -> ParseResult:
        text = self._files.read_text(path)
        if text is None:
            logger.warning("Cannot open %s; no %s loaded", path, label)
            return ParseResult(found=False)
        result = _parse(path, eligible_lines(text), parse_line)
        logger.info("Loaded %d %s from %s", len(result.records), label, path)
        return result

    def reload(self) -> ReloadReport:
        """Re-read both files and publish a new snapshot atomically."""
        with self._lock:
            posts = self.load_posts()
            redirects = self.load_redirects()
            tables = RouteTables(
                posts=posts.records,
                redirects=redirects.records,
                version=self._tables.version + 1,
            )
            self._tables = tables
        return ReloadReport(
            posts=len(tables.posts),
            redirects=len(tables.redirects),
            skipped_posts=posts.skipped,
            skipped_redirects=redirects.skipped,
            version=tables.version,
            missing=tuple(
                path
                for path, result in (
                    (self._routes_file, posts),
                    (self._redirects_file, redirects),
                )
                if not result.found
            ),
        )

    # Initial load and reload are the same operation.
    load = reload
