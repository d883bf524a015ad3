"""Placeholder template engine.

Templates are plain text files under the templates directory containing
``{{NAME}}`` tokens. Rendering is a single left-to-right scan: each token
whose name has a value is replaced by that value, every other token is
copied through verbatim.

Substituted text is never scanned again. A value that itself contains
``{{...}}`` (a post body, a title from the route file, a partial) comes
out literally, so no content can trigger further expansion.

Three names are supplied by the engine rather than the caller:

- ``HEADER``: contents of the ``header.html`` partial
- ``FOOTER``: contents of the ``footer.html`` partial
- ``YEAR``: the current year

They are resolved lazily, only when the template references them, and
like every template read they are never cached.
"""

import logging
import re
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from wren.storage import FileStore

logger = logging.getLogger("wren.templating")

PLACEHOLDER_RE = re.compile(r"\{\{([A-Za-z0-9_]+)\}\}")

HEADER = "HEADER"
FOOTER = "FOOTER"
YEAR = "YEAR"


@dataclass(frozen=True, slots=True)
class Placeholder:
    """A ``{{NAME}}`` token found in template text."""

    name: str
    start: int
    end: int


def scan_placeholders(text: str) -> list[Placeholder]:
    """Return every placeholder token in *text*, in order of appearance."""
    return [Placeholder(m.group(1), m.start(), m.end()) for m in PLACEHOLDER_RE.finditer(text)]


def substitute(text: str, values: Mapping[str, object]) -> str:
    """Replace known placeholders in one pass; leave unknown ones verbatim."""
    tokens = scan_placeholders(text)
    if not tokens:
        return text
    parts: list[str] = []
    cursor = 0
    for token in tokens:
        parts.append(text[cursor : token.start])
        if token.name in values:
            parts.append(str(values[token.name]))
        else:
            parts.append(text[token.start : token.end])
        cursor = token.end
    parts.append(text[cursor:])
    return "".join(parts)


def escape(text: str) -> str:
    """HTML-escape ``& < > " '``.

    ``&`` goes first, otherwise the entities produced for the other
    characters would have their own ampersands escaped again.
    """
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )


class TemplateEngine:
    """Loads templates from the file store and renders them.

    Usage::

        engine = TemplateEngine(FileStore("./site"))
        html = engine.render("post.html", {"TITLE": "Hello", "CONTENT": body})
    """

    __slots__ = ("_clock", "_directory", "_files", "_footer", "_header")

    def __init__(
        self,
        files: FileStore,
        directory: str = "/templates",
        *,
        header: str = "header.html",
        footer: str = "footer.html",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._files = files
        self._directory = "/" + directory.strip("/")
        self._header = header
        self._footer = footer
        self._clock = clock

    def template_path(self, name: str) -> str:
        return f"{self._directory}/{name}"

    def load(self, name: str) -> str:
        """Read a template body; missing templates read as ``""``."""
        text = self._files.read_text(self.template_path(name))
        if text is None:
            logger.warning("Template not found: %s", name)
            return ""
        return text

    def load_partial(self, name: str) -> str:
        text = self._files.read_text(self.template_path(name))
        if text is None:
            logger.debug("Partial not found: %s", name)
            return ""
        return text

    def render(self, name: str, variables: Mapping[str, object] | None = None) -> str:
        """Load template *name* and substitute *variables* into it."""
        return self.render_string(self.load(name), variables)

    def render_string(self, text: str, variables: Mapping[str, object] | None = None) -> str:
        """Substitute *variables* plus engine-supplied names into *text*."""
        values: dict[str, object] = dict(variables or {})
        referenced = {token.name for token in scan_placeholders(text)}
        if HEADER in referenced and HEADER not in values:
            values[HEADER] = self.load_partial(self._header)
        if FOOTER in referenced and FOOTER not in values:
            values[FOOTER] = self.load_partial(self._footer)
        if YEAR in referenced and YEAR not in values:
            values[YEAR] = time.localtime(self._clock()).tm_year
        return substitute(text, values)
