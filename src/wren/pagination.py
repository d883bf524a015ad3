"""Page slicing over the ordered post list.

Pages are 0-based in URLs (``/page?p=0`` is the home page) and 1-based
in the rendered controls ("Page 1 of 3").
"""

from dataclasses import dataclass

from wren.errors import NotFound
from wren.store import PostMapping

DEFAULT_PAGE_SIZE = 20
DEFAULT_PREFIX = "/posts/"


@dataclass(frozen=True, slots=True)
class Page:
    """One visible slice of eligible posts plus its navigation metadata."""

    entries: tuple[PostMapping, ...]
    number: int
    total_pages: int
    total_entries: int

    @property
    def has_previous(self) -> bool:
        return self.number > 0

    @property
    def has_next(self) -> bool:
        return self.number < self.total_pages - 1


def paginate(
    posts: tuple[PostMapping, ...] | list[PostMapping],
    page: int,
    page_size: int = DEFAULT_PAGE_SIZE,
    prefix: str = DEFAULT_PREFIX,
) -> Page:
    """Return page *page* of the posts under *prefix*.

    Raises ``NotFound`` for a negative page or one that starts past the
    last eligible post; an empty page is never produced.
    """
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    eligible = [p for p in posts if p.url_path.startswith(prefix)]
    total = len(eligible)
    total_pages = (total + page_size - 1) // page_size
    start = page * page_size
    if page < 0 or start >= total:
        raise NotFound(f"Page {page} out of range")
    return Page(
        entries=tuple(eligible[start : start + page_size]),
        number=page,
        total_pages=total_pages,
        total_entries=total,
    )


def pagination_html(page: Page, base_url: str = "/page") -> str:
    """Render the previous / position / next controls for *page*."""
    parts = ["<div class='pagination'>"]
    if page.has_previous:
        parts.append(f"<a href='{base_url}?p={page.number - 1}'>« Previous</a> ")
    parts.append(f"Page {page.number + 1} of {page.total_pages}")
    if page.has_next:
        parts.append(f" <a href='{base_url}?p={page.number + 1}'>Next »</a>")
    parts.append("</div>")
    return "".join(parts)
