"""Query string arguments.

Listing pages read ``?p=N``; the admin views read ``?dir=`` and
``?file=``. Values are percent-decoded, blank values are kept, and the
undecoded string stays available for the access log.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Immutable parsed query string; ``params[key]`` is the first value."""

    __slots__ = ("_index", "_raw")

    def __init__(self, query_string: bytes = b"") -> None:
        raw = query_string.decode("latin-1")
        index: dict[str, str] = {}
        for key, value in parse_qsl(raw, keep_blank_values=True):
            index.setdefault(key, value)
        object.__setattr__(self, "_raw", raw)
        object.__setattr__(self, "_index", index)

    def __getitem__(self, key: str) -> str:
        return self._index[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return f"QueryParams({self._raw!r})"

    @property
    def raw(self) -> str:
        """The query string exactly as received, without the ``?``."""
        return self._raw

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        return self._index.get(key, default)

    def get_int(self, key: str, default: int = 0) -> int:
        """First value of *key* as an int; *default* when absent or not numeric.

        Surrounding whitespace is ignored: ``?p= 2`` is 2, ``?p=two`` is
        *default*.
        """
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value.strip())
        except ValueError:
            return default
