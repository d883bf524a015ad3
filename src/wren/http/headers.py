"""Case-insensitive request headers over raw ASGI byte pairs."""

from collections.abc import Iterator, Mapping


class Headers(Mapping[str, str]):
    """Read-only header lookup keyed by lowercased name.

    A name sent more than once reads as its first value.
    """

    __slots__ = ("_index",)

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        index: dict[str, str] = {}
        for name, value in raw:
            index.setdefault(name.decode("latin-1").lower(), value.decode("latin-1"))
        object.__setattr__(self, "_index", index)

    def __getitem__(self, key: str) -> str:
        return self._index[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        return self._index.get(key.lower(), default)
