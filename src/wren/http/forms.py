"""Admin form bodies.

Save and delete post ``application/x-www-form-urlencoded``; upload posts
``multipart/form-data``, which goes through ``python-multipart``. Files
are kept in memory, which is fine for a one-author site.
"""

from dataclasses import dataclass, field
from urllib.parse import parse_qs

from python_multipart.multipart import MultipartParser, parse_options_header

URLENCODED = "application/x-www-form-urlencoded"
MULTIPART = "multipart/form-data"


@dataclass(frozen=True, slots=True)
class UploadFile:
    filename: str
    content_type: str
    content: bytes = field(repr=False)


@dataclass(frozen=True, slots=True)
class FormData:
    """Submitted fields (first value wins) and uploaded files.

    ``form.get("file")`` returns ``""`` for a field sent blank and
    ``None`` for one not sent at all.
    """

    fields: dict[str, list[str]] = field(default_factory=dict)
    files: dict[str, UploadFile] = field(default_factory=dict)

    def __getitem__(self, name: str) -> str:
        return self.fields[name][0]

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def get(self, name: str, default: str | None = None) -> str | None:
        values = self.fields.get(name)
        return values[0] if values else default

    def first_file(self) -> UploadFile | None:
        """The first uploaded file, whatever field carried it."""
        for upload in self.files.values():
            return upload
        return None


def parse_form_data(body: bytes, content_type: str) -> FormData:
    """Decode *body* per its ``Content-Type``.

    Raises ``ValueError`` for other media types and for multipart
    without a boundary.
    """
    media_type = content_type.partition(";")[0].strip().lower()
    if media_type == URLENCODED:
        text = body.decode("utf-8", errors="replace")
        return FormData(fields=parse_qs(text, keep_blank_values=True))
    if media_type == MULTIPART:
        _, params = parse_options_header(content_type.encode("latin-1"))
        boundary = params.get(b"boundary")
        if not boundary:
            msg = f"{MULTIPART} body has no boundary parameter"
            raise ValueError(msg)
        collector = _PartCollector()
        parser = MultipartParser(boundary, collector.callbacks())
        parser.write(body)
        parser.finalize()
        return FormData(fields=collector.fields, files=collector.files)
    msg = f"Cannot decode a form sent as {content_type!r}"
    raise ValueError(msg)


class _PartCollector:
    """Accumulates multipart parts as the parser reports them."""

    def __init__(self) -> None:
        self.fields: dict[str, list[str]] = {}
        self.files: dict[str, UploadFile] = {}
        self._headers: dict[str, str] = {}
        self._name = bytearray()
        self._value = bytearray()
        self._data = bytearray()

    def callbacks(self) -> dict[str, object]:
        return {
            "on_part_begin": self.part_begin,
            "on_header_field": self.header_field,
            "on_header_value": self.header_value,
            "on_header_end": self.header_end,
            "on_part_data": self.part_data,
            "on_part_end": self.part_end,
        }

    def part_begin(self) -> None:
        self._headers = {}
        self._data = bytearray()

    def header_field(self, data: bytes, start: int, end: int) -> None:
        self._name += data[start:end]

    def header_value(self, data: bytes, start: int, end: int) -> None:
        self._value += data[start:end]

    def header_end(self) -> None:
        name = self._name.decode("latin-1").lower()
        self._headers[name] = self._value.decode("latin-1")
        self._name = bytearray()
        self._value = bytearray()

    def part_data(self, data: bytes, start: int, end: int) -> None:
        self._data += data[start:end]

    def part_end(self) -> None:
        disposition = self._headers.get("content-disposition")
        if disposition is None:
            return
        _, params = parse_options_header(disposition.encode("latin-1"))
        name = params.get(b"name")
        if name is None:
            return
        filename = params.get(b"filename")
        if filename is None:
            text = self._data.decode("utf-8", errors="replace")
            self.fields.setdefault(name.decode("utf-8"), []).append(text)
            return
        self.files[name.decode("utf-8")] = UploadFile(
            filename=filename.decode("utf-8"),
            content_type=self._headers.get("content-type", "application/octet-stream"),
            content=bytes(self._data),
        )
