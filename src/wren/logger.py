"""Access logger: one line per request, appended to a rotating log file.

Entry format::

    [2025-01-31 14:02:11] 203.0.113.7 - GET /posts/hello - 200 - "Mozilla/5.0 ..."

The timestamp is local wall-clock time when the clock has been set
(epoch past 1 000 000 000), otherwise uptime since the logger started,
as ``Dd Hh Mm Ss``.

Rotation keeps exactly one old generation: when the active file reaches
``max_size`` it is copied over ``access.old`` and removed before the
next append. Failures to append are logged and never fail the request.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from wren.errors import StorageError
from wren.storage import FileStore

logger = logging.getLogger("wren.access")

PLAUSIBLE_EPOCH = 1_000_000_000
MAX_USER_AGENT = 60
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class LoggedRequest(Protocol):
    """The request fields an access entry needs."""

    @property
    def client_ip(self) -> str: ...

    @property
    def method(self) -> str: ...

    @property
    def uri(self) -> str: ...

    @property
    def user_agent(self) -> str: ...


@dataclass(frozen=True, slots=True)
class LogTail:
    """The end of the active log, for the admin viewer."""

    exists: bool
    size: int
    total_lines: int
    lines: tuple[str, ...]

    @property
    def truncated(self) -> bool:
        return self.total_lines > len(self.lines)


def format_uptime(seconds: float) -> str:
    """Render elapsed seconds as ``Dd Hh Mm Ss``."""
    total = int(seconds)
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{days}d {hours}h {minutes}m {secs}s"


def clip_user_agent(user_agent: str | None) -> str:
    if not user_agent:
        return "-"
    if len(user_agent) > MAX_USER_AGENT:
        return user_agent[: MAX_USER_AGENT - 3] + "..."
    return user_agent


class AccessLogger:
    """Formats, rotates, and appends access log entries.

    Usage::

        access = AccessLogger(FileStore("./site"))
        access.record(request, 200)
        access.tail(100).lines
    """

    __slots__ = (
        "_clock",
        "_files",
        "_log_path",
        "_max_size",
        "_monotonic",
        "_rotated_path",
        "_started",
    )

    def __init__(
        self,
        files: FileStore,
        log_path: str = "/logs/access.log",
        rotated_path: str = "/logs/access.old",
        *,
        max_size: int = 500_000,
        clock: Callable[[], float] = time.time,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._files = files
        self._log_path = log_path
        self._rotated_path = rotated_path
        self._max_size = max_size
        self._clock = clock
        self._monotonic = monotonic
        self._started = monotonic()

    @property
    def log_path(self) -> str:
        return self._log_path

    def timestamp(self) -> str:
        now = self._clock()
        if now > PLAUSIBLE_EPOCH:
            return time.strftime(TIMESTAMP_FORMAT, time.localtime(now))
        return format_uptime(self._monotonic() - self._started)

    def format_entry(
        self,
        client_ip: str,
        method: str,
        uri: str,
        status: int,
        user_agent: str | None,
    ) -> str:
        """Build one newline-terminated log line."""
        return (
            f"[{self.timestamp()}] {client_ip} - {method} {uri} - {status} - "
            f'"{clip_user_agent(user_agent)}"\n'
        )

    def rotate_if_needed(self) -> bool:
        """Move the active log to the old generation once it is full.

        Returns True when a rotation happened.
        """
        size = self._files.size(self._log_path)
        if size is None or size < self._max_size:
            return False
        try:
            self._files.copy(self._log_path, self._rotated_path)
            self._files.remove(self._log_path)
        except StorageError as exc:
            logger.error("Log rotation failed: %s", exc)
            return False
        logger.info("Rotated %s to %s (%d bytes)", self._log_path, self._rotated_path, size)
        return True

    def record(self, request: LoggedRequest, status: int) -> str:
        """Log *request* with *status*; returns the entry written."""
        entry = self.format_entry(
            request.client_ip, request.method, request.uri, status, request.user_agent
        )
        logger.info("%s", entry.rstrip("\n"))
        self.rotate_if_needed()
        try:
            self._files.append_text(self._log_path, entry)
        except StorageError as exc:
            logger.error("Could not open log file for writing: %s", exc)
        return entry

    def tail(self, limit: int = 100) -> LogTail:
        """The last *limit* entries of the active log."""
        text = self._files.read_text(self._log_path)
        if text is None:
            return LogTail(exists=False, size=0, total_lines=0, lines=())
        lines = [line for line in text.splitlines() if line.strip()]
        return LogTail(
            exists=True,
            size=self._files.size(self._log_path) or 0,
            total_lines=len(lines),
            lines=tuple(lines[-limit:]) if limit > 0 else (),
        )
