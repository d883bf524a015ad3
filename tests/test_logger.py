"""Tests for wren.logger: entry format, rotation, and tail."""

import logging
from dataclasses import dataclass

from wren.logger import AccessLogger, clip_user_agent, format_uptime
from wren.storage import FileStore


@dataclass
class FakeRequest:
    client_ip: str = "203.0.113.7"
    method: str = "GET"
    uri: str = "/posts/hello"
    user_agent: str = "Mozilla/5.0"


def _logger(tmp_path, **kwargs) -> AccessLogger:
    kwargs.setdefault("clock", lambda: 1_700_000_000.0)
    return AccessLogger(FileStore(tmp_path), **kwargs)


class TestFormatting:
    def test_uptime(self) -> None:
        assert format_uptime(0) == "0d 0h 0m 0s"
        assert format_uptime(90061.7) == "1d 1h 1m 1s"

    def test_clip_short_agent(self) -> None:
        assert clip_user_agent("curl/8.0") == "curl/8.0"

    def test_clip_exactly_sixty(self) -> None:
        agent = "a" * 60
        assert clip_user_agent(agent) == agent

    def test_clip_long_agent(self) -> None:
        clipped = clip_user_agent("b" * 61)
        assert clipped == "b" * 57 + "..."
        assert len(clipped) == 60

    def test_missing_agent(self) -> None:
        assert clip_user_agent("") == "-"
        assert clip_user_agent(None) == "-"

    def test_entry_with_wall_clock(self, tmp_path) -> None:
        access = _logger(tmp_path)
        entry = access.format_entry("10.0.0.1", "GET", "/page?p=1", 200, "curl/8.0")
        assert entry.startswith("[2023-11-")
        assert entry.endswith('] 10.0.0.1 - GET /page?p=1 - 200 - "curl/8.0"\n')

    def test_entry_with_uptime(self, tmp_path) -> None:
        ticks = iter([100.0, 100.0 + 3725.0])
        access = _logger(tmp_path, clock=lambda: 5.0, monotonic=lambda: next(ticks))
        entry = access.format_entry("10.0.0.1", "GET", "/", 404, "")
        assert entry == '[0d 1h 2m 5s] 10.0.0.1 - GET / - 404 - "-"\n'


class TestRecord:
    def test_appends_lines(self, tmp_path) -> None:
        access = _logger(tmp_path)
        access.record(FakeRequest(), 200)
        access.record(FakeRequest(uri="/missing"), 404)

        lines = (tmp_path / "logs" / "access.log").read_text().splitlines()
        assert len(lines) == 2
        assert lines[0].endswith('203.0.113.7 - GET /posts/hello - 200 - "Mozilla/5.0"')
        assert " /missing - 404 - " in lines[1]

    def test_echoes_to_python_logging(self, tmp_path, caplog) -> None:
        access = _logger(tmp_path)
        with caplog.at_level(logging.INFO, logger="wren.access"):
            access.record(FakeRequest(), 200)
        assert "GET /posts/hello - 200" in caplog.text

    def test_write_failure_is_swallowed(self, tmp_path, caplog) -> None:
        # A directory where the log file should be makes every append fail.
        (tmp_path / "logs" / "access.log").mkdir(parents=True)
        access = _logger(tmp_path)
        with caplog.at_level(logging.ERROR, logger="wren.access"):
            entry = access.record(FakeRequest(), 200)
        assert entry.endswith("- 200 - \"Mozilla/5.0\"\n")
        assert "Could not open log file" in caplog.text


class TestRotation:
    def test_no_rotation_below_limit(self, tmp_path) -> None:
        access = _logger(tmp_path, max_size=10_000)
        access.record(FakeRequest(), 200)
        assert access.rotate_if_needed() is False
        assert not (tmp_path / "logs" / "access.old").exists()

    def test_rotates_at_limit(self, tmp_path) -> None:
        logs = tmp_path / "logs"
        logs.mkdir()
        (logs / "access.log").write_text("x" * 100)
        (logs / "access.old").write_text("older generation")
        access = _logger(tmp_path, max_size=100)

        access.record(FakeRequest(), 200)

        assert (logs / "access.old").read_text() == "x" * 100
        active = (logs / "access.log").read_text()
        assert active.count("\n") == 1
        assert "GET /posts/hello" in active

    def test_missing_log_never_rotates(self, tmp_path) -> None:
        access = _logger(tmp_path, max_size=0)
        assert access.rotate_if_needed() is False


class TestTail:
    def test_missing_log(self, tmp_path) -> None:
        tail = _logger(tmp_path).tail()
        assert tail.exists is False
        assert tail.lines == ()
        assert tail.truncated is False

    def test_last_lines(self, tmp_path) -> None:
        logs = tmp_path / "logs"
        logs.mkdir()
        (logs / "access.log").write_text("".join(f"line {i}\n" for i in range(150)))

        tail = _logger(tmp_path).tail(100)

        assert tail.exists is True
        assert tail.total_lines == 150
        assert len(tail.lines) == 100
        assert tail.lines[0] == "line 50"
        assert tail.lines[-1] == "line 149"
        assert tail.truncated is True
        assert tail.size == (logs / "access.log").stat().st_size

    def test_short_log_not_truncated(self, tmp_path) -> None:
        logs = tmp_path / "logs"
        logs.mkdir()
        (logs / "access.log").write_text("a\n\nb\n")
        tail = _logger(tmp_path).tail(100)
        assert tail.lines == ("a", "b")
        assert tail.truncated is False
