"""Tests for the logger module."""

import json
import os
import re
import sys
import threading
from datetime import datetime, timezone

import pytest

from filelog.config import Config
from filelog.levels import InvalidLevel, LogLevel
from filelog.logger import Logger
from filelog.writer import LogWriter, WriteResult

ENTRY_RE = re.compile(
    r"^(?P<ts>\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}) \[(?P<level>[a-z]+)\] (?P<message>.*)"
    r" \| source=(?P<source>.*) \| context=(?P<context>.*)$"
)

needs_qualname = pytest.mark.skipif(
    sys.version_info < (3, 11), reason="co_qualname is available from Python 3.11"
)


def _fixed_clock():
    return datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def log_path(tmp_path):
    return str(tmp_path / "log.txt")


@pytest.fixture
def logger(log_path):
    return Logger(log_path, tz=timezone.utc, time_func=_fixed_clock)


def _entries(path):
    with open(path, encoding="utf-8") as f:
        lines = f.read().splitlines()
    parsed = []
    for line in lines:
        match = ENTRY_RE.match(line)
        assert match, f"malformed entry: {line!r}"
        entry = match.groupdict()
        entry["context"] = json.loads(entry["context"])
        parsed.append(entry)
    return parsed


class TestLevels:
    @pytest.mark.parametrize("level", [
        "emergency", "alert", "critical", "error", "warning", "notice", "info", "debug",
    ])
    def test_leveled_methods(self, logger, log_path, level):
        getattr(logger, level)("message")
        assert _entries(log_path)[0]["level"] == level

    @pytest.mark.parametrize("level", ["INFO", "  Warning ", "\tdebug\n", LogLevel.ALERT])
    def test_generic_log_normalizes(self, logger, log_path, level):
        logger.log(level, "message")
        assert _entries(log_path)[0]["level"] == str(getattr(level, "value", level)).strip().lower()

    @pytest.mark.parametrize("level", ["fatal", "", "trace", None, 5, ["info"]])
    def test_invalid_level_raises_and_writes_nothing(self, logger, log_path, level):
        with pytest.raises(InvalidLevel):
            logger.log(level, "message")
        assert not os.path.exists(log_path)


class TestEntryShape:
    def test_full_line(self, logger, log_path):
        logger.info("hello", {"source": "Svc::run", "k": "v"})
        with open(log_path, "rb") as f:
            raw = f.read()
        expected = ('2025-01-15 12:00:00 [info] hello | source=Svc::run | context={"k":"v"}'
                    + os.linesep)
        assert raw == expected.encode("utf-8")

    def test_empty_context(self, logger, log_path):
        logger.info("hello", {"source": "x"})
        assert _entries(log_path)[0]["context"] == {}

    def test_no_context(self, logger, log_path):
        logger.notice("hello")
        assert _entries(log_path)[0]["context"] == {}

    def test_one_line_per_entry(self, logger, log_path):
        for i in range(5):
            logger.debug("line\none\r\n{i}", {"i": i})
        entries = _entries(log_path)
        assert [e["message"] for e in entries] == [f"line one  {i}" for i in range(5)]

    def test_empty_message_is_dash(self, logger, log_path):
        logger.info("   \n ")
        assert _entries(log_path)[0]["message"] == "-"

    def test_structured_message(self, logger, log_path):
        logger.info({"event": "login", "path": "/api/v1"})
        assert _entries(log_path)[0]["message"] == '{"event":"login","path":"/api/v1"}'


class TestInterpolationAndRedaction:
    def test_interpolation(self, logger, log_path):
        logger.info("User {name} logged in from {ip}", {"name": "alice", "ip": "10.0.0.1"})
        entry = _entries(log_path)[0]
        assert entry["message"] == "User alice logged in from 10.0.0.1"
        assert entry["context"] == {"name": "alice", "ip": "10.0.0.1"}

    def test_sensitive_values_redacted_in_message_and_context(self, logger, log_path):
        logger.warning("login with {password}", {
            "password": "hunter2",
            "api_key": "k-123",
            "headers": {"Authorization": "Bearer abc", "Accept": "*/*"},
            "user": {"profile": {"sessionToken": "t"}},
        })
        entry = _entries(log_path)[0]
        assert entry["message"] == "login with [REDACTED]"
        assert entry["context"] == {
            "password": "[REDACTED]",
            "api_key": "[REDACTED]",
            "headers": {"Authorization": "[REDACTED]", "Accept": "*/*"},
            "user": {"profile": {"sessionToken": "[REDACTED]"}},
        }
        with open(log_path, encoding="utf-8") as f:
            raw = f.read()
        for secret in ("hunter2", "k-123", "Bearer abc"):
            assert secret not in raw

    def test_depth_limit(self, logger, log_path):
        value = "leaf"
        for _ in range(8):
            value = {"n": value}
        logger.info("deep", {"root": value})
        node = _entries(log_path)[0]["context"]["root"]
        for _ in range(7):
            node = node["n"]
        assert node == "[DEPTH-LIMIT]"

    def test_exception_in_context(self, logger, log_path):
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            logger.error("failed", {"exception": e})
        exc = _entries(log_path)[0]["context"]["exception"]
        assert exc["type"] == "RuntimeError"
        assert exc["message"] == "boom"
        assert exc["code"] == 0
        assert exc["file"].endswith("test_logger.py")
        assert isinstance(exc["line"], int)

    def test_caller_context_not_mutated(self, logger):
        context = {"source": "Mod::fn", "password": "x"}
        logger.info("hi", context)
        assert context == {"source": "Mod::fn", "password": "x"}


class TestSource:
    def test_explicit_source(self, logger, log_path):
        logger.info("hi", {"source": "MyModule::run", "other": 1})
        entry = _entries(log_path)[0]
        assert entry["source"] == "MyModule::run"
        assert "source" not in entry["context"]
        assert entry["context"] == {"other": 1}

    @needs_qualname
    def test_detected_source_is_the_caller(self, logger, log_path):
        logger.info("hi")
        assert _entries(log_path)[0]["source"] == "TestSource::test_detected_source_is_the_caller"

    @pytest.mark.parametrize("bad_source", ["", 42, None, ["a"]])
    def test_unusable_source_falls_back_to_detection(self, logger, log_path, bad_source):
        logger.info("hi", {"source": bad_source})
        entry = _entries(log_path)[0]
        assert entry["source"].endswith("test_unusable_source_falls_back_to_detection")
        assert "source" in entry["context"]

    def test_literal_unknown_triggers_detection(self, logger, log_path):
        logger.info("hi", {"source": "unknown"})
        entry = _entries(log_path)[0]
        assert entry["source"].endswith("test_literal_unknown_triggers_detection")
        assert "source" not in entry["context"]


class TestWriterFailures:
    def test_missing_directory_is_created(self, tmp_path):
        path = str(tmp_path / "nested" / "dir" / "log.txt")
        Logger(path).info("hi")
        assert os.path.exists(path)

    def test_unwritable_target_returns_normally(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory")
        Logger(str(blocker / "log.txt")).critical("hi")
        assert not os.path.exists(str(blocker / "log.txt"))

    def test_write_result_is_discarded(self, tmp_path):
        class FailingWriter(LogWriter):
            def append(self, entry):
                return WriteResult.OPEN_FAILED

        log = Logger(writer=FailingWriter(str(tmp_path / "x.log")))
        assert log.info("dropped") is None


class TestRotation:
    def test_file_truncated_before_overflow(self, log_path):
        logger = Logger(log_path, max_file_size_bytes=300, tz=timezone.utc,
                        time_func=_fixed_clock)
        entry = logger.build_entry("info", "payload", {"source": "s", "n": 0})
        size = len(entry.encode("utf-8"))
        count = 300 // size
        for i in range(count):
            logger.info("payload", {"source": "s", "n": i % 10})
        assert os.path.getsize(log_path) == size * count

        logger.info("payload", {"source": "s", "n": 9})
        assert os.path.getsize(log_path) == size
        assert _entries(log_path)[0]["context"] == {"n": 9}


class TestConcurrency:
    def test_threads_never_interleave(self, log_path):
        def worker(thread_id):
            logger = Logger(log_path)
            for i in range(50):
                logger.info("worker {id} entry {i} " + "z" * 100,
                            {"source": "worker", "id": thread_id, "i": i})

        threads = [threading.Thread(target=worker, args=(t,)) for t in range(6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        entries = _entries(log_path)
        assert len(entries) == 300
        assert {e["source"] for e in entries} == {"worker"}


class TestConstruction:
    def test_from_config(self, tmp_path):
        config = Config(log_file=str(tmp_path / "cfg.log"), max_file_size_bytes=1234,
                        timezone="UTC")
        logger = Logger.from_config(config, time_func=_fixed_clock)
        assert logger.path == config.log_file
        logger.info("hi", {"source": "s"})
        assert _entries(config.log_file)[0]["ts"] == "2025-01-15 12:00:00"

    def test_default_path_uses_log_root(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_ROOT", str(tmp_path))
        assert Logger().path == os.path.join(str(tmp_path), "log.txt")


class TestHostileInput:
    def test_non_string_timezone_name(self, log_path):
        Logger(log_path, tz_name=5).info("hi", {"source": "s"})
        assert _entries(log_path)[0]["message"] == "hi"

    def test_null_byte_path_returns_normally(self, tmp_path):
        path = str(tmp_path / "lo\0g.txt")
        assert Logger(path).info("hi", {"source": "s"}) is None

    def test_object_with_failing_str(self, logger, log_path):
        class Exploding:
            def __str__(self):
                raise RuntimeError("str exploded")

        logger.info("hi", {"obj": Exploding()})
        assert _entries(log_path)[0]["context"] == {"obj": "[OBJECT Exploding]"}
