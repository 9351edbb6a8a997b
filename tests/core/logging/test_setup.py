"""Tests for logging setup and configuration."""

import json
import logging
import re
from pathlib import Path
from unittest.mock import patch

import pytest

from core.logging.context import clear_log_context, get_log_context
from core.logging.formatters import ConsoleFormatter, JSONFormatter
from core.logging.setup import generate_build_id, get_log_file_path, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    clear_log_context()
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    clear_log_context()


class TestGetLogFilePath:

    @patch("core.logging.setup._get_next_instance_id", return_value="7")
    def test_builds_dated_path(self, _):
        path = get_log_file_path(Path("logs"))
        assert path.parent.parent == Path("logs")
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", path.parent.name)
        assert re.fullmatch(r"schemadoc_\d{4}_\d{4}_7\.log", path.name)

    def test_explicit_instance_and_name(self):
        path = get_log_file_path(Path("logs"), name="docs", instance_id="x")
        assert path.name.startswith("docs_")
        assert path.name.endswith("_x.log")


class TestSetupLogging:

    def test_console_handler_on_stderr(self):
        setup_logging(console_level=logging.WARNING)
        root = logging.getLogger()

        assert len(root.handlers) == 1
        handler = root.handlers[0]
        assert handler.level == logging.WARNING
        assert isinstance(handler.formatter, ConsoleFormatter)
        assert handler.stream.name == "<stderr>"

    def test_json_console(self):
        setup_logging(json_format=True)
        assert isinstance(logging.getLogger().handlers[0].formatter, JSONFormatter)

    def test_replaces_existing_handlers(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_log_file_gets_json(self, tmp_path):
        log_file = tmp_path / "nested" / "build.log"
        logger = setup_logging(log_file=log_file, build_id="b-20260101-000000-beef")
        logger.info("hello", extra={"document_count": 2})
        for handler in logging.getLogger().handlers:
            handler.flush()

        entries = [json.loads(line) for line in log_file.read_text().splitlines()]
        hello = [e for e in entries if e["message"] == "hello"][0]
        assert hello["build_id"] == "b-20260101-000000-beef"
        assert hello["document_count"] == 2

    def test_log_dir_creates_dated_file(self, tmp_path):
        setup_logging(log_dir=tmp_path)
        assert list(tmp_path.glob("*/schemadoc_*.log"))

    def test_sets_build_id(self):
        setup_logging(build_id="b-1")
        assert get_log_context()["build_id"] == "b-1"


class TestHelpers:
    def test_generate_build_id_format(self):
        assert re.fullmatch(r"b-\d{8}-\d{6}-[0-9a-f]{4}", generate_build_id())

    def test_build_ids_differ(self):
        assert len({generate_build_id() for _ in range(20)}) > 1
