"""Tests for logging context managers."""

import logging
from unittest.mock import MagicMock

import pytest

from core.logging.context import clear_log_context, get_log_context, set_log_context
from core.logging.context_managers import (
    LogContext,
    OperationContext,
    StageLogContext,
    log_operation,
    log_phase,
)


@pytest.fixture(autouse=True)
def reset_context():
    """Reset log context before each test."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def logger():
    """Create a mock logger for testing."""
    return MagicMock(spec=logging.Logger)


class TestLogContext:
    """Tests for LogContext manager."""

    def test_sets_context_on_enter(self):
        with LogContext(build_id="b-1", component="sinks.kafka"):
            ctx = get_log_context()
            assert ctx["build_id"] == "b-1"
            assert ctx["component"] == "sinks.kafka"

    def test_restores_context_on_exit(self):
        set_log_context(stage="render")
        with LogContext(stage="write", schema_file="a.toml"):
            assert get_log_context()["stage"] == "write"
        assert get_log_context()["stage"] == "render"
        assert get_log_context()["schema_file"] == ""

    def test_restores_context_on_exception(self):
        with pytest.raises(ValueError):
            with LogContext(component="sinks.kafka"):
                raise ValueError("boom")
        assert get_log_context()["component"] == ""


class TestStageLogContext:
    """Tests for StageLogContext manager."""

    def test_logs_completion_with_result(self, logger):
        with StageLogContext(logger, "render") as ctx:
            assert get_log_context()["stage"] == "render"
            ctx.set_result(document_count=3)

        level, message = logger.log.call_args.args
        extra = logger.log.call_args.kwargs["extra"]
        assert level == logging.INFO
        assert message == "Stage complete: render"
        assert extra["document_count"] == 3
        assert "duration_ms" in extra
        assert get_log_context()["stage"] == ""

    def test_custom_level(self, logger):
        with StageLogContext(logger, "resolve", level=logging.DEBUG):
            pass
        assert logger.log.call_args.args[0] == logging.DEBUG

    def test_sets_build_id(self, logger):
        with StageLogContext(logger, "load", build_id="b-7"):
            assert get_log_context()["build_id"] == "b-7"

    def test_logs_failure_at_debug_and_propagates(self, logger):
        with pytest.raises(KeyError):
            with StageLogContext(logger, "load"):
                raise KeyError("x")

        level, message = logger.log.call_args.args
        assert level == logging.DEBUG
        assert message == "Stage failed: load"
        assert logger.log.call_args.kwargs["extra"]["error_type"] == "KeyError"


class TestLogPhase:
    def test_logs_phase_completion(self, logger):
        with log_phase(logger, "render_releases", document="CHANGELOG.md"):
            pass

        level, message = logger.log.call_args.args
        extra = logger.log.call_args.kwargs["extra"]
        assert level == logging.DEBUG
        assert message == "Phase complete: render_releases"
        assert extra["document"] == "CHANGELOG.md"

    def test_accepts_string_level(self, logger):
        with log_phase(logger, "render_reference", level="info"):
            pass
        assert logger.log.call_args.args[0] == logging.INFO


class TestOperationContext:
    def test_logs_completion(self, logger):
        with OperationContext(logger, "write_document", path="a.md"):
            pass

        level, message = logger.log.call_args.args
        extra = logger.log.call_args.kwargs["extra"]
        assert level == logging.DEBUG
        assert message == "Completed: write_document"
        assert extra["operation"] == "write_document"
        assert extra["path"] == "a.md"

    def test_log_start(self, logger):
        with OperationContext(logger, "write_document", log_start=True):
            pass
        messages = [c.args[1] for c in logger.log.call_args_list]
        assert messages == ["Starting: write_document", "Completed: write_document"]

    def test_slow_operation_promoted_to_info(self, logger):
        with OperationContext(logger, "load", slow_threshold_ms=-1):
            pass
        assert logger.log.call_args.args[0] == logging.INFO

    def test_logs_failure(self, logger):
        with pytest.raises(OSError):
            with OperationContext(logger, "write_document"):
                raise OSError("disk full")

        level, message = logger.log.call_args.args
        extra = logger.log.call_args.kwargs["extra"]
        assert message == "Failed: write_document"
        assert extra["error_type"] == "OSError"

    def test_add_context(self, logger):
        with log_operation(logger, "prune") as ctx:
            ctx.add_context(files_removed=2)
        assert logger.log.call_args.kwargs["extra"]["files_removed"] == 2
