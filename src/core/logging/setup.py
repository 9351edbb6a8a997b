"""Logging setup and configuration."""

import logging
import secrets
import sys
import threading
from datetime import datetime
from pathlib import Path

from core.logging.context import set_log_context
from core.logging.formatters import ConsoleFormatter, JSONFormatter

# Default settings
DEFAULT_CONSOLE_LEVEL = logging.INFO
DEFAULT_FILE_LEVEL = logging.DEBUG

# Ordinal run counter so several builds in one process never share a log file
_instance_counter = 0
_instance_counter_lock = threading.Lock()


def _get_next_instance_id() -> str:
    """Get next instance ID as ordinal number (thread-safe)."""
    global _instance_counter
    with _instance_counter_lock:
        instance_id = str(_instance_counter)
        _instance_counter += 1
        return instance_id


def get_log_file_path(
    log_dir: Path,
    name: str = "schemadoc",
    instance_id: str | None = None,
) -> Path:
    """
    Build log file path with a date subfolder.

    Structure: {log_dir}/{YYYY-MM-DD}/{name}_{MMDD}_{HHMM}_{instance}.log

    Examples:
        logs/2026-01-05/schemadoc_0105_1430_0.log
        logs/2026-01-05/schemadoc_0105_1431_1.log

    Args:
        log_dir: Base log directory
        name: File name prefix
        instance_id: Unique instance identifier (ordinal generated if omitted)

    Returns:
        Full path to log file
    """
    now = datetime.now()
    date_folder = now.strftime("%Y-%m-%d")
    date_str = now.strftime("%m%d")
    time_str = now.strftime("%H%M")

    instance = instance_id or _get_next_instance_id()
    filename = f"{name}_{date_str}_{time_str}_{instance}.log"

    return log_dir / date_folder / filename


def setup_logging(
    name: str = "schemadoc",
    console_level: int = DEFAULT_CONSOLE_LEVEL,
    file_level: int = DEFAULT_FILE_LEVEL,
    json_format: bool = False,
    log_file: Path | None = None,
    log_dir: Path | None = None,
    build_id: str | None = None,
) -> logging.Logger:
    """
    Configure the root logger for a schemadoc run.

    Console output always goes to stderr so that command output written to
    stdout (exported metadata, example configs) stays machine-readable.

    Args:
        name: Logger name to return
        console_level: Console handler level (default: INFO)
        file_level: File handler level (default: DEBUG)
        json_format: Use JSON lines on the console instead of the
            human-readable format (for CI log collectors)
        log_file: Explicit log file path; JSON lines are written there
        log_dir: Directory for dated log files, used when log_file is not given
        build_id: Build identifier added to every record's context

    Returns:
        Configured logger instance
    """
    if build_id:
        set_log_context(build_id=build_id)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(JSONFormatter() if json_format else ConsoleFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.addHandler(console_handler)

    if log_file is None and log_dir is not None:
        log_file = get_log_file_path(log_dir)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    logger = logging.getLogger(name)
    logger.debug(
        f"Logging initialized: file={log_file}, json={json_format}",
        extra={"path": str(log_file) if log_file else None},
    )
    return logger


def generate_build_id() -> str:
    """
    Generate unique build identifier.

    Format: b-YYYYMMDD-HHMMSS-XXXX where XXXX is random hex.

    Returns:
        Unique build ID string
    """
    ts = datetime.now().strftime("%Y%m%d-%H%M%S")
    suffix = secrets.token_hex(2)
    return f"b-{ts}-{suffix}"
