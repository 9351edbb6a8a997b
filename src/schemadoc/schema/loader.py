"""
Schema file loading.

A schema directory holds any number of TOML or YAML files. Each file is a
partial document; together they form one raw document that the resolver
turns into complete component definitions.
"""

import logging
import re
import tomllib
from pathlib import Path
from typing import Any

import yaml

from core.errors import SchemaParseError
from core.logging import LogContext, log_operation, log_with_context

logger = logging.getLogger(__name__)

SCHEMA_SUFFIXES = (".toml", ".yaml", ".yml")

SECTIONS = ("options", "fragments", "sources", "transforms", "sinks", "releases", "guides")

_TOML_LINE = re.compile(r"\(at line (\d+)")


def _parse_toml(path: Path, text: str) -> Any:
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        match = _TOML_LINE.search(str(e))
        line = int(match.group(1)) if match else None
        raise SchemaParseError("invalid TOML", path=path, line=line, cause=e) from e


def _parse_yaml(path: Path, text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line = mark.line + 1 if mark is not None else None
        raise SchemaParseError("invalid YAML", path=path, line=line, cause=e) from e


def load_schema_file(path: Path) -> dict[str, Any]:
    """
    Parse a single schema file.

    Args:
        path: TOML (.toml) or YAML (.yaml/.yml) file

    Returns:
        Top-level mapping of the file; empty files yield {}

    Raises:
        SchemaParseError: File cannot be read or decoded, or is not a mapping
    """
    path = Path(path)
    if path.suffix not in SCHEMA_SUFFIXES:
        raise SchemaParseError(
            f"unsupported schema file type '{path.suffix}'; expected one of {', '.join(SCHEMA_SUFFIXES)}",
            path=path,
        )

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaParseError("cannot read schema file", path=path, cause=e) from e

    if not text.strip():
        return {}

    data = _parse_toml(path, text) if path.suffix == ".toml" else _parse_yaml(path, text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SchemaParseError(
            f"top level must be a mapping, got {type(data).__name__}", path=path
        )
    return data


def find_schema_files(schema_dir: Path) -> list[Path]:
    """All schema files below a directory, in sorted path order."""
    return sorted(
        p for p in Path(schema_dir).rglob("*") if p.is_file() and p.suffix in SCHEMA_SUFFIXES
    )


def _normalize_sections(path: Path, data: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Check top-level keys and hoist `_name` fragments under `fragments`."""
    sections: dict[str, dict[str, Any]] = {}
    for key, value in data.items():
        if key.startswith("_"):
            sections.setdefault("fragments", {})
            if key in sections["fragments"]:
                raise SchemaParseError(f"fragment '{key}' is defined twice", path=path)
            sections["fragments"][key] = value
            continue

        if key not in SECTIONS:
            raise SchemaParseError(
                f"unknown top-level key '{key}'; expected one of {', '.join(SECTIONS)} "
                f"or a '_fragment' name",
                path=path,
            )
        if value is None:
            continue
        if not isinstance(value, dict):
            raise SchemaParseError(f"'{key}' must be a mapping", path=path)

        existing = sections.setdefault(key, {})
        for name, entry in value.items():
            if name in existing:
                raise SchemaParseError(f"'{key}.{name}' is defined twice", path=path)
            existing[str(name)] = entry
    return sections


def load_schema_dir(schema_dir: Path) -> dict[str, dict[str, Any]]:
    """
    Load and merge every schema file in a directory.

    Files partition the document: the same `<section>.<name>` entry defined in
    two files is an error rather than an override.

    Returns:
        Raw document with every section present (empty sections as {})

    Raises:
        SchemaParseError: Missing directory, no schema files, bad file,
            unknown top-level key, or duplicate entry
    """
    schema_dir = Path(schema_dir)
    if not schema_dir.is_dir():
        raise SchemaParseError("schema directory does not exist", path=schema_dir)

    files = find_schema_files(schema_dir)
    if not files:
        raise SchemaParseError("no schema files found", path=schema_dir)

    document: dict[str, dict[str, Any]] = {section: {} for section in SECTIONS}
    origins: dict[tuple[str, str], Path] = {}

    for path in files:
        relative = path.relative_to(schema_dir).as_posix()
        with LogContext(schema_file=relative), log_operation(
            logger, "load_schema_file", slow_threshold_ms=250.0, path=relative
        ) as op:
            sections = _normalize_sections(path, load_schema_file(path))
            for section, entries in sections.items():
                for name, entry in entries.items():
                    origin = origins.get((section, name))
                    if origin is not None:
                        raise SchemaParseError(
                            f"'{section}.{name}' is already defined in "
                            f"{origin.relative_to(schema_dir).as_posix()}",
                            path=path,
                        )
                    origins[(section, name)] = path
                    document[section][name] = entry
            op.add_context(
                component_count=sum(
                    len(sections.get(s, {})) for s in ("sources", "transforms", "sinks")
                ),
            )

    log_with_context(
        logger,
        logging.DEBUG,
        "Loaded schema directory",
        schema_dir=str(schema_dir),
        file_count=len(files),
    )
    return document
