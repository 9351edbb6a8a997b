"""
Example configuration writer.

Produces the TOML snippets shown at the top of every reference page. Two
flavors exist: `common` (required options, options flagged common, and the
tables that hold them) and `advanced` (every option).

Example output:

    [sinks.my_kafka_id]
      type              = "kafka"                         # required, must be: "kafka"
      inputs            = ["my-source-or-transform-id"]   # required, example
      bootstrap_servers = "10.14.22.123:9092"             # required, example
"""

import json
import math
import re
from datetime import date, datetime, time
from typing import Any

from schemadoc.schema.models import Component, Option, Schema
from schemadoc.schema.types import WILDCARD_OPTION

FLAVORS = ("common", "advanced")

INDENT = "  "

_BARE_KEY = re.compile(r"^[A-Za-z0-9_-]+$")
# Control characters other than tab cannot appear in a TOML literal string
_LITERAL_UNSAFE = re.compile(r"[\x00-\x08\x0a-\x1f\x7f]")


def toml_key(key: str) -> str:
    return key if _BARE_KEY.match(key) else json.dumps(key, ensure_ascii=False)


def toml_value(value: Any) -> str:
    """
    Render a Python value as an inline TOML value.

    Examples:
        >>> toml_value(True)
        'true'
        >>> toml_value("^(?P<host>[\\\\w\\\\.]+)")
        "'^(?P<host>[\\\\w\\\\.]+)'"
        >>> toml_value({"a": 1})
        '{ a = 1 }'
    """
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "nan"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        return repr(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, str):
        if "\\" in value and "'" not in value and not _LITERAL_UNSAFE.search(value):
            return f"'{value}'"
        return json.dumps(value, ensure_ascii=False).replace("\x7f", "\\u007F")
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(toml_value(item) for item in value) + "]"
    if isinstance(value, dict):
        if not value:
            return "{}"
        pairs = ", ".join(f"{toml_key(str(k))} = {toml_value(v)}" for k, v in value.items())
        return "{ " + pairs + " }"
    raise TypeError(f"cannot render {type(value).__name__} as a TOML value")


def example_value(option: Option) -> tuple[str, Any] | None:
    """
    Value shown for an option: its first example, else its default.

    Returns:
        ("example" | "default", value), or None when the option has neither
    """
    if option.examples:
        return "example", option.examples[0]
    if option.has_default:
        return "default", option.default
    return None


def relevance_note(option: Option) -> str | None:
    if not option.relevant_when:
        return None
    conditions = " and ".join(f"{key} = {toml_value(value)}" for key, value in option.relevant_when.items())
    return f"relevant when {conditions}"


def option_comment(option: Option, source: str) -> str:
    """Trailing comment for an example line."""
    parts = ["required" if option.required else "optional"]

    values = option.enum_values
    if len(values) == 1:
        parts.append(f"must be: {toml_value(values[0])}")
    else:
        parts.append(source)
        if option.unit:
            parts.append(option.unit)
        if values:
            parts.append("enum")

    note = relevance_note(option)
    if note:
        parts.append(note)
    if option.deprecated:
        parts.append("deprecated")
    return "# " + ", ".join(parts)


def _selected(options: list[Option], advanced: bool) -> list[Option]:
    return [o for o in options if advanced or o.is_common]


def _format_rows(rows: list[tuple[str, str, str]], indent: str) -> list[str]:
    """Align keys and trailing comments within one section."""
    if not rows:
        return []
    key_width = max(len(key) for key, _, _ in rows)
    assignments = [f"{key.ljust(key_width)} = {value}" for key, value, _ in rows]
    comment_column = max(len(a) for a in assignments) + 1
    return [
        f"{indent}{assignment.ljust(comment_column)}{comment}".rstrip()
        for assignment, (_, _, comment) in zip(assignments, rows)
    ]


def _table_rows(option: Option) -> list[tuple[str, str, str]]:
    """Rows for the entries of a table's own example mapping (wildcard tables)."""
    chosen = example_value(option)
    if chosen is None:
        return []
    source, value = chosen
    if option.is_array and isinstance(value, list):
        value = value[0] if value else {}
    if not isinstance(value, dict):
        return []

    wildcard = option.options.get(WILDCARD_OPTION)
    rows = []
    for key, item in value.items():
        if key in option.options and key != WILDCARD_OPTION:
            continue
        described = wildcard or option
        rows.append((toml_key(str(key)), toml_value(item), option_comment(described, source)))
    return rows


def _render_section(
    lines: list[str],
    path: list[str],
    options: list[Option],
    advanced: bool,
    depth: int,
    header: str | None,
    extra_rows: list[tuple[str, str, str]] | None = None,
) -> None:
    selected = _selected(options, advanced)

    rows = []
    for option in selected:
        if option.is_table or option.name == WILDCARD_OPTION:
            continue
        chosen = example_value(option)
        if chosen is None:
            continue
        source, value = chosen
        rows.append((toml_key(option.name), toml_value(value), option_comment(option, source)))
    rows.extend(extra_rows or [])

    child_depth = depth
    if header is not None and rows:
        if lines:
            lines.append("")
        lines.append(f"{INDENT * depth}{header}")
        lines.extend(_format_rows(rows, INDENT * (depth + 1)))
        child_depth = depth + 1
    elif header is None and rows:
        lines.extend(_format_rows(rows, INDENT * depth))
    elif header is not None:
        child_depth = depth + 1

    for option in selected:
        if not option.is_table:
            continue
        child_path = path + [toml_key(option.name)]
        brackets = ("[[", "]]") if option.is_array else ("[", "]")
        _render_section(
            lines,
            child_path,
            option.sorted_options(),
            advanced,
            child_depth,
            f"{brackets[0]}{'.'.join(child_path)}{brackets[1]}",
            _table_rows(option),
        )


def render_example(options: list[Option], table: str | None = None, advanced: bool = False) -> str:
    """
    Render example TOML for a set of options.

    Args:
        options: Options in display order
        table: Dotted table name the options live under; None for top-level
            (global) options
        advanced: Include every option instead of only common ones
    """
    lines: list[str] = []
    path = table.split(".") if table else []
    header = f"[{table}]" if table else None
    _render_section(lines, path, options, advanced, 0, header)
    if table and not lines:
        lines.append(header)
    return "\n".join(lines) + "\n"


def component_table_name(component: Component) -> str:
    return f"{component.kinds}.my_{component.name}_id"


def component_example(component: Component, advanced: bool = False) -> str:
    return render_example(component.sorted_options(), component_table_name(component), advanced)


def global_example(schema: Schema, advanced: bool = False) -> str:
    return render_example(schema.sorted_options(), None, advanced)
