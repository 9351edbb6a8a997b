"""Option types, event types and value conformance rules."""

import re
from datetime import date, datetime, time
from typing import Any

SCALAR_TYPES = ("string", "int", "float", "bool", "timestamp")
OPTION_TYPES = SCALAR_TYPES + ("table",) + tuple(f"[{t}]" for t in SCALAR_TYPES + ("table",))

EVENT_TYPES = ("log", "metric")
DELIVERY_GUARANTEES = ("at_least_once", "best_effort")

# Component kinds in documentation order, with their schema section names
KINDS = ("source", "transform", "sink")
SECTION_BY_KIND = {kind: f"{kind}s" for kind in KINDS}
KIND_BY_SECTION = {section: kind for kind, section in SECTION_BY_KIND.items()}

# Commit types understood by the release-notes renderer, in display order
COMMIT_TYPES = ("feat", "enhancement", "perf", "fix", "docs", "chore")
DEFAULT_COMMIT_TYPES = ("enhancement", "feat", "fix", "perf")

OPTION_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")
WILDCARD_OPTION = "*"
VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")


def is_array_type(type_name: str) -> bool:
    return type_name.startswith("[") and type_name.endswith("]")


def item_type(type_name: str) -> str:
    """Element type of an array type; scalar types are returned unchanged."""
    return type_name[1:-1] if is_array_type(type_name) else type_name


def is_table_type(type_name: str) -> bool:
    return item_type(type_name) == "table"


def _is_timestamp(value: Any) -> bool:
    if isinstance(value, (datetime, date, time)):
        return True
    if isinstance(value, str):
        try:
            datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return False
        return True
    return False


def conforms(value: Any, type_name: str) -> bool:
    """
    Check whether a value is valid for an option type.

    Args:
        value: Value taken from a schema file (default, example, enum member)
        type_name: One of OPTION_TYPES

    Returns:
        True if the value can be used for an option of that type

    Examples:
        >>> conforms(10, "float")
        True
        >>> conforms(True, "int")
        False
        >>> conforms(["a", "b"], "[string]")
        True
    """
    if is_array_type(type_name):
        if not isinstance(value, list):
            return False
        element = item_type(type_name)
        return all(conforms(item, element) for item in value)

    if type_name == "string":
        return isinstance(value, str)
    if type_name == "int":
        return isinstance(value, int) and not isinstance(value, bool)
    if type_name == "float":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if type_name == "bool":
        return isinstance(value, bool)
    if type_name == "timestamp":
        return _is_timestamp(value)
    if type_name == "table":
        return isinstance(value, dict)
    return False


def version_key(version: str) -> tuple:
    """Numeric sort key for X.Y.Z versions; malformed versions sort first."""
    match = VERSION_PATTERN.match(version)
    if not match:
        return (-1, -1, -1, version)
    return tuple(int(part) for part in match.groups()) + (version,)
