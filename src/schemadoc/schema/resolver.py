"""
Fragment resolution.

Components pull shared option groups (`_kafka`, `_aws`, `_tls`, ...) in through
`include`. Resolution flattens those inclusions into each component's own
option set and adds the options every component implicitly has.
"""

import copy
import logging
from typing import Any

from core.errors import SchemaResolutionError
from core.logging import LogContext, log_with_context
from schemadoc.schema.types import KIND_BY_SECTION

logger = logging.getLogger(__name__)

RESERVED_OPTIONS = ("type", "inputs")

# Sorts implicit options ahead of authored ones
TYPE_OPTION_SORT = -2
INPUTS_OPTION_SORT = -1
INPUTS_EXAMPLE = ["my-source-or-transform-id"]


def merge_options(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """
    Attribute-level deep merge of two option mappings.

    Mappings merge key by key (so an overlay that only sets `default` keeps
    the base's type and description); any other value, lists included,
    replaces the base value. Neither argument is modified.
    """
    result = copy.deepcopy(base)
    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_options(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _include_list(owner: str, entry: dict[str, Any]) -> list[str]:
    names = entry.get("include") or []
    if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
        raise SchemaResolutionError(f"{owner}: 'include' must be a list of fragment names")
    return names


def _expand_includes(
    names: list[str],
    fragments: dict[str, Any],
    trail: tuple[str, ...] = (),
) -> list[str]:
    """
    Flatten an include list into application order.

    A fragment's own includes come before it. A fragment reached along several
    paths is applied once, at its first position.
    """
    ordered: list[str] = []
    for name in names:
        if name in trail:
            cycle = " -> ".join(trail[trail.index(name):] + (name,))
            raise SchemaResolutionError(f"fragment inclusion cycle: {cycle}")
        if name not in fragments:
            raise SchemaResolutionError(f"unknown fragment '{name}'")

        fragment = fragments[name] or {}
        nested = _expand_includes(_include_list(f"fragments.{name}", fragment), fragments, trail + (name,))
        for item in nested + [name]:
            if item not in ordered:
                ordered.append(item)
    return ordered


def _collect_options(
    owner: str,
    entry: dict[str, Any],
    fragments: dict[str, Any],
) -> tuple[list[str], dict[str, Any]]:
    names = _include_list(owner, entry)
    try:
        chain = _expand_includes(names, fragments)
    except SchemaResolutionError as e:
        raise SchemaResolutionError(f"{owner}: {e.message}", context={"component": owner}) from e

    options: dict[str, Any] = {}
    for name in chain + [None]:
        source = entry if name is None else (fragments[name] or {})
        layer = source.get("options") or {}
        if not isinstance(layer, dict):
            label = owner if name is None else f"fragments.{name}"
            raise SchemaResolutionError(f"{label}: 'options' must be a mapping")
        options = merge_options(options, layer)
    return chain, options


def _implicit_options(kind: str, name: str) -> dict[str, Any]:
    options = {
        "type": {
            "type": "string",
            "required": True,
            "description": (
                "The component type. This is a required field for all components "
                f"and selects this component. The value _must_ be `{name}`."
            ),
            "enum": [name],
            "examples": [name],
            "sort": TYPE_OPTION_SORT,
        }
    }
    if kind in ("transform", "sink"):
        options["inputs"] = {
            "type": "[string]",
            "required": True,
            "description": "A list of upstream source or transform IDs. See configuration for more info.",
            "examples": [list(INPUTS_EXAMPLE)],
            "sort": INPUTS_OPTION_SORT,
        }
    return options


def resolve_document(raw: dict[str, Any]) -> dict[str, Any]:
    """
    Resolve fragment inclusion for every component.

    Args:
        raw: Raw document from the loader

    Returns:
        New document whose components carry their complete option sets and
        the implicit `type`/`inputs` options. Fragments keep their resolved
        option sets too, so unused fragments are still checked.

    Raises:
        SchemaResolutionError: Unknown fragment, inclusion cycle, malformed
            include list, or an authored option using a reserved name
    """
    resolved = copy.deepcopy(raw)
    fragments = resolved.get("fragments") or {}

    for name, fragment in fragments.items():
        if fragment is not None and not isinstance(fragment, dict):
            raise SchemaResolutionError(f"fragments.{name}: must be a mapping")

    resolved_fragments = {}
    for name, fragment in fragments.items():
        fragment = fragment or {}
        _, options = _collect_options(f"fragments.{name}", fragment, fragments)
        resolved_fragments[name] = {**fragment, "options": options}
    resolved["fragments"] = resolved_fragments

    for section, kind in KIND_BY_SECTION.items():
        components = resolved.get(section) or {}
        for name, component in components.items():
            component_id = f"{section}.{name}"
            with LogContext(component=component_id):
                if not isinstance(component, dict):
                    raise SchemaResolutionError(f"{component_id}: must be a mapping")

                for reserved in RESERVED_OPTIONS:
                    if reserved in (component.get("options") or {}):
                        raise SchemaResolutionError(
                            f"{component_id}: option '{reserved}' is reserved and added automatically",
                            context={"component": component_id},
                        )

                chain, options = _collect_options(component_id, component, fragments)
                for reserved in RESERVED_OPTIONS:
                    if reserved in options:
                        raise SchemaResolutionError(
                            f"{component_id}: option '{reserved}' is reserved and added automatically "
                            f"(defined by an included fragment)",
                            context={"component": component_id},
                        )

                component["options"] = {**_implicit_options(kind, name), **options}
                log_with_context(
                    logger,
                    logging.DEBUG,
                    "Resolved component",
                    fragments=chain,
                    option_count=len(component["options"]),
                )
        resolved[section] = components

    return resolved
