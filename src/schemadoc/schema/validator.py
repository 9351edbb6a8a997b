"""
Semantic schema validation.

Structural typing is handled by the pydantic models; this module checks the
rules that span fields and entries (value conformance, relevance conditions,
component kind constraints, cross references). Every problem in the schema is
collected so a failed build reports all of them at once.
"""

import logging
from typing import Any

from core.errors import SchemaValidationError
from core.logging import log_with_context
from schemadoc.schema.models import Component, Option, Schema
from schemadoc.schema.types import (
    COMMIT_TYPES,
    OPTION_NAME_PATTERN,
    VERSION_PATTERN,
    WILDCARD_OPTION,
    conforms,
)

logger = logging.getLogger(__name__)


def _check_value(errors: list[str], where: str, option: Option, label: str, value: Any) -> None:
    """Conformance and enum membership of a default or example value."""
    if not conforms(value, option.type):
        errors.append(f"{where}: {label} {value!r} is not a valid {option.type}")
        return
    if option.enum is None:
        return

    allowed = option.enum_values
    values = value if option.is_array else [value]
    for item in values:
        if item not in allowed:
            errors.append(f"{where}: {label} {item!r} is not one of the enum values {allowed}")


def _check_relevance(
    errors: list[str],
    where: str,
    option: Option,
    siblings: dict[str, Option],
) -> None:
    for key, expected in option.relevant_when.items():
        sibling = siblings.get(key)
        if sibling is None or key == option.name:
            errors.append(f"{where}: relevant_when references unknown sibling option '{key}'")
            continue
        if not conforms(expected, sibling.type):
            errors.append(
                f"{where}: relevant_when value {expected!r} for '{key}' "
                f"is not a valid {sibling.type}"
            )
        elif sibling.enum is not None:
            values = expected if sibling.is_array else [expected]
            for item in values:
                if item not in sibling.enum_values:
                    errors.append(
                        f"{where}: relevant_when value {item!r} for '{key}' "
                        f"is not one of {sibling.enum_values}"
                    )


def _check_option(
    errors: list[str],
    owner: str,
    path: str,
    option: Option,
    siblings: dict[str, Option],
    in_table: bool,
    check_relevance: bool,
) -> None:
    where = f"{owner}: option '{path}'"

    if option.name == WILDCARD_OPTION:
        if not in_table:
            errors.append(f"{where}: the wildcard option is only allowed inside a table")
    elif not OPTION_NAME_PATTERN.match(option.name):
        errors.append(f"{where}: name must match {OPTION_NAME_PATTERN.pattern}")

    if not option.description.strip():
        errors.append(f"{where}: description must not be empty")

    if option.is_table and not option.options:
        errors.append(f"{where}: {option.type} options must declare child options")
    elif not option.is_table and option.options:
        errors.append(f"{where}: only table options may declare child options")

    if option.enum is not None:
        if not option.enum_values:
            errors.append(f"{where}: enum must not be empty")
        for value in option.enum_values:
            if not conforms(value, option.item_type):
                errors.append(f"{where}: enum value {value!r} is not a valid {option.item_type}")

    if option.has_default:
        if option.required:
            errors.append(f"{where}: required options must not declare a default")
        _check_value(errors, where, option, "default", option.default)

    for example in option.examples:
        _check_value(errors, where, option, "example", example)

    if option.required and not option.examples:
        errors.append(f"{where}: required options must declare at least one example")

    if option.relevant_when and check_relevance:
        _check_relevance(errors, where, option, siblings)

    for child in option.sorted_options():
        _check_option(errors, owner, f"{path}.{child.name}", child, option.options, True, check_relevance)


def _check_options(
    errors: list[str],
    owner: str,
    options: dict[str, Option],
    check_relevance: bool = True,
) -> None:
    for option in sorted(options.values(), key=lambda o: o.sort_key):
        _check_option(errors, owner, option.name, option, options, False, check_relevance)


def _check_component(errors: list[str], schema: Schema, component: Component) -> None:
    owner = component.id

    if not OPTION_NAME_PATTERN.match(component.name):
        errors.append(f"{owner}: component name must match {OPTION_NAME_PATTERN.pattern}")

    if not component.description.strip():
        errors.append(f"{owner}: description must not be empty")

    if component.kind == "source":
        if not component.output_types:
            errors.append(f"{owner}: sources must declare output_types")
        if component.input_types:
            errors.append(f"{owner}: sources must not declare input_types")
    elif component.kind == "sink":
        if not component.input_types:
            errors.append(f"{owner}: sinks must declare input_types")
        if component.output_types:
            errors.append(f"{owner}: sinks must not declare output_types")
    else:
        if not component.input_types:
            errors.append(f"{owner}: transforms must declare input_types")
        if not component.output_types:
            errors.append(f"{owner}: transforms must declare output_types")

    if component.kind == "transform":
        if component.delivery_guarantee is not None:
            errors.append(f"{owner}: transforms must not declare a delivery_guarantee")
    elif component.delivery_guarantee is None:
        errors.append(f"{owner}: {component.kinds} must declare a delivery_guarantee")

    for alternative in component.alternatives:
        if schema.component_by_id(alternative) is None:
            errors.append(f"{owner}: alternative '{alternative}' does not reference a known component")
        elif alternative == owner:
            errors.append(f"{owner}: a component cannot be its own alternative")

    _check_options(errors, owner, component.options)


def _check_releases(errors: list[str], schema: Schema) -> None:
    for version, release in schema.releases.items():
        owner = f"releases.{version}"
        if not VERSION_PATTERN.match(version):
            errors.append(f"{owner}: version must have the form X.Y.Z")

        seen: set[str] = set()
        for commit in release.commits:
            if commit.type not in COMMIT_TYPES:
                errors.append(
                    f"{owner}: commit {commit.sha} has unknown type '{commit.type}'; "
                    f"expected one of {', '.join(COMMIT_TYPES)}"
                )
            if commit.sha in seen:
                errors.append(f"{owner}: commit {commit.sha} is listed more than once")
            seen.add(commit.sha)


def _check_guides(errors: list[str], schema: Schema) -> None:
    for slug, guide in schema.guides.items():
        if not OPTION_NAME_PATTERN.match(slug.replace("-", "_")):
            errors.append(
                f"guides.{slug}: slug must match {OPTION_NAME_PATTERN.pattern} (hyphens allowed)"
            )
        for section in ("sources", "transforms", "sinks"):
            for name in getattr(guide, section):
                if schema.component(section, name) is None:
                    errors.append(f"guides.{slug}: unknown component '{section}.{name}'")


def validate_schema(schema: Schema) -> list[str]:
    """
    Check every semantic rule and return all violations.

    Returns:
        Error messages, each prefixed with the owning entry
        (`sinks.kafka: option 'batch.max_size': ...`); empty when valid
    """
    errors: list[str] = []

    _check_options(errors, "options", schema.options)

    for name, fragment in schema.fragments.items():
        owner = f"fragments.{name}"
        if not name.startswith("_"):
            errors.append(f"{owner}: fragment names must start with '_'")
        # Siblings of a fragment option may come from the including component
        _check_options(errors, owner, fragment.options, check_relevance=False)

    for component in schema.components():
        _check_component(errors, schema, component)

    _check_releases(errors, schema)
    _check_guides(errors, schema)

    return errors


def ensure_valid(schema: Schema) -> Schema:
    """
    Validate a schema, raising on any violation.

    Raises:
        SchemaValidationError: Carrying every violation found
    """
    errors = validate_schema(schema)
    if errors:
        log_with_context(logger, logging.DEBUG, "Schema validation failed", error_count=len(errors))
        raise SchemaValidationError(errors)
    log_with_context(
        logger,
        logging.DEBUG,
        "Schema validation passed",
        component_count=len(schema.components()),
    )
    return schema
