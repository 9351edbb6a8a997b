"""
Markdown option tables.

    | Key                 | Type     | Description                           |
    |:--------------------|:--------:|:--------------------------------------|
    | **REQUIRED**        |          |                                       |
    | `type`              | `string` | The component type ...                |
    | **OPTIONAL**        |          |                                       |
    | `batch.max_size`    | `int`    | Maximum batch size.<br />`default: 1049000` `unit: bytes` |
"""

from schemadoc.render.examples import relevance_note, toml_value
from schemadoc.render.text import anchor, md_table_cell
from schemadoc.schema.models import Option

HEADER = ["| Key | Type | Description |", "|:----|:----:|:------------|"]

DEFAULT_CATEGORY = "General"


def option_annotations(option: Option) -> list[str]:
    """Inline badges shown under an option's description."""
    badges = []
    if option.has_default:
        badges.append(f"`default: {toml_value(option.default)}`")
    elif not option.required and not option.is_table:
        badges.append("`no default`")

    values = option.enum_values
    if len(values) == 1:
        badges.append(f"`must be: {toml_value(values[0])}`")
    elif values:
        badges.append("`enum: " + ", ".join(toml_value(v) for v in values) + "`")

    if option.unit:
        badges.append(f"`unit: {option.unit}`")

    note = relevance_note(option)
    if note:
        badges.append(f"`{note}`")
    if option.templateable:
        badges.append("`templateable`")
    if option.deprecated:
        badges.append("`deprecated`")
    return badges


def flatten_options(options: list[Option], prefix: str = "") -> list[tuple[str, Option]]:
    """Options with their dotted keys, children directly after their table."""
    flat = []
    for option in options:
        key = f"{prefix}{option.name}"
        flat.append((key, option))
        if option.is_table:
            flat.extend(flatten_options(option.sorted_options(), f"{key}."))
    return flat


def _row(key: str, option: Option) -> str:
    description = md_table_cell(option.description)
    badges = option_annotations(option)
    if badges:
        description = f"{description}<br />{' '.join(badges)}"
    return f"| [`{key}`](#{anchor(key)}) | `{option.type}` | {description} |"


def _category_groups(options: list[Option]) -> list[tuple[str, list[Option]]]:
    groups: dict[str, list[Option]] = {}
    for option in options:
        groups.setdefault(option.category or DEFAULT_CATEGORY, []).append(option)
    return list(groups.items())


def render_options_table(options: list[Option]) -> str:
    """
    Render the option table for a component or the global configuration.

    Args:
        options: Top-level options in display order

    Returns:
        Markdown table, or an empty string when there are no options
    """
    if not options:
        return ""

    categories = {option.category or DEFAULT_CATEGORY for option in options}
    show_categories = len(categories) > 1

    lines = list(HEADER)
    for label, required in (("REQUIRED", True), ("OPTIONAL", False)):
        section = [o for o in options if o.required == required]
        if not section:
            continue
        lines.append(f"| **{label}** | | |")
        for category, members in _category_groups(section):
            if show_categories:
                lines.append(f"| *{category}* | | |")
            for key, option in flatten_options(members):
                lines.append(_row(key, option))
    return "\n".join(lines)
