"""
Typed schema models.

The resolved document is validated structurally into these pydantic models.
Entry names (option names, component names, release versions, guide slugs)
come from mapping keys in the schema files and are injected before
validation, so every model knows its own identity.
"""

import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from core.errors import SchemaValidationError
from schemadoc.schema.types import (
    DELIVERY_GUARANTEES,
    EVENT_TYPES,
    KINDS,
    OPTION_TYPES,
    SECTION_BY_KIND,
    is_array_type,
    is_table_type,
    item_type,
    version_key,
)

OptionType = Literal[OPTION_TYPES]
EventType = Literal[EVENT_TYPES]
DeliveryGuarantee = Literal[DELIVERY_GUARANTEES]
Kind = Literal[KINDS]

# Options without an explicit sort key come after implicit ones
DEFAULT_SORT = 1000


def _inject_key(entries: Any, field: str = "name", **extra: Any) -> Any:
    """Copy each mapping entry with its key stored under `field`."""
    if not isinstance(entries, dict):
        return entries
    return {
        key: ({**entry, field: str(key), **extra} if isinstance(entry, dict) else entry)
        for key, entry in entries.items()
    }


class Option(BaseModel):
    """One configuration key of a component or of the global configuration."""

    name: str
    type: OptionType
    description: str
    required: bool = False
    common: bool = False
    default: Any = None
    enum: list[Any] | dict[str, str] | None = None
    examples: list[Any] = Field(default_factory=list)
    relevant_when: dict[str, Any] | None = None
    unit: str | None = None
    templateable: bool = False
    deprecated: bool | str = False
    category: str | None = None
    sort: int | None = None
    warnings: list[str] = Field(default_factory=list)
    options: dict[str, "Option"] = Field(default_factory=dict)

    @field_validator("options", mode="before")
    @classmethod
    def name_children(cls, v: Any) -> Any:
        return _inject_key(v)

    @property
    def is_table(self) -> bool:
        return is_table_type(self.type)

    @property
    def is_array(self) -> bool:
        return is_array_type(self.type)

    @property
    def item_type(self) -> str:
        return item_type(self.type)

    @property
    def has_default(self) -> bool:
        return self.default is not None

    @property
    def enum_values(self) -> list[Any]:
        if self.enum is None:
            return []
        return list(self.enum)

    def enum_description(self, value: Any) -> str | None:
        """Description of an enum member, when the enum is a mapping."""
        if isinstance(self.enum, dict):
            return self.enum.get(value)
        return None

    @property
    def is_common(self) -> bool:
        """Shown in the common example: required, flagged common, or a table holding such options."""
        if self.required or self.common:
            return True
        return self.is_table and any(child.is_common for child in self.options.values())

    @property
    def sort_key(self) -> tuple:
        return (
            self.sort if self.sort is not None else DEFAULT_SORT,
            not self.required,
            self.name,
        )

    def sorted_options(self) -> list["Option"]:
        return sorted(self.options.values(), key=lambda o: o.sort_key)

    model_config = {"extra": "forbid"}


class Fragment(BaseModel):
    """Reusable option group (`_kafka`, `_aws`, ...) included by components."""

    name: str
    description: str | None = None
    include: list[str] = Field(default_factory=list)
    options: dict[str, Option] = Field(default_factory=dict)

    @field_validator("options", mode="before")
    @classmethod
    def name_options(cls, v: Any) -> Any:
        return _inject_key(v)

    def sorted_options(self) -> list[Option]:
        return sorted(self.options.values(), key=lambda o: o.sort_key)

    model_config = {"extra": "forbid"}


class Resource(BaseModel):
    name: str
    url: str

    model_config = {"extra": "forbid"}


class OutputExample(BaseModel):
    """Example of an event a component emits."""

    type: EventType
    body: str
    title: str | None = None

    model_config = {"extra": "forbid"}


class Component(BaseModel):
    """
    A source, transform or sink as described by the schema.

    Attributes:
        name: Component name (`kafka`)
        kind: `source`, `transform` or `sink`
        options: Complete option set after fragment resolution
        alternatives: Other components to consider, as `<kinds>.<name>`
    """

    name: str
    kind: Kind
    title: str | None = None
    description: str
    beta: bool = False
    input_types: list[EventType] = Field(default_factory=list)
    output_types: list[EventType] = Field(default_factory=list)
    delivery_guarantee: DeliveryGuarantee | None = None
    include: list[str] = Field(default_factory=list)
    options: dict[str, Option] = Field(default_factory=dict)
    resources: list[Resource] = Field(default_factory=list)
    alternatives: list[str] = Field(default_factory=list)
    outputs: list[OutputExample] = Field(default_factory=list)

    @field_validator("options", mode="before")
    @classmethod
    def name_options(cls, v: Any) -> Any:
        return _inject_key(v)

    @property
    def status(self) -> str:
        return "beta" if self.beta else "stable"

    @property
    def kinds(self) -> str:
        return SECTION_BY_KIND[self.kind]

    @property
    def id(self) -> str:
        return f"{self.kinds}.{self.name}"

    @property
    def display_title(self) -> str:
        return self.title or self.name

    def sorted_options(self) -> list[Option]:
        return sorted(self.options.values(), key=lambda o: o.sort_key)

    model_config = {"extra": "forbid"}


class Commit(BaseModel):
    sha: str
    type: str
    description: str
    scope: str | None = None
    breaking_change: bool = False
    pr_number: int | None = None

    @property
    def short_sha(self) -> str:
        return self.sha[:5]

    model_config = {"extra": "forbid", "coerce_numbers_to_str": True}


class Release(BaseModel):
    version: str
    date: datetime.date | None = None
    description: str | None = None
    commits: list[Commit] = Field(default_factory=list)

    @property
    def breaking_changes(self) -> list[Commit]:
        return [c for c in self.commits if c.breaking_change]

    model_config = {"extra": "forbid"}


class Guide(BaseModel):
    """A how-to guide and the components it covers (by name, per kind)."""

    slug: str
    title: str
    path: str
    sources: list[str] = Field(default_factory=list)
    transforms: list[str] = Field(default_factory=list)
    sinks: list[str] = Field(default_factory=list)

    def covers(self, component: Component) -> bool:
        return component.name in getattr(self, component.kinds)

    model_config = {"extra": "forbid"}


class Schema(BaseModel):
    """The complete, resolved configuration schema."""

    options: dict[str, Option] = Field(default_factory=dict)
    fragments: dict[str, Fragment] = Field(default_factory=dict)
    sources: dict[str, Component] = Field(default_factory=dict)
    transforms: dict[str, Component] = Field(default_factory=dict)
    sinks: dict[str, Component] = Field(default_factory=dict)
    releases: dict[str, Release] = Field(default_factory=dict)
    guides: dict[str, Guide] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def inject_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = {key: value for key, value in data.items() if value is not None}
        data["options"] = _inject_key(data.get("options", {}))
        data["fragments"] = _inject_key(data.get("fragments", {}))
        for kind in KINDS:
            section = SECTION_BY_KIND[kind]
            data[section] = _inject_key(data.get(section, {}), kind=kind)
        data["releases"] = _inject_key(data.get("releases", {}), field="version")
        data["guides"] = _inject_key(data.get("guides", {}), field="slug")
        return data

    def components(self, kind: str | None = None) -> list[Component]:
        """Components in kind order (sources, transforms, sinks), then by name."""
        kinds = [kind] if kind else list(KINDS)
        result = []
        for k in kinds:
            section = getattr(self, SECTION_BY_KIND[k])
            result.extend(section[name] for name in sorted(section))
        return result

    def component(self, kind: str, name: str) -> Component | None:
        """Look up a component by kind (`sink` or `sinks`) and name."""
        section = kind if kind.endswith("s") else SECTION_BY_KIND.get(kind, "")
        if section not in SECTION_BY_KIND.values():
            return None
        return getattr(self, section).get(name)

    def component_by_id(self, component_id: str) -> Component | None:
        """Look up a component by `<kinds>.<name>` reference."""
        section, _, name = component_id.partition(".")
        if not name:
            return None
        return self.component(section, name)

    def sorted_options(self) -> list[Option]:
        return sorted(self.options.values(), key=lambda o: o.sort_key)

    def sorted_releases(self) -> list[Release]:
        """Releases newest first, by numeric version."""
        return sorted(self.releases.values(), key=lambda r: version_key(r.version), reverse=True)

    @property
    def latest_release(self) -> Release | None:
        releases = self.sorted_releases()
        return releases[0] if releases else None

    def guides_for(self, component: Component) -> list[Guide]:
        return [self.guides[slug] for slug in sorted(self.guides) if self.guides[slug].covers(component)]

    model_config = {"extra": "forbid"}


def _format_location(loc: tuple) -> str:
    return ".".join(str(part) for part in loc)


def build_schema(resolved: dict[str, Any]) -> Schema:
    """
    Build the typed schema from a resolved document.

    Raises:
        SchemaValidationError: One entry per structural problem, each
            prefixed with its dotted document path
    """
    try:
        return Schema.model_validate(resolved)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            location = _format_location(error["loc"])
            errors.append(f"{location}: {error['msg']}" if location else error["msg"])
        raise SchemaValidationError(errors, cause=e) from e
