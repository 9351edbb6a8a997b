"""Tests for typed schema models."""

import datetime

import pytest
from pydantic import ValidationError

from core.errors import SchemaValidationError
from schemadoc.schema.models import Component, Option, Schema, build_schema


def _opt(name="opt", **fields):
    return Option(name=name, **{"type": "string", "description": "An option.", **fields})


class TestOption:
    def test_children_get_names(self):
        option = Option.model_validate(
            {
                "name": "tls",
                "type": "table",
                "description": "TLS",
                "options": {"enabled": {"type": "bool", "description": "Enable"}},
            }
        )
        assert option.options["enabled"].name == "enabled"
        assert option.is_table

    def test_unknown_attribute_is_rejected(self):
        with pytest.raises(ValidationError):
            Option.model_validate({"name": "x", "type": "string", "description": "x", "colour": "red"})

    def test_array_helpers(self):
        option = _opt(type="[int]")
        assert option.is_array
        assert option.item_type == "int"
        assert not option.is_table

    def test_has_default(self):
        assert _opt(default=False).has_default
        assert not _opt().has_default

    def test_enum_values_and_descriptions(self):
        listed = _opt(enum=["json", "text"])
        described = _opt(enum={"json": "JSON encoding", "text": "Plain text"})

        assert listed.enum_values == ["json", "text"]
        assert listed.enum_description("json") is None
        assert described.enum_values == ["json", "text"]
        assert described.enum_description("text") == "Plain text"
        assert _opt().enum_values == []

    def test_is_common(self):
        assert _opt(required=True).is_common
        assert _opt(common=True).is_common
        assert not _opt().is_common

    def test_table_with_common_child_is_common(self):
        table = Option.model_validate(
            {
                "name": "buffer",
                "type": "table",
                "description": "Buffer",
                "options": {"type": {"type": "string", "description": "x", "common": True}},
            }
        )
        assert table.is_common

    def test_sort_order(self):
        options = [
            _opt("zeta", required=True),
            _opt("alpha"),
            _opt("type", sort=-2),
            _opt("beta", required=True),
        ]
        assert [o.name for o in sorted(options, key=lambda o: o.sort_key)] == [
            "type",
            "beta",
            "zeta",
            "alpha",
        ]


class TestComponent:
    def test_identity(self):
        component = Component(name="kafka", kind="sink", description="Kafka", beta=True)
        assert component.id == "sinks.kafka"
        assert component.kinds == "sinks"
        assert component.status == "beta"
        assert component.display_title == "kafka"

    def test_title(self):
        component = Component(name="file", kind="source", description="File", title="File")
        assert component.display_title == "File"
        assert component.status == "stable"

    def test_invalid_event_type(self):
        with pytest.raises(ValidationError):
            Component(name="x", kind="source", description="x", output_types=["trace"])


class TestSchema:
    def test_names_and_kinds_are_injected(self, fixture_schema):
        kafka = fixture_schema.sinks["kafka"]
        assert kafka.name == "kafka"
        assert kafka.kind == "sink"
        assert fixture_schema.releases["0.5.0"].version == "0.5.0"
        assert fixture_schema.guides["kafka-routing"].slug == "kafka-routing"
        assert fixture_schema.fragments["_tls"].name == "_tls"

    def test_components_in_kind_order(self, fixture_schema):
        assert [c.id for c in fixture_schema.components()] == [
            "sources.file",
            "transforms.regex_parser",
            "sinks.console",
            "sinks.kafka",
        ]
        assert [c.name for c in fixture_schema.components("sink")] == ["console", "kafka"]

    def test_component_lookup(self, fixture_schema):
        assert fixture_schema.component("sink", "kafka").id == "sinks.kafka"
        assert fixture_schema.component("sinks", "kafka").id == "sinks.kafka"
        assert fixture_schema.component("sink", "missing") is None
        assert fixture_schema.component("widget", "kafka") is None

    def test_component_by_id(self, fixture_schema):
        assert fixture_schema.component_by_id("sources.file").name == "file"
        assert fixture_schema.component_by_id("file") is None

    def test_sorted_releases_newest_first(self):
        schema = Schema.model_validate({"releases": {"0.9.0": {}, "0.10.0": {}, "0.4.0": {}}})
        assert [r.version for r in schema.sorted_releases()] == ["0.10.0", "0.9.0", "0.4.0"]
        assert schema.latest_release.version == "0.10.0"

    def test_latest_release_without_releases(self):
        assert Schema().latest_release is None

    def test_release_dates_and_commits(self, fixture_schema):
        release = fixture_schema.releases["0.5.0"]
        assert release.date == datetime.date(2019, 10, 9)
        assert [c.short_sha for c in release.breaking_changes] == ["c3d4e"]
        assert release.commits[0].pr_number == 901

    def test_guides_for(self, fixture_schema):
        kafka = fixture_schema.sinks["kafka"]
        assert [g.slug for g in fixture_schema.guides_for(kafka)] == ["kafka-routing"]
        assert fixture_schema.guides_for(fixture_schema.sources["file"]) == []


class TestBuildSchema:
    def test_reports_every_structural_error_with_location(self):
        resolved = {
            "sinks": {
                "kafka": {
                    "description": "Kafka",
                    "delivery_guarantee": "exactly_once",
                    "options": {"topic": {"type": "text", "description": "Topic"}},
                }
            }
        }
        with pytest.raises(SchemaValidationError) as exc_info:
            build_schema(resolved)

        errors = exc_info.value.errors
        assert len(errors) == 2
        assert any(e.startswith("sinks.kafka.delivery_guarantee: ") for e in errors)
        assert any(e.startswith("sinks.kafka.options.topic.type: ") for e in errors)

    def test_unknown_component_field(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            build_schema({"sources": {"file": {"description": "File", "colour": "red"}}})
        assert exc_info.value.errors[0].startswith("sources.file.colour: ")

    def test_missing_description(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            build_schema({"sources": {"file": {}}})
        assert exc_info.value.errors == ["sources.file.description: Field required"]
