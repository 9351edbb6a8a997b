"""Tests for the metadata export."""

import json

from schemadoc.render.environment import RenderSettings
from schemadoc.render.links import Links
from schemadoc.render.metadata import build_metadata, render_metadata
from schemadoc.schema.models import Schema


class TestBuildMetadata:
    def test_project(self, fixture_schema):
        data = build_metadata(fixture_schema)
        assert data["project"] == {
            "name": "Vector",
            "repo_url": "https://github.com/timberio/vector",
            "issues_url": "https://github.com/timberio/vector/issues",
        }

    def test_releases_newest_first(self, fixture_schema):
        data = build_metadata(fixture_schema)
        assert data["latest_version"] == "0.5.0"
        assert [r["version"] for r in data["releases"]] == ["0.5.0", "0.4.0"]
        assert data["releases"][0]["date"] == "2019-10-09"

    def test_components(self, fixture_schema):
        kafka = build_metadata(fixture_schema)["sinks"]["kafka"]

        assert kafka["id"] == "sinks.kafka"
        assert kafka["status"] == "beta"
        assert kafka["source_url"] == "https://github.com/timberio/vector/tree/master/src/sinks/kafka.rs"
        assert kafka["issues_url"].startswith("https://github.com/timberio/vector/issues?q=")
        assert kafka["options"]["type"]["enum"] == ["kafka"]
        assert kafka["options"]["tls"]["options"]["enabled"]["default"] is False
        assert "unit" not in kafka["options"]["topic"]

    def test_all_sections(self, fixture_schema):
        data = build_metadata(fixture_schema)
        assert set(data["sources"]) == {"file"}
        assert set(data["transforms"]) == {"regex_parser"}
        assert set(data["options"]) == {"data_dir", "log_schema"}
        assert data["guides"]["kafka-routing"]["sinks"] == ["kafka", "console"]
        assert "fragments" not in data

    def test_empty_schema(self):
        data = build_metadata(Schema())
        assert data["latest_version"] is None
        assert data["releases"] == []

    def test_settings(self, fixture_schema):
        settings = RenderSettings(project_name="Widget", links=Links("https://github.com/acme/widget"))
        data = build_metadata(fixture_schema, settings)
        assert data["project"]["name"] == "Widget"
        assert data["sinks"]["console"]["source_url"].startswith("https://github.com/acme/widget/")


class TestRenderMetadata:
    def test_stable_json(self, fixture_schema):
        text = render_metadata(fixture_schema)

        assert text.endswith("}\n")
        data = json.loads(text)
        assert list(data) == sorted(data)
        assert render_metadata(fixture_schema) == text
