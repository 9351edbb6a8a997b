"""Tests for the template environment."""

from pathlib import Path

import pytest

from config import DocsConfig
from core.errors import OutputError, RenderError
from schemadoc.render.environment import FILTERS, RenderSettings, create_environment, render_template


@pytest.fixture
def templates_dir(tmp_path):
    path = tmp_path / "templates"
    path.mkdir()
    return path


class TestRenderSettings:
    def test_defaults(self):
        settings = RenderSettings()
        assert settings.project_name == "Vector"
        assert settings.links.repo_url == "https://github.com/timberio/vector"
        assert settings.schema_source == "schema/"

    def test_from_config(self):
        config = DocsConfig(
            schema_dir=Path("/srv/widget/definitions"),
            project_name="Widget",
            config_binary="widgetd",
            repo_url="https://github.com/acme/widget",
            commit_types=["feat"],
        )
        settings = RenderSettings.from_config(config)

        assert settings.project_name == "Widget"
        assert settings.config_binary == "widgetd"
        assert settings.links.issues_url == "https://github.com/acme/widget/issues"
        assert settings.commit_types == ("feat",)
        assert settings.schema_source == "definitions/"

    def test_page_context(self):
        context = RenderSettings().page_context()
        assert set(context) == {"settings", "links", "project_name", "binary", "schema_source"}
        assert context["binary"] == "vector"


class TestFilters:
    def test_yaml_str(self):
        yaml_str = FILTERS["yaml_str"]
        assert yaml_str("Streams events.") == "Streams events."
        assert yaml_str("key: value") == "'key: value'"

    def test_filters_registered(self):
        env = create_environment()
        for name in FILTERS:
            assert name in env.filters


class TestCreateEnvironment:
    def test_packaged_templates(self):
        env = create_environment()
        for name in ("component.md.j2", "global.md.j2", "kind_index.md.j2", "release.md.j2", "changelog.md.j2"):
            assert env.get_template(name) is not None

    def test_override_takes_precedence(self, templates_dir):
        (templates_dir / "release.md.j2").write_text("custom {{ version }}\n")
        env = create_environment(templates_dir)
        assert render_template(env, "release.md.j2", version="1.0.0") == "custom 1.0.0\n"
        assert env.get_template("component.md.j2") is not None

    def test_missing_templates_dir(self, tmp_path):
        with pytest.raises(RenderError, match="Templates directory does not exist"):
            create_environment(tmp_path / "missing")


class TestRenderTemplate:
    def test_keeps_trailing_newline(self, templates_dir):
        (templates_dir / "page.md.j2").write_text("{% if show %}\nshown\n{% endif %}\n")
        env = create_environment(templates_dir)
        assert render_template(env, "page.md.j2", show=True) == "shown\n"

    def test_template_not_found(self):
        with pytest.raises(RenderError) as exc_info:
            render_template(create_environment(), "missing.md.j2")
        assert exc_info.value.message == "Template not found: missing.md.j2"
        assert exc_info.value.context["template"] == "missing.md.j2"

    def test_syntax_error(self, templates_dir):
        (templates_dir / "broken.md.j2").write_text("line one\n{% if %}\n")
        with pytest.raises(RenderError, match="Template syntax error at line 2") as exc_info:
            render_template(create_environment(templates_dir), "broken.md.j2")
        assert exc_info.value.context["line"] == 2

    def test_undefined_value(self, templates_dir):
        (templates_dir / "page.md.j2").write_text("{{ missing }}")
        with pytest.raises(RenderError, match="Undefined value in template: 'missing' is undefined"):
            render_template(create_environment(templates_dir), "page.md.j2")

    def test_other_errors_are_wrapped(self, templates_dir):
        (templates_dir / "page.md.j2").write_text("{{ boom() }}")

        def boom():
            raise ValueError("bad value")

        with pytest.raises(RenderError, match="Template rendering failed: bad value") as exc_info:
            render_template(create_environment(templates_dir), "page.md.j2", boom=boom)
        assert isinstance(exc_info.value.cause, ValueError)

    def test_schemadoc_errors_pass_through(self, templates_dir):
        (templates_dir / "page.md.j2").write_text("{{ boom() }}")

        def boom():
            raise OutputError("cannot read")

        with pytest.raises(OutputError, match="cannot read"):
            render_template(create_environment(templates_dir), "page.md.j2", boom=boom)
