"""
Tests for exception hierarchy and error classification.
"""

import tomllib

import pytest
import yaml

from core.errors.exceptions import (
    ConfigError,
    ErrorCategory,
    OutputError,
    RenderError,
    SchemadocError,
    SchemaParseError,
    SchemaResolutionError,
    SchemaValidationError,
    classify_exception,
    wrap_exception,
)


class TestSchemadocError:
    """Test base SchemadocError class."""

    def test_basic_error(self):
        err = SchemadocError("Something went wrong")
        assert err.message == "Something went wrong"
        assert err.cause is None
        assert err.context == {}
        assert err.category == ErrorCategory.UNKNOWN
        assert err.exit_code == 4

    def test_error_with_cause(self):
        cause = ValueError("Invalid value")
        err = SchemadocError("Wrapper message", cause=cause)
        assert err.cause is cause
        assert str(err) == "Wrapper message | Caused by: Invalid value"

    def test_error_with_context(self):
        err = SchemadocError("Error", context={"component": "sinks.kafka"})
        assert err.context["component"] == "sinks.kafka"


class TestCategories:
    @pytest.mark.parametrize(
        "error, category, exit_code",
        [
            (ConfigError("x"), ErrorCategory.CONFIG, 2),
            (SchemaParseError("x"), ErrorCategory.PARSE, 3),
            (SchemaResolutionError("x"), ErrorCategory.RESOLUTION, 3),
            (SchemaValidationError(["x"]), ErrorCategory.VALIDATION, 3),
            (RenderError("x"), ErrorCategory.RENDER, 4),
            (OutputError("x"), ErrorCategory.IO, 4),
        ],
    )
    def test_category_and_exit_code(self, error, category, exit_code):
        assert isinstance(error, SchemadocError)
        assert error.category == category
        assert error.exit_code == exit_code


class TestSchemaParseError:
    def test_str_includes_path_and_line(self):
        err = SchemaParseError("invalid TOML", path="sinks/kafka.toml", line=12)
        assert str(err) == "sinks/kafka.toml:12: invalid TOML"
        assert err.context == {"schema_file": "sinks/kafka.toml", "line": 12}

    def test_str_without_line(self):
        err = SchemaParseError("top level must be a mapping, got list", path="a.yaml")
        assert str(err) == "a.yaml: top level must be a mapping, got list"

    def test_str_without_path(self):
        assert str(SchemaParseError("no schema files found")) == "no schema files found"


class TestSchemaValidationError:
    def test_default_message_counts_errors(self):
        err = SchemaValidationError(["a", "b"])
        assert err.message == "Schema validation failed with 2 errors"
        assert err.errors == ["a", "b"]

    def test_singular_message(self):
        assert SchemaValidationError(["a"]).message == "Schema validation failed with 1 error"

    def test_str_lists_every_error(self):
        err = SchemaValidationError(["sinks.kafka: first", "sources.file: second"])
        assert str(err).splitlines() == [
            "Schema validation failed with 2 errors",
            "  - sinks.kafka: first",
            "  - sources.file: second",
        ]

    def test_errors_are_copied(self):
        errors = ["a"]
        err = SchemaValidationError(errors)
        errors.append("b")
        assert err.errors == ["a"]


class TestRenderError:
    def test_template_name_in_context(self):
        err = RenderError("Template not found: x.j2", template_name="x.j2")
        assert err.template_name == "x.j2"
        assert err.context["template"] == "x.j2"


class TestClassifyException:
    def test_schemadoc_error_keeps_category(self):
        assert classify_exception(ConfigError("x")) == ErrorCategory.CONFIG

    def test_yaml_error(self):
        with pytest.raises(yaml.YAMLError) as exc_info:
            yaml.safe_load("a: [unclosed")
        assert classify_exception(exc_info.value) == ErrorCategory.PARSE

    def test_toml_error(self):
        with pytest.raises(tomllib.TOMLDecodeError) as exc_info:
            tomllib.loads("a = ")
        assert classify_exception(exc_info.value) == ErrorCategory.PARSE

    def test_os_error(self):
        assert classify_exception(PermissionError("denied")) == ErrorCategory.IO

    def test_unknown(self):
        assert classify_exception(RuntimeError("boom")) == ErrorCategory.UNKNOWN


class TestWrapException:
    def test_returns_schemadoc_error_unchanged(self):
        err = OutputError("x", context={"path": "a"})
        wrapped = wrap_exception(err, context={"stage": "write"})
        assert wrapped is err
        assert err.context == {"path": "a", "stage": "write"}

    def test_wraps_os_error(self):
        cause = FileNotFoundError("missing")
        wrapped = wrap_exception(cause, "Cannot read docs/a.md")
        assert isinstance(wrapped, OutputError)
        assert wrapped.cause is cause
        assert wrapped.message == "Cannot read docs/a.md"
        assert wrapped.context["error_type"] == "FileNotFoundError"

    def test_wraps_unknown_with_default_class(self):
        wrapped = wrap_exception(RuntimeError("boom"))
        assert type(wrapped) is SchemadocError
        assert wrapped.message == "boom"

    def test_custom_default_class(self):
        wrapped = wrap_exception(RuntimeError("boom"), default_class=RenderError)
        assert isinstance(wrapped, RenderError)

    def test_validation_category_becomes_validation_error(self):
        class ValidationError(Exception):
            pass

        wrapped = wrap_exception(ValidationError("bad field"))
        assert isinstance(wrapped, SchemaValidationError)
        assert wrapped.errors == ["bad field"]
