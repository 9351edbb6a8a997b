"""
Unified exception hierarchy for schemadoc.

Provides typed exceptions with a build-failure category so the CLI can report
every problem with a precise exit code.
"""


# Import ErrorCategory from canonical source to avoid duplicate enum issues
# (comparing enums from different classes always returns False)
from core.types import EXIT_CODES, ErrorCategory


class SchemadocError(Exception):
    """
    Base exception for all schemadoc errors.

    Attributes:
        message: Human-readable error description
        category: Error classification for reporting
        cause: Original exception if wrapping
        context: Additional context dict for debugging (file, component, ...)
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    @property
    def exit_code(self) -> int:
        return EXIT_CODES[self.category]

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(SchemadocError):
    """Generator settings are missing or invalid."""

    category = ErrorCategory.CONFIG


# =============================================================================
# Schema Errors
# =============================================================================


class SchemaParseError(SchemadocError):
    """A schema file could not be decoded or has an invalid layout."""

    category = ErrorCategory.PARSE

    def __init__(
        self,
        message: str,
        path: str | None = None,
        line: int | None = None,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        context = dict(context or {})
        if path is not None:
            context["schema_file"] = str(path)
        if line is not None:
            context["line"] = line
        super().__init__(message, cause, context)
        self.path = path
        self.line = line

    def __str__(self) -> str:
        location = ""
        if self.path is not None:
            location = f"{self.path}:{self.line}: " if self.line else f"{self.path}: "
        parts = [f"{location}{self.message}"]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


class SchemaResolutionError(SchemadocError):
    """Fragment inclusion failed (unknown fragment, inclusion cycle, reserved name)."""

    category = ErrorCategory.RESOLUTION


class SchemaValidationError(SchemadocError):
    """
    The resolved schema violates one or more rules.

    All problems found in a build are collected into ``errors`` so authors can
    fix them in one pass instead of one failed build at a time.
    """

    category = ErrorCategory.VALIDATION

    def __init__(
        self,
        errors: list[str],
        message: str | None = None,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        self.errors = list(errors)
        count = len(self.errors)
        message = message or f"Schema validation failed with {count} error{'' if count == 1 else 's'}"
        super().__init__(message, cause, context)

    def __str__(self) -> str:
        lines = [self.message]
        lines.extend(f"  - {error}" for error in self.errors)
        return "\n".join(lines)


# =============================================================================
# Output Errors
# =============================================================================


class RenderError(SchemadocError):
    """A documentation template failed to render."""

    category = ErrorCategory.RENDER

    def __init__(
        self,
        message: str,
        template_name: str | None = None,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        context = dict(context or {})
        if template_name:
            context["template"] = template_name
        super().__init__(message, cause, context)
        self.template_name = template_name


class OutputError(SchemadocError):
    """Reading or writing generated documentation failed."""

    category = ErrorCategory.IO


# =============================================================================
# Error Classification Utilities
# =============================================================================

# Exception type names (anywhere in the MRO) mapped to categories.
# Matching by name keeps core free of hard imports on yaml/jinja2/pydantic.
TYPE_NAME_CATEGORIES = (
    (("yamlerror", "tomldecodeerror"), ErrorCategory.PARSE),
    (("templateerror", "undefinederror", "templatenotfound"), ErrorCategory.RENDER),
    (("validationerror",), ErrorCategory.VALIDATION),
)

CATEGORY_CLASSES = {
    ErrorCategory.CONFIG: ConfigError,
    ErrorCategory.PARSE: SchemaParseError,
    ErrorCategory.RESOLUTION: SchemaResolutionError,
    ErrorCategory.RENDER: RenderError,
    ErrorCategory.IO: OutputError,
}


def classify_exception(exc: Exception) -> ErrorCategory:
    """Classify an exception into error category."""
    # Already classified
    if isinstance(exc, SchemadocError):
        return exc.category

    mro_names = {klass.__name__.lower() for klass in type(exc).__mro__}
    for markers, category in TYPE_NAME_CATEGORIES:
        if mro_names.intersection(markers):
            return category

    if isinstance(exc, OSError):
        return ErrorCategory.IO

    return ErrorCategory.UNKNOWN


def wrap_exception(
    exc: Exception,
    message: str | None = None,
    default_class: type = SchemadocError,
    context: dict | None = None,
) -> SchemadocError:
    """Wrap a generic exception in the SchemadocError subclass for its category."""
    if isinstance(exc, SchemadocError):
        if context:
            exc.context.update(context)
        return exc

    category = classify_exception(exc)
    context = context or {}
    context["error_type"] = type(exc).__name__
    message = message or str(exc)

    if category == ErrorCategory.VALIDATION:
        return SchemaValidationError([str(exc)], message=message, cause=exc, context=context)

    error_class = CATEGORY_CLASSES.get(category, default_class)
    return error_class(message, cause=exc, context=context)
