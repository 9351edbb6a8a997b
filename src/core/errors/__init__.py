"""
Error classification and exception hierarchy.

Provides:
- ErrorCategory enum for classifying build failures
- SchemadocError hierarchy for typed exceptions
- Classification utilities for wrapping third-party errors
"""

from core.errors.exceptions import (
    ConfigError,
    # Enums
    ErrorCategory,
    OutputError,
    RenderError,
    # Schema errors
    SchemaParseError,
    SchemaResolutionError,
    SchemaValidationError,
    # Base classes
    SchemadocError,
    # Classification utilities
    classify_exception,
    wrap_exception,
)

__all__ = [
    # Enums
    "ErrorCategory",
    # Base classes
    "SchemadocError",
    "ConfigError",
    # Schema errors
    "SchemaParseError",
    "SchemaResolutionError",
    "SchemaValidationError",
    # Output errors
    "RenderError",
    "OutputError",
    # Classification utilities
    "classify_exception",
    "wrap_exception",
]
