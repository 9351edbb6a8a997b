"""
Core types used across modules.

This module provides the base enums shared across the core library and the
schemadoc package so error handling stays consistent between stages.
"""

from enum import Enum


class ErrorCategory(Enum):
    """
    Classification of build failures.

    Every stage of a documentation build fails in its own way, and the CLI
    maps each category to a distinct exit code so CI jobs can tell a broken
    schema from a broken template.

    Categories:
        CONFIG: Generator settings are missing or invalid
        PARSE: A schema file could not be decoded
        RESOLUTION: Fragment inclusion failed (unknown fragment, cycle)
        VALIDATION: The resolved schema violates a structural or semantic rule
        RENDER: A template failed to render
        IO: Reading or writing generated output failed
        UNKNOWN: Unclassified errors
    """

    CONFIG = "config"
    PARSE = "parse"
    RESOLUTION = "resolution"
    VALIDATION = "validation"
    RENDER = "render"
    IO = "io"
    UNKNOWN = "unknown"


# Process exit codes per category
EXIT_CODES = {
    ErrorCategory.CONFIG: 2,
    ErrorCategory.PARSE: 3,
    ErrorCategory.RESOLUTION: 3,
    ErrorCategory.VALIDATION: 3,
    ErrorCategory.RENDER: 4,
    ErrorCategory.IO: 4,
    ErrorCategory.UNKNOWN: 4,
}


__all__ = [
    "ErrorCategory",
    "EXIT_CODES",
]
