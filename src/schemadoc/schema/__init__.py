"""
Schema loading, fragment resolution and validation.

Pipeline: load_schema_dir -> resolve_document -> build_schema -> ensure_valid
"""

from schemadoc.schema.loader import load_schema_dir, load_schema_file
from schemadoc.schema.models import (
    Commit,
    Component,
    Fragment,
    Guide,
    Option,
    OutputExample,
    Release,
    Resource,
    Schema,
    build_schema,
)
from schemadoc.schema.resolver import resolve_document
from schemadoc.schema.validator import ensure_valid, validate_schema

__all__ = [
    # Loading
    "load_schema_file",
    "load_schema_dir",
    # Resolution
    "resolve_document",
    # Models
    "Schema",
    "Option",
    "Fragment",
    "Component",
    "Resource",
    "OutputExample",
    "Release",
    "Commit",
    "Guide",
    "build_schema",
    # Validation
    "validate_schema",
    "ensure_valid",
]
