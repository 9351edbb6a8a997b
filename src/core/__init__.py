"""
Core library: Reusable, generator-agnostic components.

Modules:
    logging     - Structured JSON/console logging with build context
    errors      - Error classification and exception hierarchy
    utils       - JSON serialization helpers

Design Principles:
    - No dependencies on the schema model or on templates
    - All modules are independently testable
    - Type hints throughout
"""

from .types import ErrorCategory

__version__ = "0.1.0"

__all__ = [
    "ErrorCategory",
]
