"""Configuration loading for the schemadoc generator.

This module provides centralized configuration loading for documentation
builds. Settings live in a single ``schemadoc.yaml`` file under a top-level
``schemadoc:`` section.

Main Functions
--------------

    - load_config(): Load generator configuration from YAML
    - get_config(): Get or load singleton config instance
    - set_config(): Replace the singleton (tests, embedding)
    - reset_config(): Reset singleton config instance

Usage Examples
--------------

Load configuration:
    >>> from config import load_config
    >>> config = load_config()
    >>> config.schema_dir
    PosixPath('schema')

Custom config path and overrides:
    >>> from pathlib import Path
    >>> config = load_config(
    ...     config_path=Path("website/schemadoc.yaml"),
    ...     overrides={"output_dir": "build/docs"},
    ... )

Configuration Priority
---------------------

Settings are merged in the following priority (highest to lowest):

1. Command-line flags (--schema-dir, --output-dir), applied by the CLI
2. Environment variables (SCHEMADOC_SCHEMA_DIR, SCHEMADOC_OUTPUT_DIR,
   SCHEMADOC_TEMPLATES_DIR)
3. Overrides passed to load_config()
4. YAML configuration file
5. Dataclass defaults
"""

from config.config import (
    DEFAULT_COMMIT_TYPES,
    KNOWN_COMMIT_TYPES,
    DocsConfig,
    get_config,
    load_config,
    reset_config,
    set_config,
)

__all__ = [
    # Core config functions
    "load_config",
    "get_config",
    "set_config",
    "reset_config",
    # Core config classes
    "DocsConfig",
    # Constants
    "KNOWN_COMMIT_TYPES",
    "DEFAULT_COMMIT_TYPES",
]
