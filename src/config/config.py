"""schemadoc generator configuration from YAML file.

Loads from schemadoc.yaml with all settings in one place:
- Schema source directory and output directory
- Template overrides
- Project naming and repository links used in generated pages
- Release-notes settings

Environment variables ARE supported using ${VAR_NAME} syntax in YAML files.
"""

import logging
import os
import re
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import yaml

from core.errors import ConfigError
from schemadoc.schema import types as schema_types

# Configure module logger
logger = logging.getLogger(__name__)

# Default config file: schemadoc.yaml in the working directory
DEFAULT_CONFIG_FILE = Path("schemadoc.yaml")

KNOWN_COMMIT_TYPES = list(schema_types.COMMIT_TYPES)
DEFAULT_COMMIT_TYPES = list(schema_types.DEFAULT_COMMIT_TYPES)

SOURCE_URL_PLACEHOLDERS = {"repo_url", "kind", "kinds", "name"}


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML file and return dict."""
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR_NAME} and ${VAR_NAME:-default} environment variables in config data."""
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        # Support both ${VAR} and ${VAR:-default} syntax
        pattern = r"\$\{([^}:]+)(?::-(([^}]*))?)?\}"

        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else match.group(0)
            return os.getenv(var_name, default_value)

        return re.sub(pattern, replacer, data)
    else:
        return data


def _deep_merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge overlay into base dict."""
    result = base.copy()
    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def get_config_value(env_var: str, yaml_value: Any, default: Any = "") -> Any:
    """Resolve a setting with priority: environment variable > YAML value > default."""
    return os.getenv(env_var) or yaml_value or default


@dataclass
class DocsConfig:
    """schemadoc generator configuration.

    Configuration structure:
        schemadoc:
          schema_dir: schema              # Schema source files (TOML/YAML)
          output_dir: docs                # Generated documentation root
          templates_dir: templates        # Optional template overrides
          project_name: Vector
          config_binary: vector           # Binary name used in prose
          repo_url: https://github.com/timberio/vector
          issues_url: ...                 # Defaults to {repo_url}/issues
          source_url_template: "{repo_url}/tree/master/src/{kinds}/{name}.rs"
          metadata_file: metadata.json
          prune: false                    # Remove generated files no longer produced
          log_dir: null                   # Write dated JSON log files here
          changelog:
            commit_types: [enhancement, feat, fix, perf]

    Relative paths are resolved against the directory holding the config file.
    """

    # =========================================================================
    # PATHS
    # =========================================================================
    schema_dir: Path = field(default_factory=lambda: Path("schema"))
    output_dir: Path = field(default_factory=lambda: Path("docs"))
    templates_dir: Optional[Path] = None
    log_dir: Optional[Path] = None

    # =========================================================================
    # PROJECT / LINKS
    # =========================================================================
    project_name: str = "Vector"
    config_binary: str = "vector"
    repo_url: str = "https://github.com/timberio/vector"
    issues_url: str = ""
    source_url_template: str = "{repo_url}/tree/master/src/{kinds}/{name}.rs"

    # =========================================================================
    # OUTPUT
    # =========================================================================
    metadata_file: str = "metadata.json"
    prune: bool = False
    commit_types: List[str] = field(default_factory=lambda: list(DEFAULT_COMMIT_TYPES))

    def __post_init__(self) -> None:
        if not self.issues_url:
            self.issues_url = f"{self.repo_url.rstrip('/')}/issues"

    def validate(self) -> None:
        """Validate configuration for correctness.

        Checks URLs, template placeholders, commit types, and output file names.
        """
        errors: List[str] = []

        for key in ("repo_url", "issues_url"):
            value = getattr(self, key)
            parsed = urlparse(value)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                errors.append(f"{key} must be an http(s) URL, got '{value}'")

        placeholders = set(re.findall(r"\{([^}]*)\}", self.source_url_template))
        unknown = placeholders - SOURCE_URL_PLACEHOLDERS
        if unknown:
            errors.append(
                f"source_url_template has unknown placeholders {sorted(unknown)}; "
                f"allowed: {sorted(SOURCE_URL_PLACEHOLDERS)}"
            )

        unknown_types = [t for t in self.commit_types if t not in KNOWN_COMMIT_TYPES]
        if unknown_types:
            errors.append(
                f"changelog.commit_types must be drawn from {KNOWN_COMMIT_TYPES}, "
                f"got {unknown_types}"
            )

        if not self.metadata_file.endswith(".json") or "/" in self.metadata_file:
            errors.append(f"metadata_file must be a bare .json file name, got '{self.metadata_file}'")

        if not self.project_name.strip():
            errors.append("project_name must not be empty")

        if errors:
            raise ConfigError(
                "Invalid schemadoc configuration:\n" + "\n".join(f"  - {e}" for e in errors),
                context={"error_count": len(errors)},
            )

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view of the configuration (paths as strings)."""
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, Path):
                data[key] = value.as_posix()
        return data


def _resolve_path(value: Any, base_dir: Path) -> Optional[Path]:
    if value in (None, ""):
        return None
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return path


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
    required: bool = False,
) -> DocsConfig:
    """Load generator configuration from a schemadoc.yaml file.

    When no file exists at the (default) location, defaults are used unless
    ``required`` is set, which is how the CLI treats an explicit --config.

    Environment variables ARE supported using ${VAR_NAME} syntax in YAML files.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_FILE

    if config_path.exists():
        logger.debug(f"Loading configuration from file: {config_path}")
        try:
            yaml_data = load_yaml(config_path)
        except yaml.YAMLError as e:
            raise ConfigError(f"Configuration file is not valid YAML: {config_path}", cause=e) from e
        yaml_data = _expand_env_vars(yaml_data)
        if not isinstance(yaml_data, dict) or "schemadoc" not in yaml_data:
            raise ConfigError(
                f"Invalid config file {config_path}: missing 'schemadoc:' section"
            )
        settings = yaml_data["schemadoc"] or {}
        if not isinstance(settings, dict):
            raise ConfigError(f"Invalid config file {config_path}: 'schemadoc:' must be a mapping")
    elif required:
        raise ConfigError(f"Configuration file not found: {config_path}")
    else:
        logger.debug(f"No configuration file at {config_path}, using defaults")
        settings = {}

    if overrides:
        logger.debug(f"Applying overrides: {list(overrides.keys())}")
        settings = _deep_merge(settings, overrides)

    base_dir = config_path.parent
    changelog = settings.get("changelog") or {}
    if not isinstance(changelog, dict):
        raise ConfigError(f"Invalid config file {config_path}: 'changelog' must be a mapping")
    commit_types = changelog.get("commit_types", DEFAULT_COMMIT_TYPES)
    if not isinstance(commit_types, (list, tuple)):
        raise ConfigError(f"changelog.commit_types must be a list, got {commit_types!r}")
    prune = settings.get("prune", False)
    if not isinstance(prune, bool):
        raise ConfigError(f"prune must be true or false, got {prune!r}")

    defaults = DocsConfig()
    try:
        config = DocsConfig(
            schema_dir=_resolve_path(
                get_config_value("SCHEMADOC_SCHEMA_DIR", settings.get("schema_dir"), "schema"),
                base_dir,
            ),
            output_dir=_resolve_path(
                get_config_value("SCHEMADOC_OUTPUT_DIR", settings.get("output_dir"), "docs"),
                base_dir,
            ),
            templates_dir=_resolve_path(
                get_config_value("SCHEMADOC_TEMPLATES_DIR", settings.get("templates_dir"), None),
                base_dir,
            ),
            log_dir=_resolve_path(settings.get("log_dir"), base_dir),
            project_name=str(settings.get("project_name", defaults.project_name)),
            config_binary=str(settings.get("config_binary", defaults.config_binary)),
            repo_url=str(settings.get("repo_url", defaults.repo_url)),
            issues_url=str(settings.get("issues_url", "")),
            source_url_template=str(
                settings.get("source_url_template", defaults.source_url_template)
            ),
            metadata_file=str(settings.get("metadata_file", defaults.metadata_file)),
            prune=prune,
            commit_types=list(commit_types),
        )
    except TypeError as e:
        raise ConfigError(f"Invalid value in configuration: {e}", cause=e) from e

    logger.debug("Configuration loaded successfully:")
    logger.debug(f"  - Schema dir: {config.schema_dir}")
    logger.debug(f"  - Output dir: {config.output_dir}")
    logger.debug(f"  - Templates dir: {config.templates_dir}")

    config.validate()
    logger.debug("Configuration validation passed")

    return config


_docs_config: Optional[DocsConfig] = None


def get_config() -> DocsConfig:
    """Get or load the singleton generator config instance."""
    global _docs_config
    if _docs_config is None:
        _docs_config = load_config()
    return _docs_config


def set_config(config: DocsConfig) -> None:
    """Set the singleton config instance (useful for testing)."""
    global _docs_config
    _docs_config = config


def reset_config() -> None:
    """Reset the singleton config instance (forces reload on next get_config() call)."""
    global _docs_config
    _docs_config = None
