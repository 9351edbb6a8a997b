"""
Template environment for documentation rendering.

Templates ship with the package (`schemadoc/render/templates`). A project may
point `templates_dir` at its own directory; templates found there take
precedence, so a single page can be customized without copying the rest.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedError,
)

from core.errors import RenderError, SchemadocError
from core.logging import log_with_context
from schemadoc.render.examples import relevance_note, toml_key, toml_value
from schemadoc.render.links import Links
from schemadoc.render.text import (
    anchor,
    commit_type_name,
    first_paragraph,
    md_table_cell,
    oneline,
    pluralize,
    strip_links,
    to_sentence,
)
from schemadoc.schema.types import DEFAULT_COMMIT_TYPES

logger = logging.getLogger(__name__)


@dataclass
class RenderSettings:
    """Project-level values every page needs (names, links, release-note filters)."""

    project_name: str = "Vector"
    config_binary: str = "vector"
    links: Links = field(default_factory=lambda: Links("https://github.com/timberio/vector"))
    commit_types: tuple[str, ...] = DEFAULT_COMMIT_TYPES
    templates_dir: Path | None = None
    schema_source: str = "schema/"

    @classmethod
    def from_config(cls, config) -> "RenderSettings":
        """Build settings from a DocsConfig."""
        return cls(
            project_name=config.project_name,
            config_binary=config.config_binary,
            links=Links(config.repo_url, config.issues_url, config.source_url_template),
            commit_types=tuple(config.commit_types),
            templates_dir=config.templates_dir,
            schema_source=f"{Path(config.schema_dir).name}/",
        )

    def page_context(self) -> dict:
        """Values shared by every page template."""
        return {
            "settings": self,
            "links": self.links,
            "project_name": self.project_name,
            "binary": self.config_binary,
            "schema_source": self.schema_source,
        }


def _yaml_str(value: Any) -> str:
    """Scalar safe for YAML front matter."""
    return yaml.safe_dump(value, default_flow_style=True, width=1000).strip().removesuffix("...").strip()


FILTERS = {
    "anchor": anchor,
    "commit_type_name": commit_type_name,
    "first_paragraph": first_paragraph,
    "md_table_cell": md_table_cell,
    "oneline": oneline,
    "pluralize": pluralize,
    "relevance_note": relevance_note,
    "strip_links": strip_links,
    "to_sentence": to_sentence,
    "toml_key": toml_key,
    "toml_value": toml_value,
    "yaml_str": _yaml_str,
}


def create_environment(templates_dir: Path | None = None) -> Environment:
    """
    Create the jinja2 environment.

    Args:
        templates_dir: Optional directory whose templates override the
            packaged ones

    Raises:
        RenderError: templates_dir is set but is not a directory
    """
    loaders = []
    if templates_dir is not None:
        templates_dir = Path(templates_dir)
        if not templates_dir.is_dir():
            raise RenderError(f"Templates directory does not exist: {templates_dir}")
        loaders.append(FileSystemLoader(str(templates_dir)))
    loaders.append(PackageLoader("schemadoc.render", "templates"))

    env = Environment(
        loader=ChoiceLoader(loaders),
        undefined=StrictUndefined,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters.update(FILTERS)
    return env


def render_template(env: Environment, name: str, **context: Any) -> str:
    """
    Render a named template.

    Raises:
        RenderError: Template missing, invalid, or referencing an undefined
            value; carries the template name
    """
    try:
        template = env.get_template(name)
        text = template.render(**context)
    except TemplateNotFound as e:
        raise RenderError(f"Template not found: {e.name}", template_name=name, cause=e) from e
    except TemplateSyntaxError as e:
        raise RenderError(
            f"Template syntax error at line {e.lineno}: {e.message}",
            template_name=e.name or name,
            cause=e,
            context={"line": e.lineno},
        ) from e
    except UndefinedError as e:
        raise RenderError(f"Undefined value in template: {e.message}", template_name=name, cause=e) from e
    except SchemadocError:
        raise
    except Exception as e:
        raise RenderError(f"Template rendering failed: {e}", template_name=name, cause=e) from e

    log_with_context(logger, logging.DEBUG, "Rendered template", template=name)
    return text
