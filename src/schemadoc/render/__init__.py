"""
Documentation rendering.

Turns a validated Schema into Markdown reference pages, release notes,
example TOML configuration and a JSON metadata export.
"""

from schemadoc.render.changelog import ChangelogRenderer, render_changelog, render_release
from schemadoc.render.environment import RenderSettings, create_environment, render_template
from schemadoc.render.examples import component_example, global_example, render_example, toml_value
from schemadoc.render.links import Links, remove_markdown_links
from schemadoc.render.markdown import MarkdownRenderer, render_component, render_global, render_kind_index
from schemadoc.render.metadata import build_metadata, render_metadata
from schemadoc.render.options_table import render_options_table

__all__ = [
    # Environment
    "RenderSettings",
    "create_environment",
    "render_template",
    # Links
    "Links",
    "remove_markdown_links",
    # Examples
    "render_example",
    "component_example",
    "global_example",
    "toml_value",
    # Pages
    "MarkdownRenderer",
    "render_component",
    "render_global",
    "render_kind_index",
    "render_options_table",
    # Release notes
    "ChangelogRenderer",
    "render_release",
    "render_changelog",
    # Export
    "build_metadata",
    "render_metadata",
]
