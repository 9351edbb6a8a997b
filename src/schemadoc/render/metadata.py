"""
Machine-readable schema export.

`metadata.json` carries the resolved schema for the website and other
consumers. Output is stable: keys sorted, releases newest first.
"""

import json
from typing import Any

from core.utils import json_serializer
from schemadoc.render.environment import RenderSettings
from schemadoc.schema.models import Component, Schema
from schemadoc.schema.types import SECTION_BY_KIND


def _component_metadata(component: Component, settings: RenderSettings) -> dict[str, Any]:
    data = component.model_dump(mode="json", exclude_none=True)
    data.update(
        id=component.id,
        status=component.status,
        source_url=settings.links.component_source_url(component),
        issues_url=settings.links.component_issues_url(component),
    )
    return data


def build_metadata(schema: Schema, settings: RenderSettings | None = None) -> dict[str, Any]:
    """
    Build the export document.

    Fragments are not exported separately: their options are already part of
    every component that includes them.
    """
    settings = settings or RenderSettings()
    releases = schema.sorted_releases()

    data: dict[str, Any] = {
        "project": {
            "name": settings.project_name,
            "repo_url": settings.links.repo_url,
            "issues_url": settings.links.issues_url,
        },
        "options": {
            name: option.model_dump(mode="json", exclude_none=True)
            for name, option in schema.options.items()
        },
        "releases": [release.model_dump(mode="json", exclude_none=True) for release in releases],
        "latest_version": releases[0].version if releases else None,
        "guides": {
            slug: guide.model_dump(mode="json", exclude_none=True) for slug, guide in schema.guides.items()
        },
    }
    for kind, section in SECTION_BY_KIND.items():
        data[section] = {
            component.name: _component_metadata(component, settings) for component in schema.components(kind)
        }
    return data


def render_metadata(schema: Schema, settings: RenderSettings | None = None) -> str:
    return (
        json.dumps(
            build_metadata(schema, settings),
            indent=2,
            sort_keys=True,
            default=json_serializer,
            ensure_ascii=False,
        )
        + "\n"
    )
