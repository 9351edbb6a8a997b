"""
Release notes.

Each release gets its own page (`releases/<version>.md`) and all releases are
collected newest first in `CHANGELOG.md`. Commits are filtered to the
configured commit types, grouped by type in canonical order and sorted by
scope within a group; breaking changes are listed first in their own section.
"""

from jinja2 import Environment

from schemadoc.render.environment import RenderSettings, create_environment, render_template
from schemadoc.schema.models import Commit, Release, Schema
from schemadoc.schema.types import COMMIT_TYPES


def group_commits(commits: list[Commit], commit_types: tuple[str, ...] | list[str]) -> list[tuple[str, list[Commit]]]:
    """
    Group commits by type.

    Args:
        commits: Commits of one release
        commit_types: Types to keep; others are dropped

    Returns:
        (type, commits) pairs in COMMIT_TYPES order, commits sorted by
        scope then description; empty groups are omitted
    """
    groups = []
    for commit_type in COMMIT_TYPES:
        if commit_type not in commit_types:
            continue
        members = [c for c in commits if c.type == commit_type]
        if members:
            members.sort(key=lambda c: (c.scope or "", c.description))
            groups.append((commit_type, members))
    return groups


def breaking_changes(commits: list[Commit]) -> list[Commit]:
    """Breaking commits regardless of type filter, sorted like the groups."""
    return sorted(
        (c for c in commits if c.breaking_change),
        key=lambda c: (c.scope or "", c.description),
    )


class ChangelogRenderer:
    """Renders release pages and the changelog from the schema's releases."""

    def __init__(self, settings: RenderSettings | None = None, env: Environment | None = None):
        self.settings = settings or RenderSettings()
        self.env = env or create_environment(self.settings.templates_dir)

    def _release_context(self, release: Release) -> dict:
        return {
            "release": release,
            "groups": group_commits(release.commits, self.settings.commit_types),
            "breaking": breaking_changes(release.commits),
        }

    def render_release(self, release: Release) -> str:
        return render_template(
            self.env,
            "release.md.j2",
            **self.settings.page_context(),
            **self._release_context(release),
        )

    def render_changelog(self, schema: Schema) -> str:
        releases = [self._release_context(r) for r in schema.sorted_releases()]
        return render_template(
            self.env,
            "changelog.md.j2",
            **self.settings.page_context(),
            releases=releases,
        )


def render_release(release: Release, settings: RenderSettings | None = None) -> str:
    return ChangelogRenderer(settings).render_release(release)


def render_changelog(schema: Schema, settings: RenderSettings | None = None) -> str:
    return ChangelogRenderer(settings).render_changelog(schema)
