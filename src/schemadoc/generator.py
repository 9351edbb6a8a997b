"""
Build orchestration.

A build runs load -> resolve -> validate -> render and yields every output
document in memory keyed by its path relative to the output directory.
Writing and staleness checks work on that mapping, so `generate` and `check`
always agree on what the output should be.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from config import DocsConfig
from core.errors import OutputError
from core.logging import (
    StageLogContext,
    generate_build_id,
    log_phase,
    log_with_context,
    set_log_context,
)
from schemadoc.render.changelog import ChangelogRenderer
from schemadoc.render.environment import RenderSettings, create_environment
from schemadoc.render.markdown import MarkdownRenderer
from schemadoc.render.metadata import render_metadata
from schemadoc.schema.loader import load_schema_dir
from schemadoc.schema.models import Schema, build_schema
from schemadoc.schema.resolver import resolve_document
from schemadoc.schema.types import KINDS, SECTION_BY_KIND
from schemadoc.schema.validator import ensure_valid

logger = logging.getLogger(__name__)

REFERENCE_DIR = "reference"
RELEASES_DIR = "releases"
CHANGELOG_FILE = "CHANGELOG.md"
GLOBAL_PAGE = f"{REFERENCE_DIR}/configuration.md"


@dataclass
class BuildResult:
    """Everything one build produced, before anything is written."""

    schema: Schema
    documents: dict[str, str]
    build_id: str
    metadata_file: str = "metadata.json"

    @property
    def document_count(self) -> int:
        return len(self.documents)


@dataclass
class WriteReport:
    """Relative paths grouped by what writing did to them."""

    written: list[str] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.written or self.removed)


def component_page_path(kinds: str, name: str) -> str:
    return f"{REFERENCE_DIR}/{kinds}/{name}.md"


def release_page_path(version: str) -> str:
    return f"{RELEASES_DIR}/{version}.md"


def load_and_validate(schema_dir: Path, build_id: str | None = None) -> Schema:
    """
    Load, resolve and validate the schema in a directory.

    Raises:
        SchemaParseError, SchemaResolutionError, SchemaValidationError
    """
    with StageLogContext(logger, "load", build_id=build_id) as ctx:
        raw = load_schema_dir(schema_dir)
        ctx.set_result(schema_dir=str(schema_dir), fragment_count=len(raw["fragments"]))

    with StageLogContext(logger, "resolve", build_id=build_id, level=logging.DEBUG) as ctx:
        resolved = resolve_document(raw)
        ctx.set_result(
            component_count=sum(len(resolved[SECTION_BY_KIND[k]]) for k in KINDS),
        )

    with StageLogContext(logger, "validate", build_id=build_id) as ctx:
        schema = ensure_valid(build_schema(resolved))
        ctx.set_result(
            component_count=len(schema.components()),
            option_count=len(schema.options),
            release_count=len(schema.releases),
        )
    return schema


def render_documents(
    schema: Schema,
    settings: RenderSettings,
    metadata_file: str = "metadata.json",
    build_id: str | None = None,
) -> dict[str, str]:
    """Render every output document, keyed by relative path."""
    documents: dict[str, str] = {}
    with StageLogContext(logger, "render", build_id=build_id) as ctx:
        env = create_environment(settings.templates_dir)
        pages = MarkdownRenderer(settings, env)
        notes = ChangelogRenderer(settings, env)

        with log_phase(logger, "render_reference"):
            documents[GLOBAL_PAGE] = pages.render_global(schema)
            for kind in KINDS:
                kinds = SECTION_BY_KIND[kind]
                documents[f"{REFERENCE_DIR}/{kinds}/README.md"] = pages.render_kind_index(schema, kind)
                for component in schema.components(kind):
                    documents[component_page_path(kinds, component.name)] = pages.render_component(
                        schema, component
                    )

        with log_phase(logger, "render_releases"):
            for release in schema.sorted_releases():
                documents[release_page_path(release.version)] = notes.render_release(release)
            documents[CHANGELOG_FILE] = notes.render_changelog(schema)

        documents[metadata_file] = render_metadata(schema, settings)
        ctx.set_result(document_count=len(documents))
    return dict(sorted(documents.items()))


def build(config: DocsConfig, build_id: str | None = None) -> BuildResult:
    """
    Run a complete build in memory.

    Args:
        config: Generator settings
        build_id: Identifier attached to every log record (generated if omitted)

    Returns:
        BuildResult with the validated schema and rendered documents
    """
    build_id = build_id or generate_build_id()
    set_log_context(build_id=build_id)
    log_with_context(
        logger,
        logging.DEBUG,
        "Starting build",
        schema_dir=str(config.schema_dir),
        output_dir=str(config.output_dir),
    )

    schema = load_and_validate(config.schema_dir, build_id)
    settings = RenderSettings.from_config(config)
    documents = render_documents(schema, settings, config.metadata_file, build_id)
    return BuildResult(
        schema=schema,
        documents=documents,
        build_id=build_id,
        metadata_file=config.metadata_file,
    )


def is_managed_path(relative: str, metadata_file: str) -> bool:
    """Whether a file under the output directory belongs to the generator."""
    if relative in (CHANGELOG_FILE, metadata_file):
        return True
    top = relative.split("/", 1)[0]
    return top in (REFERENCE_DIR, RELEASES_DIR) and relative.endswith(".md")


def _existing_managed_files(output_dir: Path, metadata_file: str) -> set[str]:
    if not output_dir.is_dir():
        return set()
    found = set()
    for path in output_dir.rglob("*"):
        if path.is_file():
            relative = path.relative_to(output_dir).as_posix()
            if is_managed_path(relative, metadata_file):
                found.add(relative)
    return found


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as e:
        raise OutputError(f"Cannot read {path}", cause=e, context={"path": str(path)}) from e


def write_outputs(
    result: BuildResult,
    output_dir: Path,
    prune: bool = False,
    dry_run: bool = False,
) -> WriteReport:
    """
    Write documents whose content changed.

    Args:
        result: Build to write
        output_dir: Documentation root
        prune: Remove managed files that the build no longer produces
        dry_run: Report what would change without touching the filesystem

    Raises:
        OutputError: A file could not be read, written or removed
    """
    output_dir = Path(output_dir)
    report = WriteReport()

    with StageLogContext(logger, "write", build_id=result.build_id) as ctx:
        for relative, text in result.documents.items():
            path = output_dir / relative
            if _read_text(path) == text:
                report.unchanged.append(relative)
                continue
            report.written.append(relative)
            if dry_run:
                continue
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(text, encoding="utf-8")
            except OSError as e:
                raise OutputError(f"Cannot write {path}", cause=e, context={"path": str(path)}) from e
            log_with_context(logger, logging.DEBUG, "Wrote document", document=relative)

        if prune:
            orphans = _existing_managed_files(output_dir, result.metadata_file) - set(result.documents)
            for relative in sorted(orphans):
                report.removed.append(relative)
                if dry_run:
                    continue
                try:
                    (output_dir / relative).unlink()
                except OSError as e:
                    raise OutputError(
                        f"Cannot remove {output_dir / relative}", cause=e, context={"path": relative}
                    ) from e
                log_with_context(logger, logging.DEBUG, "Removed orphaned document", document=relative)

        ctx.set_result(
            output_dir=str(output_dir),
            files_written=len(report.written),
            files_unchanged=len(report.unchanged),
            files_removed=len(report.removed),
        )
    return report


def check_outputs(result: BuildResult, output_dir: Path) -> list[str]:
    """
    Compare the build with what is on disk.

    Returns:
        One `stale: path`, `missing: path` or `orphaned: path` entry per
        difference, sorted by path; empty when the output is up to date
    """
    output_dir = Path(output_dir)
    problems: list[tuple[str, str]] = []

    with StageLogContext(logger, "check", build_id=result.build_id) as ctx:
        for relative, text in result.documents.items():
            existing = _read_text(output_dir / relative)
            if existing is None:
                problems.append((relative, "missing"))
            elif existing != text:
                problems.append((relative, "stale"))

        orphans = _existing_managed_files(output_dir, result.metadata_file) - set(result.documents)
        problems.extend((relative, "orphaned") for relative in orphans)
        ctx.set_result(output_dir=str(output_dir), stale_count=len(problems))

    return [f"{status}: {relative}" for relative, status in sorted(problems)]
