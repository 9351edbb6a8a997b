"""
Reference pages.

One page per component (`reference/<kinds>/<name>.md`), one index per kind
(`reference/<kinds>/README.md`) and the global configuration page
(`reference/configuration.md`).
"""

from jinja2 import Environment

from core.logging import LogContext
from schemadoc.render.environment import RenderSettings, create_environment, render_template
from schemadoc.render.examples import component_example, global_example
from schemadoc.render.options_table import flatten_options, render_options_table
from schemadoc.render.text import to_sentence
from schemadoc.schema.models import Component, Schema
from schemadoc.schema.types import KINDS, SECTION_BY_KIND

KIND_INTROS = {
    "source": "Sources are responsible for ingesting data into {project}.",
    "transform": "Transforms are in the middle of the pipeline, sitting between sources and sinks. They transform events or the stream as a whole.",
    "sink": "Sinks are the last stage of the pipeline. They send events to external destinations.",
}


def component_link(component: Component, from_kind: str | None = None) -> str:
    """Relative link to a component page from another reference page."""
    if from_kind == component.kind:
        return f"{component.name}.md"
    return f"../{component.kinds}/{component.name}.md"


def component_tags(component: Component) -> list[str]:
    tags = [f"status: {component.status}"]
    if component.input_types:
        tags.append("input: " + to_sentence(component.input_types))
    if component.output_types:
        tags.append("output: " + to_sentence(component.output_types))
    if component.delivery_guarantee:
        tags.append(f"guarantee: {component.delivery_guarantee}")
    return tags


class MarkdownRenderer:
    """Renders reference pages with the configured templates."""

    def __init__(self, settings: RenderSettings | None = None, env: Environment | None = None):
        self.settings = settings or RenderSettings()
        self.env = env or create_environment(self.settings.templates_dir)

    def render_component(self, schema: Schema, component: Component) -> str:
        alternatives = [schema.component_by_id(ref) for ref in component.alternatives]
        with LogContext(component=component.id):
            return render_template(
                self.env,
                "component.md.j2",
                component=component,
                tag_line=" ".join(f"`{tag}`" for tag in component_tags(component)),
                common_example=component_example(component),
                advanced_example=component_example(component, advanced=True),
                options_table=render_options_table(component.sorted_options()),
                detail_options=flatten_options(component.sorted_options()),
                guides=schema.guides_for(component),
                alternatives=[(alt, component_link(alt, component.kind)) for alt in alternatives if alt],
                **self.settings.page_context(),
            )

    def render_global(self, schema: Schema) -> str:
        options = schema.sorted_options()
        return render_template(
            self.env,
            "global.md.j2",
            example=global_example(schema, advanced=True),
            options_table=render_options_table(options),
            detail_options=flatten_options(options),
            **self.settings.page_context(),
        )

    def render_kind_index(self, schema: Schema, kind: str) -> str:
        if kind not in KINDS:
            raise ValueError(f"Unknown component kind: {kind}")
        return render_template(
            self.env,
            "kind_index.md.j2",
            kind=kind,
            kinds=SECTION_BY_KIND[kind],
            intro=KIND_INTROS[kind].format(project=self.settings.project_name),
            components=schema.components(kind),
            **self.settings.page_context(),
        )


def render_component(schema: Schema, component: Component, settings: RenderSettings | None = None) -> str:
    return MarkdownRenderer(settings).render_component(schema, component)


def render_global(schema: Schema, settings: RenderSettings | None = None) -> str:
    return MarkdownRenderer(settings).render_global(schema)


def render_kind_index(schema: Schema, kind: str, settings: RenderSettings | None = None) -> str:
    return MarkdownRenderer(settings).render_kind_index(schema, kind)
