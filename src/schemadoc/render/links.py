"""Issue tracker and source code links for generated pages."""

import re
from urllib.parse import urlencode

from schemadoc.schema.models import Component

BUG_LABEL = "Type: Bug"
ENHANCEMENT_LABEL = "Type: Enhancement"

_INLINE_LINK = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_REFERENCE_LINK = re.compile(r"\[([^\]]+)\]\[([^\]]*)\]")


def remove_markdown_links(text: str) -> str:
    """Replace inline and reference-style Markdown links with their text."""
    return _REFERENCE_LINK.sub(r"\1", _INLINE_LINK.sub(r"\1", text))


class Links:
    """
    URL builder for one repository.

    Example:
        >>> links = Links("https://github.com/timberio/vector")
        >>> links.new_issue_url("Sink: kafka")
        'https://github.com/timberio/vector/issues/new?labels=Sink%3A+kafka'
    """

    def __init__(
        self,
        repo_url: str,
        issues_url: str | None = None,
        source_url_template: str = "{repo_url}/tree/master/src/{kinds}/{name}.rs",
    ):
        self.repo_url = repo_url.rstrip("/")
        self.issues_url = (issues_url or f"{self.repo_url}/issues").rstrip("/")
        self.source_url_template = source_url_template

    def label_url(self, *labels: str) -> str:
        """Search for open issues carrying every label."""
        query = " ".join(["is:open is:issue"] + [f'label:"{label}"' for label in labels])
        return f"{self.issues_url}?{urlencode({'q': query})}"

    def new_issue_url(self, *labels: str) -> str:
        return f"{self.issues_url}/new?{urlencode({'labels': ','.join(labels)})}"

    @staticmethod
    def component_label(component: Component) -> str:
        return f"{component.kind.capitalize()}: {component.name}"

    def component_issues_url(self, component: Component, *labels: str) -> str:
        return self.label_url(self.component_label(component), *labels)

    def component_bugs_url(self, component: Component) -> str:
        return self.component_issues_url(component, BUG_LABEL)

    def component_enhancements_url(self, component: Component) -> str:
        return self.component_issues_url(component, ENHANCEMENT_LABEL)

    def new_component_issue_url(self, component: Component, *labels: str) -> str:
        return self.new_issue_url(self.component_label(component), *labels)

    def component_source_url(self, component: Component) -> str:
        return self.source_url_template.format(
            repo_url=self.repo_url,
            kind=component.kind,
            kinds=component.kinds,
            name=component.name,
        )

    def pull_request_url(self, number: int) -> str:
        return f"{self.repo_url}/pull/{number}"

    def commit_url(self, sha: str) -> str:
        return f"{self.repo_url}/commit/{sha}"
