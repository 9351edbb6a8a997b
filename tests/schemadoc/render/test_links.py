"""Tests for issue and source links."""

import pytest

from schemadoc.render.links import Links, remove_markdown_links
from schemadoc.schema.models import Component


@pytest.fixture
def links():
    return Links("https://github.com/timberio/vector/")


@pytest.fixture
def kafka():
    return Component(name="kafka", kind="sink", description="Kafka")


class TestRemoveMarkdownLinks:
    def test_inline_links(self):
        assert remove_markdown_links("See [Kafka](https://kafka.apache.org) docs") == "See Kafka docs"

    def test_reference_links(self):
        assert remove_markdown_links("To [Apache Kafka][urls.kafka] and [TOML][]") == "To Apache Kafka and TOML"

    def test_plain_text_unchanged(self):
        assert remove_markdown_links("No [brackets here") == "No [brackets here"


class TestLinks:
    def test_trailing_slash_removed(self, links):
        assert links.repo_url == "https://github.com/timberio/vector"
        assert links.issues_url == "https://github.com/timberio/vector/issues"

    def test_custom_issues_url(self):
        links = Links("https://github.com/acme/widget", "https://tracker.example.com/widget/")
        assert links.issues_url == "https://tracker.example.com/widget"

    def test_component_label(self, kafka):
        assert Links.component_label(kafka) == "Sink: kafka"

    def test_component_issues_url(self, links, kafka):
        assert links.component_issues_url(kafka) == (
            "https://github.com/timberio/vector/issues?q=is%3Aopen+is%3Aissue+label%3A%22Sink%3A+kafka%22"
        )

    def test_component_bugs_url(self, links, kafka):
        assert links.component_bugs_url(kafka).endswith("label%3A%22Sink%3A+kafka%22+label%3A%22Type%3A+Bug%22")

    def test_component_enhancements_url(self, links, kafka):
        assert links.component_enhancements_url(kafka).endswith("label%3A%22Type%3A+Enhancement%22")

    def test_new_component_issue_url(self, links, kafka):
        assert links.new_component_issue_url(kafka) == (
            "https://github.com/timberio/vector/issues/new?labels=Sink%3A+kafka"
        )

    def test_new_issue_url_joins_labels(self, links):
        assert links.new_issue_url("Sink: kafka", "Type: Bug").endswith("labels=Sink%3A+kafka%2CType%3A+Bug")

    def test_component_source_url(self, links, kafka):
        assert links.component_source_url(kafka) == "https://github.com/timberio/vector/tree/master/src/sinks/kafka.rs"

    def test_custom_source_url_template(self, kafka):
        links = Links("https://example.com/repo", source_url_template="{repo_url}/blob/main/{kind}/{name}/mod.rs")
        assert links.component_source_url(kafka) == "https://example.com/repo/blob/main/sink/kafka/mod.rs"

    def test_pull_request_and_commit_urls(self, links):
        assert links.pull_request_url(901) == "https://github.com/timberio/vector/pull/901"
        assert links.commit_url("a1b2c3") == "https://github.com/timberio/vector/commit/a1b2c3"
