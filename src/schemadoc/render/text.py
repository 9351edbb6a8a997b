"""Text helpers shared by templates and table writers."""

import re
from typing import Any, Iterable

from schemadoc.render.links import remove_markdown_links

COMMIT_TYPE_NAMES = {
    "chore": "chore",
    "docs": "documentation change",
    "enhancement": "enhancement",
    "feat": "new feature",
    "fix": "bug fix",
    "perf": "performance improvement",
}

_WHITESPACE = re.compile(r"\s+")
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def oneline(text: str | None) -> str:
    """Collapse all whitespace runs (newlines included) to single spaces."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def first_paragraph(text: str | None) -> str:
    if not text:
        return ""
    return _PARAGRAPH_BREAK.split(text.strip(), maxsplit=1)[0]


def md_table_cell(text: str | None) -> str:
    """First paragraph of Markdown text, made safe for a table cell."""
    return oneline(first_paragraph(text)).replace("|", "\\|")


def strip_links(text: str | None) -> str:
    return remove_markdown_links(text or "")


def pluralize(word: str, count: int | None = None, include_count: bool = False) -> str:
    """
    Plural form of an English noun (simple suffix rules).

    Examples:
        >>> pluralize("bug fix", 2, include_count=True)
        '2 bug fixes'
        >>> pluralize("new feature", 1, include_count=True)
        '1 new feature'
    """
    if count == 1:
        plural = word
    elif word.endswith("y") and word[-2:-1] not in ("a", "e", "i", "o", "u"):
        plural = word[:-1] + "ies"
    elif word.endswith(("s", "x", "ch", "sh")):
        plural = word + "es"
    else:
        plural = word + "s"
    return f"{count} {plural}" if include_count else plural


def to_sentence(items: Iterable[Any], connector: str = "and") -> str:
    """Join items as an English list: `a`, `a and b`, `a, b, and c`."""
    words = [str(item) for item in items]
    if not words:
        return ""
    if len(words) == 1:
        return words[0]
    if len(words) == 2:
        return f"{words[0]} {connector} {words[1]}"
    return f"{', '.join(words[:-1])}, {connector} {words[-1]}"


def commit_type_name(commit_type: str) -> str:
    return COMMIT_TYPE_NAMES.get(commit_type, commit_type)


def anchor(text: str) -> str:
    """Heading anchor in the style of common Markdown renderers."""
    slug = re.sub(r"[^\w\- ]", "", text.lower()).strip()
    return re.sub(r"[\s]+", "-", slug)
