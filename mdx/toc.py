"""Table of contents extraction from Markdown headings."""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

# Headings shown in the table of contents
MIN_TOC_LEVEL = 2
MAX_TOC_LEVEL = 4

_HEADING_RE = re.compile(r"^ {0,3}(#{1,6})\s+(.+?)(?:\s+#+)?\s*$")
_FENCE_RE = re.compile(r"^\s{0,3}(`{3,}|~{3,})")
_SETEXT_RE = re.compile(r"^ {0,3}(=+|-+)\s*$")
# Lines that end a paragraph. Thematic breaks are checked before list markers.
_CONTAINER_RE = re.compile(r"^ {0,3}(?:[-*+]\s|\d{1,9}[.)]\s|>)")
_BLOCK_START_RE = re.compile(r"^ {0,3}(?:<|\||(?:[-*_]\s*){3,}$)")
_LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


class TocItem(BaseModel):
    """A heading in the page outline."""

    id: str
    text: str
    level: int
    children: list[TocItem] = Field(default_factory=list)


def strip_markdown_links(text: str) -> str:
    """Replace `[label](url)` with `label`."""
    return _LINK_RE.sub(r"\1", text)


def slugify_heading(text: str) -> str:
    """Anchor id for a heading: lowercase, non-alphanumeric runs become '-'."""
    return _NON_ALNUM_RE.sub("-", text.lower()).strip("-")


def extract_table_of_contents(
    markdown: str,
    min_level: int = MIN_TOC_LEVEL,
    max_level: int = MAX_TOC_LEVEL,
) -> list[TocItem]:
    """Collect headings between `min_level` and `max_level` in document order.

    Both ATX (`## Title`) and setext (`Title` underlined with `===` or `---`)
    headings are collected. Lines inside fenced code blocks are ignored, so
    comments in shell or Python snippets are never mistaken for headings.
    """
    items: list[TocItem] = []
    fence: str | None = None
    # Lines of the paragraph a setext underline would turn into a heading
    paragraph: list[str] = []
    # Inside a list item or block quote until the next blank line
    in_container = False

    def add(level: int, raw_text: str) -> None:
        if min_level <= level <= max_level:
            text = strip_markdown_links(raw_text.strip())
            items.append(TocItem(id=slugify_heading(text), text=text, level=level))

    for line in markdown.splitlines():
        fence_match = _FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker
            elif marker[0] == fence[0] and len(marker) >= len(fence):
                fence = None
            paragraph = []
            continue
        if fence is not None:
            continue

        setext = _SETEXT_RE.match(line)
        if setext and paragraph:
            add(1 if setext.group(1)[0] == "=" else 2, " ".join(paragraph))
            paragraph = []
            continue

        match = _HEADING_RE.match(line)
        if match:
            add(len(match.group(1)), match.group(2))
            paragraph = []
        elif not line.strip():
            paragraph = []
            in_container = False
        elif _BLOCK_START_RE.match(line):
            paragraph = []
            in_container = False
        elif _CONTAINER_RE.match(line):
            paragraph = []
            in_container = True
        elif not in_container and (paragraph or not line.startswith("    ")):
            paragraph.append(line.strip())

    return items


def nest_table_of_contents(items: list[TocItem]) -> list[TocItem]:
    """Nest each heading under the nearest preceding shallower heading."""
    roots: list[TocItem] = []
    stack: list[TocItem] = []

    for item in items:
        node = item.model_copy(update={"children": []})
        while stack and stack[-1].level >= node.level:
            stack.pop()
        if stack:
            stack[-1].children.append(node)
        else:
            roots.append(node)
        stack.append(node)

    return roots
