"""Render article source (Markdown plus component tags) to HTML.

Markdown is handled by markdown-it-py with tables and strikethrough enabled.
Component tags are split out first so their bodies can be rendered as
Markdown of their own; fenced code and inline code spans are masked while
scanning so tags shown as examples in code are left alone.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

import yaml
from markdown_it import MarkdownIt
from markupsafe import escape

from .components import (
    ComponentNode,
    RenderContext,
    parse_line_ranges,
    render_code,
    render_diagram_source,
    resolve_component,
)
from .errors import ComponentError
from .toc import slugify_heading, strip_markdown_links

if TYPE_CHECKING:
    from taxonomy import TaxonomyIndex

logger = logging.getLogger(__name__)

_TAG_START_RE = re.compile(r"<(/?)([A-Z][A-Za-z0-9]*)")
_ATTR_NAME_RE = re.compile(r"[A-Za-z_:][\w:.-]*")
_FENCE_RE = re.compile(r"^\s{0,3}(`{3,}|~{3,})")
_INLINE_CODE_RE = re.compile(r"`[^`\n]+`")
_MASK_RE = re.compile(r"\x00(\d+)\x00")
_QUOTES = "\"'`"


# =============================================================================
# Markdown
# =============================================================================


def _parse_fence_info(info: str) -> dict[str, Any]:
    """Split a fence info string such as `python filename=app.py {1,3-5} showLineNumbers`."""
    parts = info.split()
    meta: dict[str, Any] = {"language": parts[0] if parts else ""}
    for part in parts[1:]:
        if part.startswith("{") and part.endswith("}"):
            meta["highlight_lines"] = parse_line_ranges(part)
        elif part == "showLineNumbers":
            meta["show_line_numbers"] = True
        elif "=" in part:
            key, _, value = part.partition("=")
            if key in ("filename", "title"):
                meta["filename"] = value.strip(_QUOTES)
    return meta


def _render_fence(self, tokens, idx, options, env) -> str:
    token = tokens[idx]
    meta = _parse_fence_info(token.info.strip())
    if meta["language"] == "mermaid":
        return render_diagram_source(token.content)
    return render_code(
        token.content,
        language=meta["language"],
        filename=meta.get("filename"),
        show_line_numbers=meta.get("show_line_numbers", False),
        highlight_lines=meta.get("highlight_lines"),
    )


def _heading_id(tokens, idx) -> str:
    return slugify_heading(strip_markdown_links(tokens[idx + 1].content))


def _render_heading_open(self, tokens, idx, options, env) -> str:
    tokens[idx].attrSet("id", _heading_id(tokens, idx))
    return self.renderToken(tokens, idx, options, env)


def _render_heading_close(self, tokens, idx, options, env) -> str:
    # heading_open, inline, heading_close: the id sits two tokens back.
    # The anchor follows the heading text, so links inside it never nest
    heading_id = escape(tokens[idx - 2].attrGet("id") or "")
    return (
        f'<a class="anchor-link" href="#{heading_id}" aria-label="Link to this section">#</a>'
        + self.renderToken(tokens, idx, options, env)
    )


def build_markdown() -> MarkdownIt:
    """Create the Markdown parser used for article bodies."""
    md = MarkdownIt("commonmark", {"html": True}).enable(["table", "strikethrough"])
    md.add_render_rule("fence", _render_fence)
    md.add_render_rule("heading_open", _render_heading_open)
    md.add_render_rule("heading_close", _render_heading_close)
    return md


# =============================================================================
# Component tags
# =============================================================================


class _Masker:
    """Hide code from the tag scanner and restore it afterwards."""

    def __init__(self) -> None:
        self._saved: list[str] = []

    def _save(self, text: str) -> str:
        self._saved.append(text)
        return f"\x00{len(self._saved) - 1}\x00"

    def mask(self, text: str) -> str:
        out: list[str] = []
        block: list[str] = []
        fence: str | None = None

        for line in text.splitlines(keepends=True):
            match = _FENCE_RE.match(line)
            if fence is None:
                if match:
                    fence = match.group(1)
                    block = [line]
                else:
                    out.append(_INLINE_CODE_RE.sub(lambda m: self._save(m.group(0)), line))
                continue

            block.append(line)
            if match and match.group(1)[0] == fence[0] and len(match.group(1)) >= len(fence):
                out.append(self._save("".join(block)))
                fence = None

        if fence is not None:
            # Unterminated fence runs to the end of the document
            out.append(self._save("".join(block)))
        return "".join(out)

    def unmask(self, text: str) -> str:
        return _MASK_RE.sub(lambda m: self._saved[int(m.group(1))], text)


def _parse_expression(source: str) -> Any:
    """Evaluate a `{...}` attribute value: YAML flow syntax, or the raw text."""
    source = source.strip()
    if len(source) >= 2 and source[0] == source[-1] == "`":
        return source[1:-1]
    try:
        return yaml.safe_load(source)
    except yaml.YAMLError:
        return source


def _read_quoted(text: str, pos: int) -> tuple[str, int]:
    quote = text[pos]
    end = text.find(quote, pos + 1)
    if end == -1:
        raise ComponentError("Unterminated attribute value")
    return text[pos + 1:end], end + 1


def _read_braced(text: str, pos: int) -> tuple[str, int]:
    depth = 0
    i = pos
    while i < len(text):
        char = text[i]
        if char in _QUOTES:
            _, i = _read_quoted(text, i)
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[pos + 1:i], i + 1
        i += 1
    raise ComponentError("Unbalanced braces in attribute value")


def _read_tag(
    text: str, start: int, masker: _Masker
) -> tuple[bool, str, dict[str, Any], bool, int] | None:
    """Parse the tag at `start`.

    Returns:
        (closing, name, attrs, self_closing, end) or None when the text at
        `start` is not a well-formed tag.
    """
    match = _TAG_START_RE.match(text, start)
    if match is None:
        return None
    closing, name = bool(match.group(1)), match.group(2)
    pos = match.end()
    attrs: dict[str, Any] = {}

    while pos < len(text):
        while pos < len(text) and text[pos].isspace():
            pos += 1
        if text.startswith("/>", pos):
            return closing, name, attrs, True, pos + 2
        if text.startswith(">", pos):
            return closing, name, attrs, False, pos + 1
        if closing:
            return None

        attr = _ATTR_NAME_RE.match(text, pos)
        if attr is None:
            return None
        pos = attr.end()
        if not text.startswith("=", pos):
            attrs[attr.group(0)] = True
            continue

        pos += 1
        if pos < len(text) and text[pos] in _QUOTES:
            value, pos = _read_quoted(text, pos)
            attrs[attr.group(0)] = masker.unmask(value)
        elif text.startswith("{", pos):
            value, pos = _read_braced(text, pos)
            attrs[attr.group(0)] = _parse_expression(masker.unmask(value))
        else:
            return None

    return None


def parse_components(text: str) -> list[str | ComponentNode]:
    """Split article source into Markdown strings and component nodes.

    Raises:
        UnknownComponentError: For a tag outside the supported set.
        ComponentError: For mismatched or unclosed tags.
    """
    masker = _Masker()
    masked = masker.mask(text)

    root: list[str | ComponentNode] = []
    # (node, children list to fill, body start offset)
    stack: list[tuple[ComponentNode, list[str | ComponentNode], int]] = []
    current = root
    pos = 0
    cursor = 0

    while True:
        match = _TAG_START_RE.search(masked, cursor)
        if match is None:
            break
        tag = _read_tag(masked, match.start(), masker)
        if tag is None:
            cursor = match.end()
            continue

        closing, name, attrs, self_closing, end = tag
        if match.start() > pos:
            current.append(masker.unmask(masked[pos:match.start()]))

        if closing:
            if not stack or stack[-1][0].kind.value != name:
                raise ComponentError(f"Unexpected closing tag </{name}>")
            node, _, body_start = stack.pop()
            node.raw_body = masker.unmask(masked[body_start:match.start()])
            current = stack[-1][1] if stack else root
            current.append(node)
        else:
            node = ComponentNode(kind=resolve_component(name), attrs=attrs)
            if self_closing:
                current.append(node)
            else:
                stack.append((node, node.children, end))
                current = node.children

        pos = cursor = end

    if stack:
        raise ComponentError(f"Unclosed tag <{stack[-1][0].kind.value}>")
    if pos < len(masked):
        current.append(masker.unmask(masked[pos:]))
    return root


# =============================================================================
# Entry points
# =============================================================================


class ArticleRenderer:
    """Renders article bodies; one instance can be shared across requests."""

    def __init__(self, index: TaxonomyIndex | None = None) -> None:
        self._index = index
        self._md = build_markdown()

    def render(self, text: str) -> str:
        context = RenderContext(render_markdown=self._md.render, index=self._index)
        nodes = parse_components(text)
        logger.debug(
            "Rendering article with %d components",
            sum(1 for n in nodes if isinstance(n, ComponentNode)),
        )
        return context.render_nodes(nodes)


def render_markdown(text: str, index: TaxonomyIndex | None = None) -> str:
    """Render article source to HTML."""
    return ArticleRenderer(index).render(text)
