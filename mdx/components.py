"""Custom article components and their HTML renderers.

Articles may embed a fixed set of components as JSX-style tags, e.g.

    <Callout type="warning" title="Latency">
    Keep the **first byte** under 300 ms.
    </Callout>

    <MetricsCard name="WER" value="4.2" unit="%" rating="excellent"
                 comparison={{label: "baseline", value: 6.1, isHigherBetter: false}} />

`ComponentKind` is the closed set of supported tags. `renderer_for` maps every
kind to its renderer; a tag outside the set raises `UnknownComponentError`.
"""

from __future__ import annotations

import itertools
import re
import textwrap
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from markupsafe import escape
from pydantic import BaseModel

from shared.types import CalloutType, Rating, Trend

from .errors import ComponentError, UnknownComponentError

if TYPE_CHECKING:
    from taxonomy import TaxonomyIndex


class ComponentKind(str, Enum):
    """Tags that may appear in article source."""

    callout = "Callout"
    code_block = "CodeBlock"
    diagram = "Diagram"
    tabs = "Tabs"
    tab = "Tab"
    metrics_card = "MetricsCard"
    metrics_grid = "MetricsGrid"
    related_topics = "RelatedTopics"


def resolve_component(name: str) -> ComponentKind:
    """Map a tag name to its kind.

    Raises:
        UnknownComponentError: If `name` is not a supported component.
    """
    try:
        return ComponentKind(name)
    except ValueError:
        raise UnknownComponentError(name) from None


@dataclass
class ComponentNode:
    """A parsed component tag with its children.

    Children are either raw Markdown strings or nested nodes. `raw_body` keeps
    the unrendered source between the tags for components that treat their
    body as literal text (code, diagrams).
    """

    kind: ComponentKind
    attrs: dict[str, Any] = field(default_factory=dict)
    children: list[str | ComponentNode] = field(default_factory=list)
    raw_body: str = ""


@dataclass
class RenderContext:
    """State shared by the renderers of one article."""

    render_markdown: Callable[[str], str]
    index: TaxonomyIndex | None = None
    _ids: itertools.count = field(
        default_factory=lambda: itertools.count(1), init=False, repr=False
    )

    def next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    def render_children(self, node: ComponentNode) -> str:
        return self.render_nodes(node.children)

    def render_nodes(self, children: list[str | ComponentNode]) -> str:
        parts = []
        for child in children:
            if isinstance(child, ComponentNode):
                parts.append(render_component(child, self))
            elif child.strip():
                # Component bodies are often indented inside their tags
                parts.append(self.render_markdown(textwrap.dedent(child)))
        return "".join(parts)


# =============================================================================
# Callout
# =============================================================================

CALLOUT_TITLES = {
    CalloutType.info: "Note",
    CalloutType.warning: "Warning",
    CalloutType.tip: "Tip",
    CalloutType.note: "Note",
    CalloutType.danger: "Important",
    CalloutType.success: "Success",
}

CALLOUT_ICONS = {
    CalloutType.info: "info",
    CalloutType.warning: "alert-triangle",
    CalloutType.tip: "lightbulb",
    CalloutType.note: "file-text",
    CalloutType.danger: "alert-octagon",
    CalloutType.success: "check-circle",
}


def render_callout(node: ComponentNode, ctx: RenderContext) -> str:
    raw_type = str(node.attrs.get("type", CalloutType.info.value))
    try:
        callout_type = CalloutType(raw_type)
    except ValueError:
        raise ComponentError(f"Unknown callout type {raw_type!r}") from None

    title = node.attrs.get("title") or CALLOUT_TITLES[callout_type]
    return (
        f'<aside class="callout callout-{callout_type.value}" role="note">'
        f'<div class="callout-title">'
        f'<span class="icon icon-{CALLOUT_ICONS[callout_type]}" aria-hidden="true"></span>'
        f"{escape(title)}</div>"
        f'<div class="callout-body">{ctx.render_children(node)}</div>'
        f"</aside>"
    )


# =============================================================================
# Code blocks
# =============================================================================

LANGUAGE_LABELS = {
    "javascript": "JavaScript",
    "js": "JavaScript",
    "typescript": "TypeScript",
    "ts": "TypeScript",
    "tsx": "TSX",
    "jsx": "JSX",
    "python": "Python",
    "py": "Python",
    "bash": "Bash",
    "sh": "Shell",
    "shell": "Shell",
    "json": "JSON",
    "yaml": "YAML",
    "yml": "YAML",
    "html": "HTML",
    "css": "CSS",
    "sql": "SQL",
    "go": "Go",
    "rust": "Rust",
    "java": "Java",
    "kotlin": "Kotlin",
    "swift": "Swift",
    "ruby": "Ruby",
    "php": "PHP",
    "c": "C",
    "cpp": "C++",
    "csharp": "C#",
    "markdown": "Markdown",
    "md": "Markdown",
    "text": "Text",
    "plaintext": "Plain Text",
    "diff": "Diff",
    "xml": "XML",
    "graphql": "GraphQL",
    "docker": "Dockerfile",
    "dockerfile": "Dockerfile",
    "makefile": "Makefile",
    "env": "Environment",
    "toml": "TOML",
    "ini": "INI",
}


def language_label(language: str) -> str:
    """Display name for a fence language; unknown ones are upper-cased."""
    if not language:
        return "Code"
    return LANGUAGE_LABELS.get(language.lower(), language.upper())


def parse_line_ranges(value: Any) -> set[int]:
    """Parse `"1,3-5"` (or a list of ints) into a set of line numbers."""
    if value is None or value == "":
        return set()
    if isinstance(value, int) and not isinstance(value, bool):
        return {value}
    if isinstance(value, (list, tuple)):
        return {int(v) for v in value}

    lines: set[int] = set()
    for part in str(value).strip("{}").split(","):
        part = part.strip()
        if not part:
            continue
        start, sep, end = part.partition("-")
        try:
            if sep:
                lines.update(range(int(start), int(end) + 1))
            else:
                lines.add(int(start))
        except ValueError:
            raise ComponentError(f"Invalid line range {part!r}") from None
    return lines


def render_code(
    code: str,
    language: str = "",
    filename: str | None = None,
    show_line_numbers: bool = False,
    highlight_lines: set[int] | None = None,
) -> str:
    """Render a code listing with header, line markup and a copy button."""
    highlight_lines = highlight_lines or set()
    language = language.strip()
    lang_class = f"language-{escape(language)}" if language else "language-text"

    lines = code.rstrip("\n").split("\n")
    rendered_lines = []
    for number, line in enumerate(lines, start=1):
        classes = "code-line highlighted" if number in highlight_lines else "code-line"
        rendered_lines.append(
            f'<span class="{classes}" data-line="{number}">{escape(line)}</span>'
        )

    header = '<div class="code-block-header">'
    if filename:
        header += f'<span class="code-block-filename">{escape(filename)}</span>'
    header += (
        f'<span class="code-block-language">{escape(language_label(language))}</span>'
        '<button type="button" class="copy-button" aria-label="Copy code">Copy</button>'
        "</div>"
    )

    pre_class = f"{lang_class} line-numbers" if show_line_numbers else lang_class
    return (
        f'<div class="code-block" data-language="{escape(language or "text")}">'
        f"{header}"
        f'<pre class="{pre_class}"><code class="{lang_class}">'
        + "\n".join(rendered_lines)
        + "</code></pre></div>"
    )


def render_code_block(node: ComponentNode, ctx: RenderContext) -> str:
    code = node.attrs.get("code")
    if code is None:
        code = _dedent_body(node.raw_body)
    return render_code(
        str(code),
        language=str(node.attrs.get("language", "")),
        filename=node.attrs.get("filename"),
        show_line_numbers=_as_bool(node.attrs.get("showLineNumbers", False)),
        highlight_lines=parse_line_ranges(node.attrs.get("highlightLines")),
    )


# =============================================================================
# Diagrams
# =============================================================================


def render_diagram_source(chart: str, caption: str | None = None) -> str:
    """Wrap mermaid source for client-side rendering."""
    figure = f'<figure class="diagram"><pre class="mermaid">{escape(chart.strip())}</pre>'
    if caption:
        figure += f"<figcaption>{escape(caption)}</figcaption>"
    return figure + "</figure>"


def render_diagram(node: ComponentNode, ctx: RenderContext) -> str:
    chart = node.attrs.get("chart")
    if chart is None:
        chart = _dedent_body(node.raw_body)
    if not str(chart).strip():
        raise ComponentError("<Diagram> requires a chart")
    return render_diagram_source(str(chart), node.attrs.get("caption"))


# =============================================================================
# Tabs
# =============================================================================


def render_tabs(node: ComponentNode, ctx: RenderContext) -> str:
    tabs = [
        child for child in node.children
        if isinstance(child, ComponentNode) and child.kind is ComponentKind.tab
    ]
    if not tabs:
        raise ComponentError("<Tabs> needs at least one <Tab>")

    group_id = ctx.next_id("tabs")
    buttons = []
    panels = []
    for position, tab in enumerate(tabs):
        label = str(tab.attrs.get("label") or f"Tab {position + 1}")
        tab_id = f"{group_id}-tab-{position}"
        panel_id = f"{group_id}-panel-{position}"
        selected = position == 0
        buttons.append(
            f'<button type="button" role="tab" id="{tab_id}" aria-controls="{panel_id}" '
            f'aria-selected="{"true" if selected else "false"}" '
            f'tabindex="{0 if selected else -1}">{escape(label)}</button>'
        )
        hidden = "" if selected else " hidden"
        panels.append(
            f'<div role="tabpanel" id="{panel_id}" aria-labelledby="{tab_id}"{hidden}>'
            f"{ctx.render_children(tab)}</div>"
        )

    return (
        f'<div class="tabs" id="{group_id}">'
        f'<div role="tablist">{"".join(buttons)}</div>'
        f'{"".join(panels)}</div>'
    )


def render_tab(node: ComponentNode, ctx: RenderContext) -> str:
    # A lone <Tab> outside <Tabs> renders as a plain section
    return f'<div class="tab-panel">{ctx.render_children(node)}</div>'


# =============================================================================
# Metrics
# =============================================================================

RATING_LABELS = {
    Rating.excellent: "Excellent",
    Rating.good: "Good",
    Rating.fair: "Fair",
    Rating.poor: "Poor",
}

TREND_ICONS = {
    Trend.better: "trending-up",
    Trend.worse: "trending-down",
    Trend.same: "minus",
}

_LEADING_NUMBER_RE = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_number(value: Any) -> float | None:
    """Read the leading number of `value` ("200ms" -> 200.0), or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = _LEADING_NUMBER_RE.match(str(value))
    return float(match.group(0)) if match else None


def calculate_trend(current: Any, comparison: Any, higher_is_better: bool = True) -> Trend:
    """Compare a metric against its baseline; non-numeric values compare as same."""
    current_value = parse_number(current)
    comparison_value = parse_number(comparison)
    if current_value is None or comparison_value is None:
        return Trend.same
    if current_value == comparison_value:
        return Trend.same
    better = current_value > comparison_value if higher_is_better else current_value < comparison_value
    return Trend.better if better else Trend.worse


def render_metrics_card(node: ComponentNode, ctx: RenderContext) -> str:
    attrs = node.attrs
    name = attrs.get("name")
    value = attrs.get("value")
    if name is None or value is None:
        raise ComponentError("<MetricsCard> requires name and value")
    unit = attrs.get("unit")

    html = '<div class="metrics-card"><div class="metrics-card-header">'
    html += f'<h3 class="metrics-card-name">{escape(name)}</h3>'
    if attrs.get("rating"):
        try:
            rating = Rating(attrs["rating"])
        except ValueError:
            raise ComponentError(f"Unknown rating {attrs['rating']!r}") from None
        html += f'<span class="rating rating-{rating.value}">{RATING_LABELS[rating]}</span>'
    html += "</div>"

    html += f'<div class="metrics-card-value"><span class="value">{escape(value)}</span>'
    if unit:
        html += f'<span class="unit">{escape(unit)}</span>'
    html += "</div>"

    comparison = attrs.get("comparison")
    if not isinstance(comparison, dict) and "compareValue" in attrs:
        comparison = {
            "label": attrs.get("compareLabel", ""),
            "value": attrs["compareValue"],
            "isHigherBetter": attrs.get("higherIsBetter", True),
        }
    if isinstance(comparison, dict):
        trend = calculate_trend(
            value,
            comparison.get("value"),
            _as_bool(comparison.get("isHigherBetter", True)),
        )
        suffix = f" {unit}" if unit else ""
        html += (
            f'<div class="metrics-card-comparison trend-{trend.value}">'
            f'<span class="icon icon-{TREND_ICONS[trend]}" aria-hidden="true"></span>'
            f'<span class="comparison-label">vs {escape(comparison.get("label", ""))}</span>'
            f'<span class="comparison-value">{escape(comparison.get("value"))}{escape(suffix)}</span>'
            "</div>"
        )

    return html + "</div>"


def render_metrics_grid(node: ComponentNode, ctx: RenderContext) -> str:
    columns = parse_number(node.attrs.get("columns", 3))
    if columns not in (2, 3, 4):
        raise ComponentError("<MetricsGrid> columns must be 2, 3 or 4")
    return f'<div class="metrics-grid cols-{int(columns)}">{ctx.render_children(node)}</div>'


# =============================================================================
# Related topics
# =============================================================================


class RelatedTopic(BaseModel):
    """A resolved cross-reference card."""

    title: str
    description: str
    href: str
    category: str


def format_category_label(category: str) -> str:
    """`"llm-integration"` -> `"Llm Integration"`."""
    return " ".join(word[:1].upper() + word[1:] for word in category.split("-"))


def resolve_related(paths: Any, index: TaxonomyIndex | None) -> list[RelatedTopic]:
    """Resolve slug paths (list or comma-separated string) to topic cards.

    Paths may carry the topic base path prefix; unresolvable ones are skipped.
    """
    if index is None or not paths:
        return []
    if isinstance(paths, str):
        paths = paths.split(",")

    topics = []
    for raw in paths:
        path = str(raw).strip()
        if index.base_path and path.startswith(index.base_path + "/"):
            path = path[len(index.base_path):]
        segments = [s for s in path.split("/") if s]
        category = index.topic_metadata(segments)
        if category is None:
            continue
        topics.append(
            RelatedTopic(
                title=category.title,
                description=category.description,
                href=index.href_for_path(segments),
                category=format_category_label(segments[0]),
            )
        )
    return topics


def render_related_topic_cards(topics: list[RelatedTopic]) -> str:
    if not topics:
        return ""
    cards = "".join(
        f'<a class="related-topic" href="{escape(t.href)}">'
        f'<span class="related-topic-category">{escape(t.category)}</span>'
        f'<span class="related-topic-title">{escape(t.title)}</span>'
        f'<span class="related-topic-description">{escape(t.description)}</span>'
        "</a>"
        for t in topics
    )
    return f'<section class="related-topics"><h2>Related Topics</h2>{cards}</section>'


def render_related_topics(node: ComponentNode, ctx: RenderContext) -> str:
    return render_related_topic_cards(resolve_related(node.attrs.get("topics"), ctx.index))


# =============================================================================
# Dispatch
# =============================================================================

Renderer = Callable[[ComponentNode, RenderContext], str]


def renderer_for(kind: ComponentKind) -> Renderer:
    """Return the renderer for `kind`; every kind has exactly one."""
    match kind:
        case ComponentKind.callout:
            return render_callout
        case ComponentKind.code_block:
            return render_code_block
        case ComponentKind.diagram:
            return render_diagram
        case ComponentKind.tabs:
            return render_tabs
        case ComponentKind.tab:
            return render_tab
        case ComponentKind.metrics_card:
            return render_metrics_card
        case ComponentKind.metrics_grid:
            return render_metrics_grid
        case ComponentKind.related_topics:
            return render_related_topics
    raise UnknownComponentError(str(kind))


def render_component(node: ComponentNode, ctx: RenderContext) -> str:
    return renderer_for(node.kind)(node, ctx)


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).lower() in ("true", "1", "yes")


def _dedent_body(body: str) -> str:
    return textwrap.dedent(body).strip("\n")
