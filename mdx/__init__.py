"""Article pipeline: frontmatter, table of contents, components and rendering."""

from .components import (
    ComponentKind,
    RelatedTopic,
    calculate_trend,
    language_label,
    resolve_component,
    resolve_related,
)
from .errors import ComponentError, ContentError, FrontmatterError, UnknownComponentError
from .frontmatter import Frontmatter, parse_frontmatter
from .loader import Article, ContentStore, estimate_reading_time
from .render import ArticleRenderer, parse_components, render_markdown
from .toc import TocItem, extract_table_of_contents, nest_table_of_contents, slugify_heading

__all__ = [
    # Loading
    "ContentStore",
    "Article",
    "estimate_reading_time",
    # Frontmatter
    "Frontmatter",
    "parse_frontmatter",
    # Table of contents
    "TocItem",
    "extract_table_of_contents",
    "nest_table_of_contents",
    "slugify_heading",
    # Rendering
    "ArticleRenderer",
    "render_markdown",
    "parse_components",
    # Components
    "ComponentKind",
    "RelatedTopic",
    "resolve_component",
    "resolve_related",
    "calculate_trend",
    "language_label",
    # Errors
    "ContentError",
    "FrontmatterError",
    "ComponentError",
    "UnknownComponentError",
]
