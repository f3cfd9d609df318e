"""Locate and load article files for taxonomy topics.

Articles live under the content directory, addressed by the topic's slug path:

    content/foundations/speech-recognition.mdx
    content/foundations/index.mdx          (directory page for "foundations")

A topic without a file is not an error: `load` returns None and the page
falls back to a placeholder built from the taxonomy metadata.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel

from .frontmatter import Frontmatter, parse_frontmatter
from .render import ArticleRenderer
from .toc import TocItem, extract_table_of_contents

if TYPE_CHECKING:
    from taxonomy import TaxonomyIndex

logger = logging.getLogger(__name__)

CONTENT_EXTENSIONS = (".mdx", ".md")
INDEX_STEM = "index"
WORDS_PER_MINUTE = 200

_WORD_RE = re.compile(r"\S+")


class Article(BaseModel):
    """A parsed article ready for the topic page."""

    path: Path
    frontmatter: Frontmatter
    body: str
    html: str
    table_of_contents: list[TocItem]
    reading_time: str


def estimate_reading_time(text: str, words_per_minute: int = WORDS_PER_MINUTE) -> str:
    """Return e.g. "4 min read"; never less than one minute."""
    words = len(_WORD_RE.findall(text))
    minutes = max(1, math.ceil(words / words_per_minute))
    return f"{minutes} min read"


def _is_safe_segment(segment: str) -> bool:
    return bool(segment) and segment not in (".", "..") and "/" not in segment and "\\" not in segment


class ContentStore:
    """Reads article files from a content directory.

    Args:
        content_dir: Root directory of the article tree.
        index: Taxonomy index used to resolve related-topic references.
    """

    def __init__(self, content_dir: str | Path, index: TaxonomyIndex | None = None) -> None:
        self._root = Path(content_dir)
        self._renderer = ArticleRenderer(index)

    @property
    def root(self) -> Path:
        return self._root

    def find(self, slug_path: Sequence[str]) -> Path | None:
        """Return the article file for `slug_path`, or None.

        `<a>/<b>.mdx` wins over `<a>/<b>/index.mdx`; `.md` is accepted too.
        """
        if not slug_path or not all(_is_safe_segment(s) for s in slug_path):
            return None

        base = self._root.joinpath(*slug_path)
        candidates = [base.with_name(base.name + ext) for ext in CONTENT_EXTENSIONS]
        candidates += [base / f"{INDEX_STEM}{ext}" for ext in CONTENT_EXTENSIONS]

        for candidate in candidates:
            if candidate.is_file():
                return candidate
        return None

    def load(self, slug_path: Sequence[str]) -> Article | None:
        """Load and render the article for `slug_path`.

        Returns:
            The article, or None if no file exists.

        Raises:
            ContentError: If the file exists but can't be parsed or rendered.
        """
        path = self.find(slug_path)
        if path is None:
            logger.debug("No content file for %s", "/".join(slug_path))
            return None

        text = path.read_text(encoding="utf-8")
        frontmatter, body = parse_frontmatter(text)
        return Article(
            path=path,
            frontmatter=frontmatter,
            body=body,
            html=self._renderer.render(body),
            table_of_contents=extract_table_of_contents(body),
            reading_time=estimate_reading_time(body),
        )
