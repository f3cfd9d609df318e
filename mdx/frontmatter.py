"""YAML frontmatter parsing for article files."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from shared.types import Difficulty

from .errors import FrontmatterError

logger = logging.getLogger(__name__)

FRONTMATTER_DELIMITER = "---"


class Frontmatter(BaseModel):
    """Metadata block at the top of an article.

    Unknown keys are kept so templates can use them.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    title: str = ""
    description: str = ""
    category: str = ""
    tags: list[str] = Field(default_factory=list)
    related: list[str] = Field(default_factory=list)
    last_updated: date | str | None = Field(default=None, alias="lastUpdated")
    author: str | None = None
    reading_time: int | None = Field(default=None, alias="readingTime")
    draft: bool = False
    difficulty: Difficulty | None = None
    prerequisites: list[str] = Field(default_factory=list)
    order: int | None = None

    @field_validator("tags", "related", "prerequisites", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value


def split_frontmatter(text: str) -> tuple[str | None, str]:
    """Split `text` into (yaml block, body).

    The block opens with a `---` first line and closes at the next `---`
    line. An unterminated block is left in the body untouched.
    """
    lines = text.lstrip("\ufeff").splitlines()
    if not lines or lines[0].strip() != FRONTMATTER_DELIMITER:
        return None, text

    try:
        end = next(
            i for i, line in enumerate(lines[1:], start=1)
            if line.strip() == FRONTMATTER_DELIMITER
        )
    except StopIteration:
        logger.warning("Frontmatter block opened but never closed")
        return None, text

    return "\n".join(lines[1:end]), "\n".join(lines[end + 1:])


def parse_frontmatter(text: str) -> tuple[Frontmatter, str]:
    """Parse the frontmatter of an article.

    Returns:
        (metadata, body without the frontmatter block). Articles without a
        block get an empty `Frontmatter`.

    Raises:
        FrontmatterError: If the YAML is malformed or has invalid values.
    """
    block, body = split_frontmatter(text)
    if block is None:
        return Frontmatter(), body

    try:
        data = yaml.safe_load(block) or {}
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Invalid YAML frontmatter: {e}") from e

    if not isinstance(data, dict):
        raise FrontmatterError("Frontmatter must be a mapping")

    try:
        return Frontmatter.model_validate(data), body
    except ValidationError as e:
        raise FrontmatterError(f"Invalid frontmatter values: {e}") from e
