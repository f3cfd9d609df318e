"""Pydantic schemas for the JSON endpoints.

The HTML pages render taxonomy and article models directly; these schemas
define the flattened shapes served under /api for the header quick search
and other client-side widgets.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from mdx import TocItem
from shared.types import IconName, MatchType
from taxonomy import Breadcrumb, SearchResult, TopicLink


# =============================================================================
# Search
# =============================================================================


class SearchHit(BaseModel):
    """One search result as sent to the browser."""

    id: str
    title: str
    description: str
    href: str
    parent_title: str | None = None
    match_type: MatchType
    matched_tags: list[str] = Field(default_factory=list)
    icon: IconName

    @classmethod
    def from_result(cls, result: SearchResult) -> SearchHit:
        category = result.category
        return cls(
            id=category.id,
            title=category.title,
            description=category.description,
            href=result.href,
            parent_title=result.item.parent_title,
            match_type=result.match_type,
            matched_tags=result.matched_tags,
            icon=category.display_icon,
        )


class SearchGroup(BaseModel):
    """Hits sharing the same root category."""

    title: str
    results: list[SearchHit]


class SearchResponse(BaseModel):
    """Response for the /api/search endpoint.

    `results` is in rank order; `groups` is the display grouping by root
    category.
    """

    query: str
    total: int
    results: list[SearchHit]
    groups: list[SearchGroup]


# =============================================================================
# Topics
# =============================================================================


class TopicResponse(BaseModel):
    """Response for the /api/topics/{path} endpoint."""

    id: str
    title: str
    description: str
    tags: list[str]
    icon: IconName
    href: str
    breadcrumbs: list[Breadcrumb]
    prev: TopicLink | None = None
    next: TopicLink | None = None
    has_content: bool
    reading_time: str | None = None
    table_of_contents: list[TocItem] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    categories: int
