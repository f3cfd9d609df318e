"""Pydantic models for taxonomy records and the structures derived from them.

`Category` mirrors one record of the taxonomy dataset. Everything else in this
module is computed from the category list and never stored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from shared.types import DEFAULT_ICON, IconName, MatchType


class Category(BaseModel):
    """A node of the topic taxonomy.

    The dataset uses camelCase (`parentId`); both spellings are accepted.
    An `icon` outside `IconName` fails validation at load time.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    title: str
    slug: str
    description: str = ""
    parent_id: str | None = Field(default=None, alias="parentId")
    order: int = 0
    tags: list[str] = Field(default_factory=list)
    icon: IconName | None = None

    @property
    def display_icon(self) -> IconName:
        return self.icon or DEFAULT_ICON


class NavNode(BaseModel):
    """One entry of the sidebar navigation tree."""

    title: str
    href: str
    icon: IconName | None = None
    children: list[NavNode] = Field(default_factory=list)


class Breadcrumb(BaseModel):
    """A (label, href) pair; the current page has no href."""

    label: str
    href: str | None = None


class TopicLink(BaseModel):
    """Title and href of a neighbouring topic."""

    title: str
    href: str


class PrevNext(BaseModel):
    """Previous/next topics in the global topic order."""

    prev: TopicLink | None = None
    next: TopicLink | None = None


class SearchItem(BaseModel):
    """A category flattened for searching, with its computed href."""

    category: Category
    href: str
    parent_title: str | None = None


class SearchResult(BaseModel):
    """A search hit: the item plus the first field that matched."""

    item: SearchItem
    match_type: MatchType
    matched_tags: list[str] = Field(default_factory=list)

    @property
    def category(self) -> Category:
        return self.item.category

    @property
    def href(self) -> str:
        return self.item.href


class ResultGroup(BaseModel):
    """Search results sharing the same root category."""

    title: str
    results: list[SearchResult] = Field(default_factory=list)
