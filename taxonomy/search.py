"""Substring search over taxonomy metadata.

Matching is a case-insensitive substring test against the title, then the
description, then each tag. The first field that matches decides the result's
`MatchType`. Ranking is two-level: title matches first, then ascending
category order. Truncation to the page limit happens after sorting.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from shared.types import MatchType

from .config import QUICK_SEARCH_LIMIT, SEARCH_PAGE_LIMIT
from .index import TaxonomyIndex
from .models import ResultGroup, SearchItem, SearchResult

# Group title for results whose root can't be resolved
UNGROUPED_TITLE = "Other"

# Max matching tags shown under a tag hit
MAX_MATCHED_TAGS = 3

__all__ = [
    "QUICK_SEARCH_LIMIT",
    "SEARCH_PAGE_LIMIT",
    "SelectionState",
    "filter_by_tag",
    "flatten_groups",
    "group_by_root",
    "match_item",
    "search",
]


def match_item(item: SearchItem, query_lower: str) -> MatchType | None:
    """Return the first field of `item` containing `query_lower`, if any."""
    category = item.category
    if query_lower in category.title.lower():
        return MatchType.title
    if query_lower in category.description.lower():
        return MatchType.description
    if any(query_lower in tag.lower() for tag in category.tags):
        return MatchType.tags
    return None


def search(
    query: str,
    items: Iterable[SearchItem],
    limit: int = SEARCH_PAGE_LIMIT,
) -> list[SearchResult]:
    """Search `items` for `query`.

    Args:
        query: Raw user input; not trimmed by the caller.
        items: Flattened categories, usually `TaxonomyIndex.search_items()`.
        limit: Max results returned (20 for the search page, 8 for quick search).

    Returns:
        Best `limit` results: title matches first, then by category order.
        Empty for an empty or whitespace-only query.
    """
    if not query.strip():
        return []

    query_lower = query.lower()
    matches: list[SearchResult] = []

    for item in items:
        match_type = match_item(item, query_lower)
        if match_type is None:
            continue
        matched_tags = []
        if match_type is MatchType.tags:
            matched_tags = [t for t in item.category.tags if query_lower in t.lower()]
        matches.append(
            SearchResult(
                item=item,
                match_type=match_type,
                matched_tags=matched_tags[:MAX_MATCHED_TAGS],
            )
        )

    # Stable sort keeps source order for equal keys
    matches.sort(key=lambda r: (r.match_type is not MatchType.title, r.category.order))
    return matches[:limit]


def group_by_root(
    results: Sequence[SearchResult],
    index: TaxonomyIndex,
) -> list[ResultGroup]:
    """Group results under the title of their root category.

    Groups appear in the order their first result was produced.
    """
    groups: dict[str, ResultGroup] = {}

    for result in results:
        category = index.get(result.category.id)
        title = index.root_of(category).title if category else UNGROUPED_TITLE
        groups.setdefault(title, ResultGroup(title=title)).results.append(result)

    return list(groups.values())


def flatten_groups(groups: Sequence[ResultGroup]) -> list[SearchResult]:
    """Results in display order, as used for keyboard selection."""
    return [result for group in groups for result in group.results]


def filter_by_tag(items: Iterable[SearchItem], tag: str) -> list[SearchItem]:
    """Items carrying `tag` exactly (case-insensitive), sorted by order."""
    wanted = tag.strip().lower()
    if not wanted:
        return []
    matched = [i for i in items if any(t.lower() == wanted for t in i.category.tags)]
    return sorted(matched, key=lambda i: i.category.order)


@dataclass
class SelectionState:
    """Keyboard selection over a result list.

    `selected_index` is -1 when nothing is selected. Arrow keys clamp to
    [-1, count - 1]; they never wrap around.
    """

    count: int = 0
    selected_index: int = -1

    def reset(self, count: int) -> None:
        """Start over for a new result list (called on every query change)."""
        self.count = max(count, 0)
        self.selected_index = -1

    def move_down(self) -> int:
        if self.selected_index < self.count - 1:
            self.selected_index += 1
        return self.selected_index

    def move_up(self) -> int:
        self.selected_index = self.selected_index - 1 if self.selected_index > 0 else -1
        return self.selected_index

    def current(self, results: Sequence[SearchResult]) -> SearchResult | None:
        """The selected result, or None when nothing is selected."""
        if 0 <= self.selected_index < len(results):
            return results[self.selected_index]
        return None
