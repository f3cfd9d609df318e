"""Taxonomy index: tree, path and neighbour lookups over the flat category list.

The taxonomy is authored as a flat list of categories that point at their
parent by id. `TaxonomyIndex` builds the id and children maps once per load
and answers every navigation question from them:

- href and slug path of a category (bottom-up parent walk)
- sidebar navigation tree (top-down from the roots)
- slug path -> category resolution
- global topic order and previous/next neighbours
- breadcrumbs and root ancestor lookups

Categories whose parent id doesn't resolve are treated as roots. Parent walks
are bounded by the number of categories, and every chain is walked once when
the index is built, so a cyclic dataset raises `TaxonomyIntegrityError` at
load time instead of looping forever.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from .errors import TaxonomyIntegrityError
from .models import Breadcrumb, Category, NavNode, PrevNext, SearchItem, TopicLink

logger = logging.getLogger(__name__)

DEFAULT_BASE_PATH = "/topics"


def normalize_base_path(base_path: str) -> str:
    """`"topics/"` -> `"/topics"`; a bare `"/"` becomes `""` (topics at the site root)."""
    stripped = base_path.strip("/")
    return "/" + stripped if stripped else ""


class TaxonomyIndex:
    """Queryable view over an immutable list of categories.

    Build it once when the taxonomy is loaded and pass it to whatever needs
    lookups; every method is a pure read.
    """

    def __init__(
        self,
        categories: Iterable[Category],
        base_path: str = DEFAULT_BASE_PATH,
    ) -> None:
        self._categories: list[Category] = list(categories)
        self._base_path = normalize_base_path(base_path)

        self.category_map: dict[str, Category] = {}
        for category in self._categories:
            if category.id in self.category_map:
                logger.warning("Duplicate category id %r, keeping the last one", category.id)
            self.category_map[category.id] = category

        # Dangling parents are keyed under None so orphans behave like roots
        self.children_map: dict[str | None, list[Category]] = {}
        for category in self._categories:
            parent_id = category.parent_id if category.parent_id in self.category_map else None
            if category.parent_id is not None and parent_id is None:
                logger.warning(
                    "Category %r references missing parent %r, treating it as a root",
                    category.id,
                    category.parent_id,
                )
            self.children_map.setdefault(parent_id, []).append(category)

        # list.sort is stable: equal orders keep their position in the source list
        for children in self.children_map.values():
            children.sort(key=lambda c: c.order)

        # Every parent chain must reach a root; a cycle fails the build
        for category in self._categories:
            self.ancestors(category)

        self._search_items: list[SearchItem] | None = None
        logger.debug(
            "Indexed %d categories (%d roots)",
            len(self._categories),
            len(self.children_map.get(None, [])),
        )

    @property
    def base_path(self) -> str:
        return self._base_path

    @property
    def categories(self) -> list[Category]:
        """Categories in source order."""
        return list(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def get(self, category_id: str) -> Category | None:
        return self.category_map.get(category_id)

    def parent_of(self, category: Category) -> Category | None:
        """Return the parent category, or None for roots and orphans."""
        if category.parent_id is None:
            return None
        return self.category_map.get(category.parent_id)

    def parent_title(self, category: Category) -> str | None:
        parent = self.parent_of(category)
        return parent.title if parent else None

    def ancestors(self, category: Category) -> list[Category]:
        """Return the chain root-first, ending with `category` itself.

        Raises:
            TaxonomyIntegrityError: If the walk exceeds the number of
                categories, which only happens when the parent graph has a cycle.
        """
        chain: list[Category] = []
        current: Category | None = category
        limit = len(self._categories) + 1

        while current is not None:
            if len(chain) >= limit:
                raise TaxonomyIntegrityError(category.id)
            chain.append(current)
            current = self.parent_of(current)

        chain.reverse()
        return chain

    def root_of(self, category: Category) -> Category:
        return self.ancestors(category)[0]

    def slug_path(self, category: Category) -> list[str]:
        return [c.slug for c in self.ancestors(category)]

    def href_for_path(self, slug_path: Sequence[str]) -> str:
        return self._base_path + "/" + "/".join(slug_path)

    def build_href(self, category: Category) -> str:
        """Build the topic URL by walking parent pointers up to the root."""
        return self.href_for_path(self.slug_path(category))

    def children_of(self, parent_id: str | None) -> list[Category]:
        """Sibling group under `parent_id`, sorted by order."""
        return list(self.children_map.get(parent_id, []))

    def roots(self) -> list[Category]:
        return self.children_of(None)

    def navigation_tree(self) -> list[NavNode]:
        """Build the sidebar tree from the roots, sorted by order at every level."""
        return self._build_tree(None, self._base_path)

    def _build_tree(self, parent_id: str | None, base: str) -> list[NavNode]:
        nodes = []
        for category in self.children_map.get(parent_id, []):
            href = f"{base}/{category.slug}"
            nodes.append(
                NavNode(
                    title=category.title,
                    href=href,
                    icon=category.icon,
                    children=self._build_tree(category.id, href),
                )
            )
        return nodes

    def topic_metadata(self, slug_path: Sequence[str]) -> Category | None:
        """Resolve a slug path such as ["foundations", "speech-recognition"].

        Returns None for an empty path or as soon as a segment has no
        matching child. Duplicate sibling slugs resolve to the first child
        in sibling order.
        """
        if not slug_path:
            return None

        found: Category | None = None
        parent_id: str | None = None
        for slug in slug_path:
            found = next(
                (c for c in self.children_map.get(parent_id, []) if c.slug == slug),
                None,
            )
            if found is None:
                return None
            parent_id = found.id

        return found

    def all_topic_slugs(self) -> list[list[str]]:
        """Slug path of every category, in source list order.

        This is the global topic order used for previous/next links; it
        follows the dataset, not the navigation tree.
        """
        return [self.slug_path(category) for category in self._categories]

    def prev_next(self, slug_path: Sequence[str]) -> PrevNext:
        """Return the neighbours of `slug_path` in the global topic order."""
        all_slugs = self.all_topic_slugs()
        current = "/".join(slug_path)

        index = next(
            (i for i, slugs in enumerate(all_slugs) if "/".join(slugs) == current),
            -1,
        )
        if index == -1:
            return PrevNext()

        prev_slug = all_slugs[index - 1] if index > 0 else None
        next_slug = all_slugs[index + 1] if index < len(all_slugs) - 1 else None
        return PrevNext(prev=self._topic_link(prev_slug), next=self._topic_link(next_slug))

    def _topic_link(self, slug_path: list[str] | None) -> TopicLink | None:
        if slug_path is None:
            return None
        category = self.topic_metadata(slug_path)
        if category is None:
            return None
        return TopicLink(title=category.title, href=self.href_for_path(slug_path))

    def breadcrumbs(self, category: Category) -> list[Breadcrumb]:
        """Ancestor-to-current chain; the last crumb carries no href."""
        chain = self.ancestors(category)
        crumbs = []
        for position, node in enumerate(chain, start=1):
            href = None if position == len(chain) else self.href_for_path(
                [c.slug for c in chain[:position]]
            )
            crumbs.append(Breadcrumb(label=node.title, href=href))
        return crumbs

    def search_items(self) -> list[SearchItem]:
        """Categories flattened for search, with href and parent title."""
        if self._search_items is None:
            self._search_items = [
                SearchItem(
                    category=category,
                    href=self.build_href(category),
                    parent_title=self.parent_title(category),
                )
                for category in self._categories
            ]
        return list(self._search_items)
