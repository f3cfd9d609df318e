"""Taxonomy index and search for the Voice AI Knowledge Repository."""

from .config import QUICK_SEARCH_LIMIT, SEARCH_PAGE_LIMIT, TaxonomyConfig, load_config
from .errors import TaxonomyError, TaxonomyIntegrityError, TaxonomyLoadError
from .index import TaxonomyIndex, normalize_base_path
from .loader import load_taxonomy, parse_categories
from .models import (
    Breadcrumb,
    Category,
    NavNode,
    PrevNext,
    ResultGroup,
    SearchItem,
    SearchResult,
    TopicLink,
)
from .search import (
    SelectionState,
    filter_by_tag,
    flatten_groups,
    group_by_root,
    search,
)

__all__ = [
    # Configuration
    "TaxonomyConfig",
    "load_config",
    # Index
    "TaxonomyIndex",
    "normalize_base_path",
    "load_taxonomy",
    "parse_categories",
    # Models
    "Category",
    "NavNode",
    "Breadcrumb",
    "TopicLink",
    "PrevNext",
    "SearchItem",
    "SearchResult",
    "ResultGroup",
    # Search
    "search",
    "group_by_root",
    "flatten_groups",
    "filter_by_tag",
    "SelectionState",
    # Errors
    "TaxonomyError",
    "TaxonomyLoadError",
    "TaxonomyIntegrityError",
    # Constants
    "SEARCH_PAGE_LIMIT",
    "QUICK_SEARCH_LIMIT",
]
