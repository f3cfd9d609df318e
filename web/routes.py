"""FastAPI route handlers for the documentation site.

`router` serves the home and search pages. `topic_router` serves the topic
pages; the app factory mounts it under the taxonomy base path so the routes
always match the hrefs the index builds. `api_router` serves the JSON
endpoints used by the header quick search and other client-side widgets.
Handlers are plain functions: every lookup is an in-memory read of the
taxonomy index plus, for topic pages, one file read.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from mdx import Article, ContentError, ContentStore, nest_table_of_contents, resolve_related
from taxonomy import (
    NavNode,
    TaxonomyConfig,
    TaxonomyIndex,
    filter_by_tag,
    flatten_groups,
    group_by_root,
    search,
)

from .config import SiteConfig
from .dependencies import get_content_store, get_index, get_site_config, get_taxonomy_config
from .schemas import HealthResponse, SearchGroup, SearchHit, SearchResponse, TopicResponse

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

router = APIRouter()
api_router = APIRouter(prefix="/api")
topic_router = APIRouter()

# Root categories featured on the empty search page
POPULAR_TOPICS_COUNT = 6

BROWSE_TAGS = [
    "speech-recognition",
    "text-to-speech",
    "llm",
    "telephony",
    "streaming",
    "optimization",
    "security",
    "customer-service",
    "healthcare",
    "architecture",
]


def split_slug_path(path: str) -> list[str]:
    """`"foundations/speech-recognition/"` -> `["foundations", "speech-recognition"]`."""
    return [segment for segment in path.split("/") if segment]


def _load_article(store: ContentStore, slug_path: list[str]) -> Article | None:
    """Load the article, degrading to None (placeholder) on any content failure."""
    try:
        return store.load(slug_path)
    except (ContentError, OSError, ValueError):
        logger.exception("Error loading content for %s", "/".join(slug_path))
        return None


def render_not_found(request: Request, site: SiteConfig) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "not_found.html",
        {"site": site, "page_title": "Topic Not Found", "navigation": []},
        status_code=404,
    )


def _base_context(site: SiteConfig, navigation: list[NavNode], **extra: Any) -> dict[str, Any]:
    return {"site": site, "navigation": navigation, **extra}


# =============================================================================
# HTML pages
# =============================================================================


@router.get("/", response_class=HTMLResponse, name="home")
def home_page(
    request: Request,
    index: TaxonomyIndex = Depends(get_index),
    site: SiteConfig = Depends(get_site_config),
) -> HTMLResponse:
    """Landing page listing the root categories."""
    sections = [
        {
            "category": root,
            "href": index.build_href(root),
            "children": [
                {"category": child, "href": index.build_href(child)}
                for child in index.children_of(root.id)
            ],
        }
        for root in index.roots()
    ]
    return templates.TemplateResponse(
        request,
        "home.html",
        _base_context(site, index.navigation_tree(), sections=sections),
    )


@topic_router.get("/{path:path}", response_class=HTMLResponse, name="topic")
def topic_page(
    request: Request,
    path: str,
    index: TaxonomyIndex = Depends(get_index),
    store: ContentStore = Depends(get_content_store),
    site: SiteConfig = Depends(get_site_config),
) -> HTMLResponse:
    """Render a topic page, or the placeholder when no article exists yet.

    Unknown slug paths get the 404 page.
    """
    slug_path = split_slug_path(path)
    category = index.topic_metadata(slug_path)
    if category is None:
        return render_not_found(request, site)

    article = _load_article(store, slug_path)
    href = index.href_for_path(slug_path)

    title = category.title
    description = category.description
    toc = []
    related = []
    if article is not None:
        title = article.frontmatter.title or title
        description = article.frontmatter.description or description
        toc = nest_table_of_contents(article.table_of_contents)
        related = resolve_related(article.frontmatter.related, index)

    context = _base_context(
        site,
        index.navigation_tree(),
        category=category,
        article=article,
        page_title=title,
        page_description=description,
        keywords=category.tags,
        canonical_url=f"{site.site_url}{href}",
        current_href=href,
        breadcrumbs=index.breadcrumbs(category),
        table_of_contents=toc,
        related_topics=related,
        prev_next=index.prev_next(slug_path),
    )
    return templates.TemplateResponse(request, "topic.html", context)


@router.get("/search", response_class=HTMLResponse, name="search")
def search_page(
    request: Request,
    q: str = "",
    tag: str | None = None,
    index: TaxonomyIndex = Depends(get_index),
    site: SiteConfig = Depends(get_site_config),
    taxonomy_config: TaxonomyConfig = Depends(get_taxonomy_config),
) -> HTMLResponse:
    """Full search page: grouped results, or popular topics when empty."""
    items = index.search_items()
    groups = []
    tagged = []

    if tag:
        tagged = filter_by_tag(items, tag)
    else:
        results = search(q, items, limit=taxonomy_config.search_limit)
        groups = group_by_root(results, index)

    popular = [item for item in items if item.category.parent_id is None][:POPULAR_TOPICS_COUNT]

    context = _base_context(
        site,
        index.navigation_tree(),
        page_title="Search",
        query=q,
        tag=tag,
        groups=groups,
        result_count=len(flatten_groups(groups)),
        tagged=tagged,
        popular=popular,
        browse_tags=BROWSE_TAGS,
    )
    return templates.TemplateResponse(request, "search.html", context)


# =============================================================================
# JSON API
# =============================================================================


@api_router.get("/search", response_model=SearchResponse)
def search_api(
    q: str = "",
    limit: int | None = Query(default=None, ge=1),
    index: TaxonomyIndex = Depends(get_index),
    taxonomy_config: TaxonomyConfig = Depends(get_taxonomy_config),
) -> SearchResponse:
    """Quick search; defaults to the header limit, capped at the page limit."""
    limit = min(limit or taxonomy_config.quick_search_limit, taxonomy_config.search_limit)
    results = search(q, index.search_items(), limit=limit)
    groups = group_by_root(results, index)

    return SearchResponse(
        query=q,
        total=len(results),
        results=[SearchHit.from_result(r) for r in results],
        groups=[
            SearchGroup(title=g.title, results=[SearchHit.from_result(r) for r in g.results])
            for g in groups
        ],
    )


@api_router.get("/navigation", response_model=list[NavNode])
def navigation_api(index: TaxonomyIndex = Depends(get_index)) -> list[NavNode]:
    return index.navigation_tree()


@api_router.get("/topics/{path:path}", response_model=TopicResponse)
def topic_api(
    path: str,
    index: TaxonomyIndex = Depends(get_index),
    store: ContentStore = Depends(get_content_store),
) -> TopicResponse:
    """Topic metadata with breadcrumbs, neighbours and outline.

    Raises:
        HTTPException: 404 if the slug path doesn't resolve.
    """
    slug_path = split_slug_path(path)
    category = index.topic_metadata(slug_path)
    if category is None:
        raise HTTPException(status_code=404, detail="Topic not found")

    article = _load_article(store, slug_path)
    prev_next = index.prev_next(slug_path)
    return TopicResponse(
        id=category.id,
        title=category.title,
        description=category.description,
        tags=category.tags,
        icon=category.display_icon,
        href=index.href_for_path(slug_path),
        breadcrumbs=index.breadcrumbs(category),
        prev=prev_next.prev,
        next=prev_next.next,
        has_content=article is not None,
        reading_time=article.reading_time if article else None,
        table_of_contents=article.table_of_contents if article else [],
    )


@router.get("/health", response_model=HealthResponse)
def health(index: TaxonomyIndex = Depends(get_index)) -> HealthResponse:
    return HealthResponse(status="ok", categories=len(index))
