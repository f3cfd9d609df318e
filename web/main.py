"""FastAPI application factory and CLI entry point for the documentation site."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from mdx import ContentStore
from taxonomy import TaxonomyConfig, TaxonomyIndex, load_taxonomy, normalize_base_path
from taxonomy import load_config as load_taxonomy_config

from .config import SiteConfig
from .config import load_config as load_site_config
from .routes import api_router, render_not_found, router, topic_router

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


def create_app(
    site_config: SiteConfig | None = None,
    taxonomy_config: TaxonomyConfig | None = None,
    index: TaxonomyIndex | None = None,
    content_store: ContentStore | None = None,
) -> FastAPI:
    """Create the site application.

    The taxonomy index and content store are built once in the lifespan and
    kept on `app.state`. Pass `index` / `content_store` to use prebuilt ones
    (tests do this with fixture data). Topic pages are served under the
    index's base path, else `taxonomy_config.base_path`.

    Args:
        site_config: Server settings (default: load_config()).
        taxonomy_config: Taxonomy settings (default: taxonomy load_config()).
        index: Prebuilt taxonomy index.
        content_store: Prebuilt content store.

    Returns:
        Configured FastAPI app.
    """
    site_config = site_config or load_site_config()
    taxonomy_config = taxonomy_config or load_taxonomy_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if index is None:
            app.state.index = load_taxonomy(
                taxonomy_config.data_file, base_path=taxonomy_config.base_path
            )
        else:
            app.state.index = index
        app.state.content_store = content_store or ContentStore(
            site_config.content_dir, index=app.state.index
        )
        logger.info(
            "Site ready: %d topics, content from %s",
            len(app.state.index),
            app.state.content_store.root,
        )
        yield

    app = FastAPI(title=site_config.site_name, debug=site_config.debug, lifespan=lifespan)
    app.state.site_config = site_config
    app.state.taxonomy_config = taxonomy_config

    # Topic pages live wherever the index builds its hrefs
    base_path = (
        index.base_path if index is not None else normalize_base_path(taxonomy_config.base_path)
    )

    app.include_router(router)
    app.include_router(api_router)
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    # Registered last: with an empty base path it catches every other path
    app.include_router(topic_router, prefix=base_path)

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        # HTML 404 page for browsers, JSON for the API
        if exc.status_code == 404 and not request.url.path.startswith("/api"):
            return render_not_found(request, site_config)
        return await http_exception_handler(request, exc)

    return app


def run() -> None:
    """Console entry point: serve the site with uvicorn."""
    import uvicorn

    site_config = load_site_config()
    logging.basicConfig(
        level=logging.DEBUG if site_config.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(create_app(site_config), host=site_config.host, port=site_config.port)


if __name__ == "__main__":
    run()
