"""Voice AI Knowledge Repository web site."""

from .config import SiteConfig, load_config
from .dependencies import get_content_store, get_index, get_site_config, get_taxonomy_config
from .main import create_app, run
from .routes import api_router, router, topic_router
from .schemas import HealthResponse, SearchGroup, SearchHit, SearchResponse, TopicResponse

__all__ = [
    # Configuration
    "SiteConfig",
    "load_config",
    # Dependencies
    "get_index",
    "get_content_store",
    "get_site_config",
    "get_taxonomy_config",
    # Application
    "create_app",
    "run",
    "router",
    "api_router",
    "topic_router",
    # Schemas
    "SearchHit",
    "SearchGroup",
    "SearchResponse",
    "TopicResponse",
    "HealthResponse",
]
