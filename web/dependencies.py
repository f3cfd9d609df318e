"""Request dependencies handing out the objects built at startup.

The taxonomy index, content store and configs live on `app.state`; routes
receive them through these dependencies so tests can swap them with
`app.dependency_overrides`.
"""

from __future__ import annotations

from fastapi import Request

from mdx import ContentStore
from taxonomy import TaxonomyConfig, TaxonomyIndex

from .config import SiteConfig


def get_index(request: Request) -> TaxonomyIndex:
    return request.app.state.index


def get_content_store(request: Request) -> ContentStore:
    return request.app.state.content_store


def get_site_config(request: Request) -> SiteConfig:
    return request.app.state.site_config


def get_taxonomy_config(request: Request) -> TaxonomyConfig:
    return request.app.state.taxonomy_config
