"""Shared types and utilities for the taxonomy, content and web packages."""

from .types import (
    DEFAULT_ICON,
    CalloutType,
    Difficulty,
    IconName,
    MatchType,
    Rating,
    Trend,
)

__all__ = [
    "MatchType",
    "IconName",
    "DEFAULT_ICON",
    "CalloutType",
    "Rating",
    "Trend",
    "Difficulty",
]
