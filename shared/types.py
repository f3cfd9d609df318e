"""Shared type definitions for the taxonomy, content and web packages.

These enums inherit from both `str` and `Enum` to ensure JSON serializability.
This allows `json.dumps(MatchType.title)` to work directly without custom encoders,
and lets pydantic validate raw strings from the taxonomy file and frontmatter.
"""

from enum import Enum


class MatchType(str, Enum):
    """Which field of a topic caused a search query to match.

    Checked in declaration order; the first field that matches wins:
    - title: Query found in the topic title (ranked first)
    - description: Query found in the description
    - tags: Query found in at least one tag
    """

    title = "title"
    description = "description"
    tags = "tags"


class IconName(str, Enum):
    """Closed set of navigation icons a category may reference."""

    home = "home"
    layers = "layers"
    server = "server"
    brain = "brain"
    briefcase = "briefcase"
    book_open = "book-open"
    code = "code"
    git_branch = "git-branch"
    building = "building"


# Icon shown for categories that don't declare one
DEFAULT_ICON = IconName.book_open


class CalloutType(str, Enum):
    """Visual style of a callout box inside an article."""

    info = "info"
    warning = "warning"
    tip = "tip"
    note = "note"
    danger = "danger"
    success = "success"


class Rating(str, Enum):
    """Qualitative rating badge on a metrics card."""

    excellent = "excellent"
    good = "good"
    fair = "fair"
    poor = "poor"


class Trend(str, Enum):
    """Direction of a metric compared to its baseline."""

    better = "better"
    worse = "worse"
    same = "same"


class Difficulty(str, Enum):
    """Reader level declared in article frontmatter."""

    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"
