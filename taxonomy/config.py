"""Taxonomy configuration with support for environment variables and YAML files.

Configuration priority (highest to lowest):
1. Explicit kwargs passed to load_config()
2. Environment variables (VOICEAI_*)
3. YAML config file (`taxonomy:` section)
4. Default values
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from shared.config import collect_settings

# Result caps for the two search surfaces
SEARCH_PAGE_LIMIT = 20
QUICK_SEARCH_LIMIT = 8


@dataclass
class TaxonomyConfig:
    """Taxonomy index configuration.

    Attributes:
        data_file: Path to the taxonomy JSON dataset.
        base_path: URL prefix for topic pages (default: /topics).
        search_limit: Max results on the full search page (default: 20).
        quick_search_limit: Max results in the header quick search (default: 8).
    """

    data_file: str = "data/taxonomy.json"
    base_path: str = "/topics"
    search_limit: int = SEARCH_PAGE_LIMIT
    quick_search_limit: int = QUICK_SEARCH_LIMIT


def load_config(
    config_file: str | Path | None = None,
    **overrides: Any,
) -> TaxonomyConfig:
    """Load taxonomy configuration with priority: overrides > env vars > yaml > defaults.

    Args:
        config_file: Optional path to YAML config file.
        **overrides: Direct config overrides (highest priority).

    Returns:
        TaxonomyConfig instance.

    Example:
        # From environment variables
        config = load_config()

        # Point at a different dataset
        config = load_config(data_file="tests/fixtures/taxonomy.json")
    """
    env_mapping = {
        "data_file": "VOICEAI_TAXONOMY_FILE",
        "base_path": "VOICEAI_BASE_PATH",
        "search_limit": "VOICEAI_SEARCH_LIMIT",
        "quick_search_limit": "VOICEAI_QUICK_SEARCH_LIMIT",
    }
    config = collect_settings(config_file, "taxonomy", env_mapping, overrides)

    # Type conversions
    if "data_file" in config:
        config["data_file"] = str(config["data_file"])
    if "base_path" in config:
        config["base_path"] = "/" + str(config["base_path"]).strip("/")
    for key in ("search_limit", "quick_search_limit"):
        if key in config:
            config[key] = int(config[key])

    return TaxonomyConfig(**config)
