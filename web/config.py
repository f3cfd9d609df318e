"""Site server configuration with support for environment variables and YAML files.

Configuration priority (highest to lowest):
1. Explicit kwargs passed to load_config()
2. Environment variables (VOICEAI_*)
3. YAML config file (`site:` section)
4. Default values
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from shared.config import collect_settings, parse_bool


@dataclass
class SiteConfig:
    """Site server configuration.

    Attributes:
        content_dir: Directory holding the article files (default: content).
        site_name: Name shown in page titles and the header.
        site_url: Public origin used for canonical URLs.
        host: Server bind address (default: 0.0.0.0).
        port: Server port (default: 8000).
        debug: Enable debug mode and verbose logging (default: False).
    """

    content_dir: str = "content"
    site_name: str = "Voice AI Knowledge Repository"
    site_url: str = "https://voice-ai-repository.plivo.com"
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False


def load_config(
    config_file: str | Path | None = None,
    **overrides: Any,
) -> SiteConfig:
    """Load site configuration with priority: overrides > env vars > yaml > defaults.

    Args:
        config_file: Optional path to YAML config file.
        **overrides: Direct config overrides (highest priority).

    Returns:
        SiteConfig instance.

    Example:
        # From environment variables
        config = load_config()

        # From YAML file
        config = load_config("voiceai.config.yaml")

        # Local preview
        config = load_config(site_url="http://localhost:8000", debug=True)
    """
    env_mapping = {
        "content_dir": "VOICEAI_CONTENT_DIR",
        "site_name": "VOICEAI_SITE_NAME",
        "site_url": "VOICEAI_SITE_URL",
        "host": "VOICEAI_HOST",
        "port": "VOICEAI_PORT",
        "debug": "VOICEAI_DEBUG",
    }
    config = collect_settings(config_file, "site", env_mapping, overrides)

    # Type conversions
    if "content_dir" in config:
        config["content_dir"] = str(config["content_dir"])
    if "site_url" in config:
        config["site_url"] = str(config["site_url"]).rstrip("/")
    if "port" in config:
        config["port"] = int(config["port"])
    if "debug" in config:
        config["debug"] = parse_bool(config["debug"])

    return SiteConfig(**config)
