"""Shared configuration utilities for the taxonomy and web packages.

Both read from a single config file: `voiceai.config.yaml` in the project root.

Configuration priority (highest to lowest):
1. Explicit kwargs passed to load functions
2. Environment variables (VOICEAI_*)
3. voiceai.config.yaml file (explicit path, or auto-discovered from cwd)
4. Default values

Example voiceai.config.yaml:
```yaml
taxonomy:
  data_file: data/taxonomy.json
  base_path: /topics
  search_limit: 20
  quick_search_limit: 8

site:
  content_dir: content
  site_url: https://voice-ai-repository.plivo.com
  port: 8000
  debug: false
```
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

# Default config filename - users place this in their project root
CONFIG_FILENAME = "voiceai.config.yaml"

TRUTHY = ("true", "1", "yes")


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find voiceai.config.yaml by searching from start_path up to root.

    Args:
        start_path: Directory to start search from (default: cwd).

    Returns:
        Path to config file if found, None otherwise.
    """
    current = Path(start_path) if start_path else Path.cwd()

    # Search current directory and parents
    for parent in [current, *current.parents]:
        config_path = parent / CONFIG_FILENAME
        if config_path.exists():
            return config_path

    return None


def load_yaml_file(config_file: str | Path) -> dict[str, Any]:
    """Load configuration from a YAML file.

    Args:
        config_file: Path to YAML config file.

    Returns:
        Parsed YAML content as dict, or empty dict if file doesn't exist.
    """
    import yaml

    path = Path(config_file)
    if not path.exists():
        return {}

    with open(path) as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def get_section(config: dict[str, Any], section: str) -> dict[str, Any]:
    """Extract a section from config dict.

    Args:
        config: Full config dict.
        section: Section name ('taxonomy' or 'site').

    Returns:
        Section dict, or empty dict if not found.
    """
    return config.get(section, {}) if isinstance(config.get(section), dict) else {}


def collect_settings(
    config_file: str | Path | None,
    section: str,
    env_mapping: dict[str, str],
    overrides: dict[str, Any],
) -> dict[str, Any]:
    """Merge YAML, environment and explicit settings for one config section.

    A YAML file may either nest settings under `section` or hold them at the
    top level; only keys named in `env_mapping` are picked up from it.

    Args:
        config_file: Optional path to YAML config file. When None the file
            is auto-discovered from the current directory upwards.
        section: Section name inside the YAML file.
        env_mapping: Setting name -> environment variable name.
        overrides: Explicit settings (highest priority, None values skipped).

    Returns:
        Raw (unconverted) settings dict.
    """
    config: dict[str, Any] = {}

    # 1. Load from YAML file (lowest priority after defaults)
    path = Path(config_file) if config_file else find_config_file()
    if path is not None:
        raw = load_yaml_file(path)
        scoped = get_section(raw, section) or raw
        config.update({k: v for k, v in scoped.items() if k in env_mapping})

    # 2. Override with environment variables
    for key, env_var in env_mapping.items():
        if env_val := os.getenv(env_var):
            config[key] = env_val

    # 3. Override with explicit kwargs (highest priority)
    config.update({k: v for k, v in overrides.items() if v is not None})

    return config


def parse_bool(value: Any) -> bool:
    """Interpret a config value as a boolean flag."""
    if isinstance(value, bool):
        return value
    return str(value).lower() in TRUTHY
