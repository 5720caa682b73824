"""Site configuration for Folio.

Configuration lives in ``folio.yaml`` at the project root. Values found there
are merged over :data:`DEFAULT_CONFIG`; a missing file means all defaults.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "folio.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "title": "",
    "description": "",
    "lang": "en-US",
    "posts_dir": "posts",
    "listing_dir": "blogs",
    "listing_title": "Blogs",
    "page_size": 10,
    "posts_index": ".vitepress/posts.json",
    "public_dir": "public",
    "templates_dir": "_templates",
    "blogs_component": "../.vitepress/theme/components/Blogs.vue",
    "exclude": ["README.md"],
    "sitemap": {"hostname": ""},
}


class ConfigError(ValueError):
    """Raised when folio.yaml holds a value Folio cannot work with."""


def validate_page_size(value: Any) -> int:
    """Return ``value`` as a page size, rejecting non-positive numbers.

    Raises:
        ConfigError: If the value is not a positive integer.
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"page_size must be a positive integer, got {value!r}")
    return value


def load_config(project_root: Path) -> dict[str, Any]:
    """Load site configuration from folio.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.

    Raises:
        ConfigError: If the file is not valid YAML or page_size is invalid.
    """
    config_path = project_root / CONFIG_FILENAME
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f"{config_path}: {exc}") from exc
        if isinstance(loaded, dict):
            config.update(loaded)
    if not isinstance(config.get("sitemap"), dict):
        config["sitemap"] = {"hostname": str(config.get("sitemap") or "")}
    if isinstance(config.get("exclude"), str):
        config["exclude"] = [config["exclude"]]
    config["page_size"] = validate_page_size(config.get("page_size"))
    return config
