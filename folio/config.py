"""Project configuration for Folio.

Settings live in an optional ``folio.yaml`` at the project root. Missing keys
fall back to ``DEFAULT_CONFIG``.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "folio.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "content_dir": ".",
    "posts_dir": "_posts",
    "drafts_dir": "_drafts",
    "exclude": ["_site", "node_modules", "vendor", "README.md"],
    "default_layouts": {"post": "post", "page": "page"},
}


class ConfigError(Exception):
    """Raised when ``folio.yaml`` cannot be used.

    Attributes:
        source_path: Path to the configuration file.
        message: Human-readable error message.
    """

    def __init__(self, source_path: Path, message: str):
        self.source_path = source_path
        self.message = message
        super().__init__(f"{source_path}: {message}")


def load_config(project_root: Path) -> dict[str, Any]:
    """Load project configuration from folio.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    config_path = project_root / CONFIG_FILENAME
    config = copy.deepcopy(DEFAULT_CONFIG)
    if not config_path.exists():
        return config
    with open(config_path, encoding="utf-8") as f:
        try:
            loaded = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(config_path, f"Invalid YAML: {exc}") from exc
    if loaded is None:
        return config
    if not isinstance(loaded, dict):
        raise ConfigError(
            config_path, f"Expected a mapping, got {type(loaded).__name__}"
        )
    if "exclude" in loaded and not isinstance(loaded["exclude"], list):
        raise ConfigError(config_path, "'exclude' must be a list of paths")
    layouts = loaded.pop("default_layouts", None)
    if isinstance(layouts, dict):
        config["default_layouts"].update(layouts)
    config.update(loaded)
    logger.debug("Loaded configuration from %s", config_path)
    return config
