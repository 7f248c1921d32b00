"""Configuration loading for Ritsu.

Each project carries two user-editable YAML files at its root:
``site-config.yaml`` for site-wide settings and ``theme-config.yaml`` for
settings of the active theme. The package ships default versions of both;
they seed new projects and fill in keys a user file leaves out.

Key functions:
- load_default_site_config: Shipped site configuration.
- load_default_theme_config: Shipped theme configuration.
- resolve_config: Effective configuration used for rendering.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .constants import DEFAULT_THEME, SCAFFOLD_DIR, SITE_CONFIG, THEME_CONFIG, THEME_DIR
from .errors import ConfigError

DEFAULT_SITE_CONFIG_PATH = SCAFFOLD_DIR / SITE_CONFIG
DEFAULT_THEME_CONFIG_PATH = SCAFFOLD_DIR / THEME_DIR / DEFAULT_THEME / THEME_CONFIG


@dataclass
class EffectiveConfig:
    """Merged site and theme configuration.

    Attributes:
        site: Site configuration (siteName, author, directory names, ...).
        theme: Theme configuration, open-ended.
    """

    site: dict[str, Any] = field(default_factory=dict)
    theme: dict[str, Any] = field(default_factory=dict)

    @property
    def theme_name(self) -> str:
        return str(self.site.get("theme") or DEFAULT_THEME)

    def dir_name(self, key: str, default: str) -> str:
        """Return a directory-name override, stripped of slashes."""
        value = str(self.site.get(key) or default).strip("/")
        return value or default


def read_yaml_mapping(path: Path) -> dict[str, Any]:
    """Load a YAML file whose top level must be a mapping.

    Args:
        path: File to read.

    Returns:
        Parsed mapping (empty for an empty file).

    Raises:
        ConfigError: If the file is missing, unparseable or not a mapping.
    """
    if not path.exists():
        raise ConfigError(f"Configuration file {path.name} not found in {path.parent}")
    try:
        with open(path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Cannot parse {path.name}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f"Cannot read {path.name}: not valid UTF-8 text") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping of settings")
    return loaded


def load_default_site_config() -> dict[str, Any]:
    return read_yaml_mapping(DEFAULT_SITE_CONFIG_PATH)


def load_default_theme_config() -> dict[str, Any]:
    return read_yaml_mapping(DEFAULT_THEME_CONFIG_PATH)


def resolve_config(root: Path) -> EffectiveConfig:
    """Build the effective configuration of a project.

    User values override the shipped defaults key by key. The user files
    themselves are mandatory.

    Args:
        root: Project root directory.

    Returns:
        EffectiveConfig for rendering.
    """
    site = load_default_site_config()
    site.update(read_yaml_mapping(root / SITE_CONFIG))
    theme = load_default_theme_config()
    theme.update(read_yaml_mapping(root / THEME_CONFIG))
    return EffectiveConfig(site=site, theme=theme)
