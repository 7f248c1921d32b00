"""Shared names and defaults for Ritsu projects."""

from __future__ import annotations

from pathlib import Path

# Metadata store file marking a project root
DB_FILE = ".db.json"

SITE_CONFIG = "site-config.yaml"
THEME_CONFIG = "theme-config.yaml"

DRAFT_DIR = "drafts"
POST_DIR = "posts"
TEMPLATE_DIR = "templates"
THEME_DIR = "themes"
TRASH_DIR = "trash"
CONTENT_DIRS = (DRAFT_DIR, POST_DIR, TEMPLATE_DIR, THEME_DIR, TRASH_DIR)

DEFAULT_DIR_NAME = "blog"
DEFAULT_GENERATE_DIR = "public"
DEFAULT_TEMPLATE = "default"
DEFAULT_THEME = "notes"
DEFAULT_POST = "ritsu"
RESOURCE_DIR = "resources"
POST_SUFFIX = ".md"

DEFAULT_THEME_REPO = "https://github.com/ritsu-blog/ritsu-theme-notes.git"

# Bundled files copied into new projects
SCAFFOLD_DIR = Path(__file__).parent / "scaffold"
