"""Utility functions for Ritsu.

This module contains small helpers shared across the codebase: string
processing for post names, filesystem helpers for copying and removing
directory trees, URL joining and timestamp conversion.

Key functions:
    titleize: Convert a post name to a human-readable title.
    post_filename: Map a post name to its Markdown file name.
    copy_tree: Copy a directory tree, merging into an existing target.
    remove_tree: Recursively delete a directory tree.
    join_root_url: Join a base URL path with a relative path.
    to_epoch_millis: Convert a datetime to integer epoch milliseconds.
    from_epoch_millis: Convert epoch milliseconds back to a datetime.
"""

from __future__ import annotations

import re
import shutil
from datetime import datetime, timezone
from pathlib import Path

from .constants import POST_SUFFIX


def titleize(filename: str) -> str:
    """Convert a filename to a human-readable title.

    Removes date prefixes (YYYY-MM-DD), replaces hyphens and underscores
    with spaces, and capitalizes each word.

    Args:
        filename: Filename with or without extension.

    Returns:
        Human-readable title string.

    Examples:
        >>> titleize("2024-01-15-hello-world.md")
        'Hello World'

        >>> titleize("ritsu")
        'Ritsu'
    """
    base = Path(filename).stem
    if "-" in base:
        parts = base.split("-")
        if len(parts) >= 4 and all(p.isdigit() for p in parts[:3]):
            base = "-".join(parts[3:])
    words = re.split(r"[\s\-_]+", base)
    return " ".join(word.capitalize() for word in words if word) or "Untitled"


def post_filename(post_name: str) -> str:
    """Return the Markdown file name for a post name."""
    return f"{post_name}{POST_SUFFIX}"


def copy_tree(source: Path, target: Path) -> None:
    """Copy every file below source into target, creating directories.

    Existing files in target are overwritten; other files are left alone.

    Args:
        source: Directory to copy from.
        target: Directory to copy into.
    """
    for src_path in source.rglob("*"):
        if src_path.is_dir():
            continue
        rel_path = src_path.relative_to(source)
        dest_path = target / rel_path
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src_path, dest_path)


def remove_tree(path: Path) -> None:
    """Recursively delete a directory if it exists.

    If rmtree leaves anything behind, the remaining files and directories
    are removed bottom-up.

    Args:
        path: Directory path to delete.
    """
    if not path.exists():
        return
    shutil.rmtree(str(path), ignore_errors=True)
    if path.exists():
        # Fallback for stubborn directories
        for item in path.rglob("*"):
            if item.is_file():
                item.unlink()
        for item in sorted([p for p in path.rglob("*") if p.is_dir()], reverse=True):
            item.rmdir()
        path.rmdir()


def join_root_url(root_url: str, path: str) -> str:
    """Safely join a root URL and a path, avoiding double slashes.

    Args:
        root_url: Base URL or path prefix (e.g., /blog/ or https://example.com).
        path: Path beginning with or without a leading slash.

    Returns:
        Combined URL with proper slash handling.

    Examples:
        >>> join_root_url('/blog/', 'posts/ritsu.html')
        '/blog/posts/ritsu.html'

        >>> join_root_url('', 'about')
        '/about'
    """
    suffix = path if path.startswith("/") else f"/{path}"
    if not root_url:
        return suffix
    base = root_url.rstrip("/")
    return f"{base}{suffix}"


def to_epoch_millis(moment: datetime) -> int:
    """Convert a datetime to integer milliseconds since the Unix epoch.

    Naive datetimes are interpreted as local time.
    """
    return round(moment.timestamp() * 1000)


def from_epoch_millis(millis: int) -> datetime:
    """Convert epoch milliseconds to a timezone-aware local datetime."""
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc).astimezone()
