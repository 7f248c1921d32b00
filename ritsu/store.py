"""Metadata store for Ritsu projects.

The store is a single JSON file (``.db.json``) at the project root. It holds
the project root path, snapshots of the shipped default configurations taken
at init time, and one record per published post in publish order.

Every write replaces the whole file. There is no locking or version check:
two invocations running against the same project at once can lose updates.

Key classes:
- PostRecord: One published post.
- SiteDatabase: The full store record.

Key functions:
- load_database: Read the store file of a project root.
- save_database: Overwrite the store file of a project root.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .constants import DB_FILE
from .errors import RitsuError


@dataclass
class PostRecord:
    """A published post as tracked by the store.

    Attributes:
        file_name: Post name (file stem), unique within the store.
        title: Title taken from the post's front matter at publish time.
        date: Publish time in integer epoch milliseconds.
    """

    file_name: str
    title: str
    date: int

    def to_dict(self) -> dict[str, Any]:
        return {"fileName": self.file_name, "title": self.title, "date": self.date}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> PostRecord:
        return cls(
            file_name=str(payload["fileName"]),
            title=str(payload.get("title") or ""),
            date=int(payload.get("date") or 0),
        )


@dataclass
class SiteDatabase:
    """The full content of a project's ``.db.json``.

    Attributes:
        root_path: Absolute project root recorded at init.
        default_site_config: Shipped site configuration at init time.
        default_theme_config: Shipped theme configuration at init time.
        post_data: Published posts in publish order.
    """

    root_path: str
    default_site_config: dict[str, Any] = field(default_factory=dict)
    default_theme_config: dict[str, Any] = field(default_factory=dict)
    post_data: list[PostRecord] = field(default_factory=list)

    def has_post(self, file_name: str) -> bool:
        """Check whether a post with this exact file name is recorded."""
        return any(post.file_name == file_name for post in self.post_data)

    def get_post(self, file_name: str) -> PostRecord | None:
        for post in self.post_data:
            if post.file_name == file_name:
                return post
        return None

    def add_post(self, record: PostRecord) -> None:
        """Append a record, keeping file names unique.

        Raises:
            ValueError: If a record with the same file name already exists.
        """
        if self.has_post(record.file_name):
            raise ValueError(f"Post {record.file_name} is already recorded")
        self.post_data.append(record)

    def remove_post(self, file_name: str) -> bool:
        """Remove the record with this file name.

        Returns:
            True if a record was removed, False if none matched.
        """
        for index, post in enumerate(self.post_data):
            if post.file_name == file_name:
                del self.post_data[index]
                return True
        return False

    def file_names(self) -> list[str]:
        return [post.file_name for post in self.post_data]

    def to_dict(self) -> dict[str, Any]:
        return {
            "rootPath": self.root_path,
            "defaultSiteConfig": self.default_site_config,
            "defaultThemeConfig": self.default_theme_config,
            "postData": [post.to_dict() for post in self.post_data],
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> SiteDatabase:
        return cls(
            root_path=str(payload.get("rootPath", "")),
            default_site_config=dict(payload.get("defaultSiteConfig") or {}),
            default_theme_config=dict(payload.get("defaultThemeConfig") or {}),
            post_data=[PostRecord.from_dict(p) for p in payload.get("postData") or []],
        )


def database_path(root: Path) -> Path:
    return root / DB_FILE


def load_database(root: Path) -> SiteDatabase:
    """Load the metadata store of a project.

    Args:
        root: Project root directory.

    Returns:
        The parsed SiteDatabase.

    Raises:
        OSError: If the store file cannot be read.
        RitsuError: If the store file is not a JSON object or a post record
            is malformed.
    """
    path = database_path(root)
    with open(path, encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise RitsuError(f"Cannot parse {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise RitsuError(f"{path} does not contain a JSON object")
    try:
        return SiteDatabase.from_dict(payload)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise RitsuError(f"{path} is malformed: {exc!r}") from exc


def save_database(root: Path, db: SiteDatabase) -> None:
    """Serialize the whole record and overwrite the store file.

    Args:
        root: Project root directory.
        db: Record to write.
    """
    database_path(root).write_text(
        json.dumps(db.to_dict(), indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
