"""Post objects handed to theme templates.

A Post joins what the store knows about a published post (name, title,
publish time) with what its file holds (front matter, rendered body).

Key classes:
- Post: Dataclass representing one published post.
- PostBuilder: Builds Post instances from parsed post files.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any

from .frontmatter import PostSource, post_title
from .renderers import Heading, MarkdownRenderer
from .store import PostRecord
from .utils import from_epoch_millis


@dataclass
class Post:
    """Represents a published post with all its metadata and content.

    Attributes:
        name: Post name (file stem).
        title: Human-readable title.
        body: Raw Markdown body.
        content: Rendered HTML body.
        url: URL of the generated page.
        date: Front matter date, or the publish time when absent.
        published_at: Publish time recorded in the store.
        tags: Tags from the front matter.
        path: Path to the source file.
        metadata: Full front matter, passed through to templates.
        toc: Headings for a table of contents.
    """

    name: str
    title: str
    body: str
    content: str
    url: str
    date: datetime
    published_at: datetime
    tags: list[str]
    path: Path
    metadata: dict[str, Any] = field(default_factory=dict)
    toc: list[Heading] = field(default_factory=list)


def normalize_tags(value: Any) -> list[str]:
    """Accept tags as a list or a comma-separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple, set)):
        items = [str(item) for item in value]
    else:
        items = [str(value)]
    tags = []
    for item in items:
        tag = item.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def normalize_date(value: Any, fallback: datetime) -> datetime:
    """Turn a front matter date into a naive local datetime.

    Falls back to fallback when the value is missing or unparseable.
    """
    if isinstance(value, str) and value.strip():
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError:
            return fallback
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return fallback


class PostBuilder:
    """Builds Post objects from parsed sources and store records."""

    def __init__(self, renderer: MarkdownRenderer | None = None):
        self.renderer = renderer or MarkdownRenderer()

    def build(self, source: PostSource, record: PostRecord | None, url: str) -> Post:
        """Render a post body and collect its metadata.

        Args:
            source: Parsed post file.
            record: Store record for the post, if any.
            url: URL the post will be written to.

        Returns:
            Post ready for templating.
        """
        content, headings = self.renderer.render(source.body)
        if record is not None:
            published_at = from_epoch_millis(record.date).replace(tzinfo=None)
            title = str(source.metadata.get("title") or record.title or post_title(source))
        else:
            published_at = datetime.fromtimestamp(source.path.stat().st_mtime)
            title = post_title(source)
        return Post(
            name=source.name,
            title=title,
            body=source.body,
            content=content,
            url=url,
            date=normalize_date(source.metadata.get("date"), published_at),
            published_at=published_at,
            tags=normalize_tags(source.metadata.get("tags")),
            path=source.path,
            metadata=source.metadata,
            toc=headings,
        )
