from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence

from .content import Post


class PostCollection(Sequence[Post]):
    """Lightweight helper for working with lists of Posts in templates and code.

    Keeps the order it was given; sorting is left to templates.
    """

    def __init__(self, posts: Iterable[Post]):
        self._posts = list(posts)

    def __iter__(self) -> Iterator[Post]:
        return iter(self._posts)

    def __len__(self) -> int:
        return len(self._posts)

    def __getitem__(self, item):
        return self._posts[item]

    def with_tag(self, tag: str) -> PostCollection:
        return PostCollection(p for p in self._posts if tag in p.tags)

    def sorted(self, reverse: bool = True) -> PostCollection:
        """Sort posts by date, then by name.

        Args:
            reverse: If True (default), newest first.

        Returns:
            A new PostCollection with sorted posts.
        """
        return PostCollection(
            sorted(self._posts, key=lambda p: (p.date, p.name.lower()), reverse=reverse)
        )

    def latest(self, count: int = 5) -> PostCollection:
        return PostCollection(self.sorted()[:count])

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"PostCollection({len(self._posts)} posts)"


class TagCollection(Mapping[str, PostCollection]):
    """Mapping of tag name to PostCollection."""

    def __init__(self, mapping: dict[str, Iterable[Post]]):
        self._mapping = {k: PostCollection(v) for k, v in mapping.items()}

    def __getitem__(self, key: str) -> PostCollection:
        return self._mapping[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"TagCollection({len(self._mapping)} tags)"


def build_tags_index(posts: Iterable[Post]) -> TagCollection:
    """Build an index mapping tags to the posts carrying them.

    Args:
        posts: Iterable of Post objects.

    Returns:
        TagCollection in first-seen tag order.
    """
    tags: dict[str, list[Post]] = {}
    for post in posts:
        for tag in post.tags:
            tags.setdefault(tag, []).append(post)
    return TagCollection(tags)
