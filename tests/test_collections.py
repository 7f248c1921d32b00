from datetime import datetime
from pathlib import Path

from ritsu.collections import PostCollection, TagCollection, build_tags_index
from ritsu.content import Post


def make_post(name, day, tags=()):
    moment = datetime(2024, 1, day)
    return Post(
        name=name,
        title=name.title(),
        body="",
        content="",
        url=f"/posts/{name}.html",
        date=moment,
        published_at=moment,
        tags=list(tags),
        path=Path(f"{name}.md"),
    )


def test_collection_keeps_given_order():
    posts = PostCollection([make_post("b", 2), make_post("a", 1), make_post("c", 3)])
    assert [p.name for p in posts] == ["b", "a", "c"]
    assert len(posts) == 3
    assert posts[1].name == "a"


def test_sorted_and_latest():
    posts = PostCollection(
        [make_post("b", 2), make_post("a", 1), make_post("c", 3), make_post("d", 3)]
    )
    assert [p.name for p in posts.sorted()] == ["d", "c", "b", "a"]
    assert [p.name for p in posts.sorted(reverse=False)] == ["a", "b", "c", "d"]
    assert [p.name for p in posts.latest(2)] == ["d", "c"]


def test_with_tag_and_index():
    first = make_post("first", 1, ["python", "web"])
    second = make_post("second", 2, ["web"])
    posts = PostCollection([first, second, make_post("third", 3)])
    assert [p.name for p in posts.with_tag("web")] == ["first", "second"]

    tags = build_tags_index(posts)
    assert isinstance(tags, TagCollection)
    assert list(tags) == ["python", "web"]
    assert [p.name for p in tags["web"]] == ["first", "second"]
    assert len(tags) == 2
