from datetime import date

import pytest

from ritsu.errors import MalformedFrontMatterError, RitsuError
from ritsu.frontmatter import PostSource, extract_frontmatter, parse_post, post_title


def test_parse_post_splits_metadata_and_body(tmp_path):
    path = tmp_path / "hello.md"
    path.write_text(
        "---\ntitle: Hello World\ndate: 2024-01-15\ntags: [python, web]\n---\n\n# Heading\n\nBody.\n",
        encoding="utf-8",
    )
    source = parse_post(path)
    assert source.metadata == {
        "title": "Hello World",
        "date": date(2024, 1, 15),
        "tags": ["python", "web"],
    }
    assert source.body == "\n# Heading\n\nBody.\n"
    assert source.name == "hello"


def test_parse_post_without_front_matter(tmp_path):
    path = tmp_path / "plain.md"
    path.write_text("# Just Markdown\n\n---\n\nAfter a rule.\n", encoding="utf-8")
    source = parse_post(path)
    assert source.metadata == {}
    assert source.body == "# Just Markdown\n\n---\n\nAfter a rule.\n"


def test_parse_post_handles_crlf_and_missing_trailing_newline(tmp_path):
    path = tmp_path / "crlf.md"
    path.write_bytes(b"---\r\ntitle: Windows\r\n---\r\nBody\r\n")
    assert parse_post(path).metadata == {"title": "Windows"}

    path = tmp_path / "only.md"
    path.write_text("---\ntitle: Only Meta\n---", encoding="utf-8")
    source = parse_post(path)
    assert source.metadata == {"title": "Only Meta"}
    assert source.body == ""


@pytest.mark.parametrize(
    "text, reason",
    [
        ("---\ntitle: Never Closed\n\nBody\n", "closing"),
        ("---\ntags: [a]\n---\nBody\n", "title"),
        ("---\ntitle: ''\n---\nBody\n", "title"),
        ("---\n---\nBody\n", "title"),
        ("---\ntitle: [unbalanced\n---\nBody\n", "YAML"),
        ("---\n- just\n- a list\n---\nBody\n", "mapping"),
    ],
)
def test_parse_post_rejects_malformed_front_matter(tmp_path, text, reason):
    path = tmp_path / "bad.md"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(MalformedFrontMatterError) as excinfo:
        parse_post(path)
    assert excinfo.value.path == path
    assert reason in excinfo.value.message
    assert excinfo.value.message.startswith("Malformed front matter in bad.md")


def test_extract_frontmatter_leaves_body_untouched(tmp_path):
    text = "---\ntitle: T\nlayout: wide\n---\nKeep **this** `---` as is.\n"
    metadata, body = extract_frontmatter(text, tmp_path / "t.md")
    assert metadata == {"title": "T", "layout": "wide"}
    assert body == "Keep **this** `---` as is.\n"


def test_post_title_fallbacks(tmp_path):
    path = tmp_path / "2024-01-02-my-first-post.md"
    assert post_title(PostSource(path, {"title": " Given "}, "# Heading")) == "Given"
    assert post_title(PostSource(path, {}, "intro\n# From Heading\n")) == "From Heading"
    assert post_title(PostSource(path, {}, "no heading")) == "My First Post"


def test_parse_post_rejects_non_utf8(tmp_path):
    path = tmp_path / "bin.md"
    path.write_bytes(b"---\ntitle: x\n---\n\xff\xfe bad\n")
    with pytest.raises(RitsuError) as excinfo:
        parse_post(path)
    assert excinfo.value.message == "Cannot read bin.md: not valid UTF-8 text"


def test_yaml_error_is_reported_on_one_line(tmp_path):
    path = tmp_path / "bad.md"
    path.write_text("---\ntitle: ok\ntags: [a\n---\nBody\n", encoding="utf-8")
    with pytest.raises(MalformedFrontMatterError) as excinfo:
        parse_post(path)
    assert "\n" not in excinfo.value.message
