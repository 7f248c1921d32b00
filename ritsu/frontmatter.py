"""Front matter parsing for Ritsu posts.

A post may start with a YAML block between two ``---`` lines. The block is
optional, but once started it must be closed, must parse to a mapping and
must carry a non-empty ``title``. Everything after the block is returned
untouched as the post body.

Key classes:
- PostSource: Parsed post file (metadata plus raw body).

Key functions:
- extract_frontmatter: Split a front matter block from text.
- parse_post: Read and parse a post file.
- post_title: Pick the title to record for a post.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import MalformedFrontMatterError, RitsuError
from .utils import titleize

FRONTMATTER_START_RE = re.compile(r"\A---[ \t]*\r?\n")
FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE
)

REQUIRED_FIELDS = ("title",)


@dataclass
class PostSource:
    """A post file split into front matter and body.

    Attributes:
        path: Path to the source file.
        metadata: Front matter fields; empty when the post has none.
        body: Markdown text after the front matter block.
    """

    path: Path
    metadata: dict[str, Any] = field(default_factory=dict)
    body: str = ""

    @property
    def name(self) -> str:
        return self.path.stem


def extract_frontmatter(text: str, path: Path) -> tuple[dict[str, Any], str]:
    """Extract YAML front matter from content.

    Args:
        text: Raw file content.
        path: Path of the file, used in error messages.

    Returns:
        Tuple of (front matter dict, remaining content).

    Raises:
        MalformedFrontMatterError: If the block is unterminated, is not
            valid YAML or is not a mapping.
    """
    if not FRONTMATTER_START_RE.match(text):
        return {}, text
    match = FRONTMATTER_RE.match(text)
    if not match:
        raise MalformedFrontMatterError(path, "closing '---' not found")
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        problem = getattr(exc, "problem", None) or "cannot parse"
        mark = getattr(exc, "problem_mark", None)
        if mark is not None:
            # +2: the opening delimiter line, and 1-based numbering
            problem = f"{problem} on line {mark.line + 2}"
        raise MalformedFrontMatterError(path, f"invalid YAML ({problem})") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MalformedFrontMatterError(path, "front matter must be a mapping")
    return data, text[match.end() :]


def parse_post(path: Path) -> PostSource:
    """Read a post file and split off its front matter.

    Args:
        path: Path to the Markdown post.

    Returns:
        PostSource with the metadata and the raw body.

    Raises:
        MalformedFrontMatterError: If a started block is malformed or lacks
            a required field.
        RitsuError: If the file is not UTF-8 text.
        OSError: If the file cannot be read.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise RitsuError(f"Cannot read {path.name}: not valid UTF-8 text") from exc
    started = bool(FRONTMATTER_START_RE.match(text))
    metadata, body = extract_frontmatter(text, path)
    if started:
        for name in REQUIRED_FIELDS:
            value = metadata.get(name)
            if value is None or not str(value).strip():
                raise MalformedFrontMatterError(path, f"missing required field '{name}'")
    return PostSource(path=path, metadata=metadata, body=body)


def post_title(source: PostSource) -> str:
    """Return the title of a post.

    Uses the front matter title, then the first level-1 heading in the body,
    then the titleized file name.
    """
    title = source.metadata.get("title")
    if title is not None and str(title).strip():
        return str(title).strip()
    for line in source.body.splitlines():
        stripped = line.strip()
        if stripped.startswith("# "):
            return stripped.lstrip("# ").strip()
    return titleize(source.path.name)
