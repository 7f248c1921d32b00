"""Markdown rendering for Ritsu posts.

Post bodies are converted to HTML with mistune. Headings get stable anchor
ids and are collected for a table of contents; fenced code blocks with a
language are highlighted with Pygments.

Key classes:
- Heading: A heading collected while rendering.
- MarkdownRenderer: Renders a Markdown body to HTML.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import mistune
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

MARKDOWN_PLUGINS = ["strikethrough", "footnotes", "table", "url"]


@dataclass
class Heading:
    """Represents a heading extracted from markdown content for TOC generation.

    Attributes:
        id: Anchor ID for the heading (URL-friendly slug).
        text: The text content of the heading.
        level: Heading level (1-6).
    """

    id: str
    text: str
    level: int


def _generate_heading_id(text: str) -> str:
    """Generate a URL-friendly ID from heading text.

    Args:
        text: The heading text.

    Returns:
        URL-friendly slug suitable for anchor links.
    """
    slug = re.sub(r"<[^>]+>", "", text).lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s]+", "-", slug)
    return slug.strip("-") or "section"


class _HighlightRenderer(mistune.HTMLRenderer):
    """Markdown renderer with heading anchors and syntax highlighting.

    Attributes:
        headings: Headings in document order.
    """

    def __init__(self):
        super().__init__(escape=False)
        self.headings: list[Heading] = []
        self._heading_id_counts: dict[str, int] = {}

    def heading(self, text: str, level: int, **attrs) -> str:
        base_id = _generate_heading_id(text)

        if base_id in self._heading_id_counts:
            self._heading_id_counts[base_id] += 1
            heading_id = f"{base_id}-{self._heading_id_counts[base_id]}"
        else:
            self._heading_id_counts[base_id] = 0
            heading_id = base_id

        self.headings.append(Heading(id=heading_id, text=text, level=level))
        return f'<h{level} id="{heading_id}">{text}</h{level}>\n'

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a code block, highlighted when the language is known.

        Args:
            code: The code content.
            info: Language identifier (e.g., 'python', 'javascript').

        Returns:
            HTML string with highlighted code.
        """
        lang = info.split()[0] if info and info.strip() else ""
        if lang:
            try:
                lexer = get_lexer_by_name(lang, stripall=True)
            except ClassNotFound:
                lexer = None
            if lexer is not None:
                formatter = HtmlFormatter(nowrap=False, cssclass="highlight")
                return highlight(code, lexer, formatter)
        escaped = code.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        lang_class = f' class="language-{lang}"' if lang else ""
        return f"<pre><code{lang_class}>{escaped}</code></pre>\n"


class MarkdownRenderer:
    """Renders Markdown post bodies to HTML."""

    def render(self, content: str) -> tuple[str, list[Heading]]:
        """Render Markdown content to HTML.

        Args:
            content: Markdown source content.

        Returns:
            Tuple of (rendered HTML, list of Heading objects).
        """
        renderer = _HighlightRenderer()
        markdown = mistune.create_markdown(renderer=renderer, plugins=MARKDOWN_PLUGINS)
        html = markdown(content)
        return html, renderer.headings


def pygments_css() -> str:
    """Return Pygments CSS styles for the .highlight class."""
    return HtmlFormatter().get_style_defs(".highlight")
