"""Template rendering engine for Ritsu.

This module uses Jinja2 to render posts and listing pages with the active
theme. Every page is composed in two steps: the page-specific partial
(``post.html.jinja``, ``index.html.jinja``, ``archive.html.jinja``) is
rendered first, and its HTML is then wrapped by the page shell
(``layout.html.jinja``) as ``page_content``.

Key class:
- TemplateEngine: Renders pages and provides context to templates.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup, escape

from .collections import PostCollection, TagCollection
from .config import EffectiveConfig
from .content import Post
from .renderers import Heading
from .utils import join_root_url

SHELL_TEMPLATE = "layout.html.jinja"
POST_TEMPLATE = "post.html.jinja"
INDEX_TEMPLATE = "index.html.jinja"
ARCHIVE_TEMPLATE = "archive.html.jinja"

DEFAULT_DATE_FORMAT = "%Y-%m-%d"

__all__ = ["TemplateEngine", "render_toc"]


def render_toc(post: Post) -> Markup:
    """Render a table of contents as nested HTML from post headings.

    Generates properly nested `<ul><li><a href="#id">text</a></li></ul>` structure
    based on heading levels.

    Args:
        post: Post object containing the toc (list of Heading objects).

    Returns:
        Markup-safe HTML string of the nested TOC, or empty Markup if no headings.
    """
    if not post.toc:
        return Markup("")
    return _render_toc_from_headings(post.toc)


def _render_toc_from_headings(headings: list[Heading]) -> Markup:
    html_parts: list[str] = []
    level_stack: list[int] = []

    for heading in headings:
        level = heading.level

        # Close nested lists if going to a shallower level
        while level_stack and level_stack[-1] > level:
            level_stack.pop()
            html_parts.append("</li></ul>")

        if level_stack and level_stack[-1] == level:
            html_parts.append("</li>")
        elif not level_stack or level > level_stack[-1]:  # pragma: no branch
            html_parts.append("<ul>")
            level_stack.append(level)

        text = Markup(heading.text).striptags()
        html_parts.append(f'<li><a href="#{escape(heading.id)}">{escape(text)}</a>')

    while level_stack:
        level_stack.pop()
        html_parts.append("</li></ul>")

    return Markup("".join(html_parts))


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Attributes:
        template_dir: Directory holding the theme templates.
        config: Effective site and theme configuration.
        env: Jinja2 environment.
        posts: Every published post, in store order.
        tags: Tag index over posts.
    """

    def __init__(self, template_dir: Path, config: EffectiveConfig):
        """Initialize the template engine.

        Args:
            template_dir: Directory with the theme templates.
            config: Effective configuration exposed to templates.
        """
        self.template_dir = template_dir
        self.config = config
        self.root_url = str(config.site.get("rootDir") or "/")
        self.env = Environment(
            loader=FileSystemLoader([template_dir]),
            autoescape=select_autoescape(["html", "xml", "html.jinja"]),
            keep_trailing_newline=True,
        )
        self.posts = PostCollection([])
        self.tags = TagCollection({})
        self._install_globals()

    def _install_globals(self) -> None:
        """Install global variables and functions in the Jinja environment."""
        self.env.globals["site"] = self.config.site
        self.env.globals["theme"] = self.config.theme
        self.env.globals["posts"] = self.posts
        self.env.globals["tags"] = self.tags
        self.env.globals["url_for"] = self.url_for
        self.env.globals["archive_url"] = self.url_for(
            f"/{self.config.dir_name('archiveDir', 'archive')}/"
        )
        self.env.globals["render_toc"] = render_toc
        self.env.filters["format_date"] = self._format_date

    def update_collections(self, posts: PostCollection, tags: TagCollection) -> None:
        self.posts = posts
        self.tags = tags
        self.env.globals["posts"] = self.posts
        self.env.globals["tags"] = self.tags

    def url_for(self, path: str) -> str:
        """Generate a URL for a site path, prefixed with rootDir.

        Args:
            path: Path inside the generated site.

        Returns:
            URL with the configured root prefix; absolute URLs are unchanged.
        """
        if path.startswith(("http://", "https://", "//")):
            return path
        return join_root_url(self.root_url, path)

    def _format_date(self, value: datetime, fmt: str | None = None) -> str:
        pattern = fmt or str(self.config.theme.get("dateFormat") or DEFAULT_DATE_FORMAT)
        return value.strftime(pattern)

    def _compose(self, partial: str, context: dict[str, Any]) -> str:
        """Render a partial, then wrap it in the page shell.

        Args:
            partial: Template name of the page partial.
            context: Variables for both templates.

        Returns:
            Rendered HTML document.
        """
        body_html = self.env.get_template(partial).render(**context)
        shell = self.env.get_template(SHELL_TEMPLATE)
        return shell.render(page_content=Markup(body_html), **context)

    def render_post(self, post: Post) -> str:
        """Render a single post page."""
        context = {
            "page_title": post.title,
            "page_type": "post",
            "post": post,
            "post_content": Markup(post.content),
        }
        return self._compose(POST_TEMPLATE, context)

    def render_index(
        self,
        page_posts: PostCollection,
        page_number: int,
        total_pages: int,
        prev_url: str | None,
        next_url: str | None,
    ) -> str:
        """Render one page of the post index."""
        context = {
            "page_title": str(self.config.site.get("siteName") or ""),
            "page_type": "index",
            "page_posts": page_posts,
            "page_number": page_number,
            "total_pages": total_pages,
            "prev_url": prev_url,
            "next_url": next_url,
        }
        return self._compose(INDEX_TEMPLATE, context)

    def render_archive(self, archive_posts: PostCollection) -> str:
        """Render the archive listing every published post."""
        context = {
            "page_title": "Archive",
            "page_type": "archive",
            "archive_posts": archive_posts,
        }
        return self._compose(ARCHIVE_TEMPLATE, context)
