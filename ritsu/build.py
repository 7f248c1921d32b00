"""Site rendering for Ritsu.

This module turns the published posts of a project into a static site. It
parses every post, renders it through the active theme, writes one HTML
file per post plus the index and archive pages, and copies the theme's
static resources.

Rendering is all-or-nothing: the first post that fails to parse or render
aborts the whole run with a BuildError. Cleaning up the partially written
output directory is the caller's job.

Key classes:
- RenderPipeline: Renders a list of published posts into an output directory.
- BuildResult: Summary of a finished render.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from jinja2 import TemplateNotFound, TemplateSyntaxError

from .collections import PostCollection, build_tags_index
from .config import EffectiveConfig
from .constants import POST_DIR, RESOURCE_DIR, THEME_DIR
from .content import Post, PostBuilder
from .errors import BuildError, RitsuError
from .frontmatter import parse_post
from .renderers import pygments_css
from .store import PostRecord
from .templates import TemplateEngine
from .utils import copy_tree, post_filename

DEFAULT_POSTS_PER_PAGE = 10


@dataclass
class BuildResult:
    """Result of a site render.

    Attributes:
        posts: Rendered posts in the order they were given.
        output_dir: Directory the site was written to.
        files: Every HTML file written, in write order.
    """

    posts: PostCollection
    output_dir: Path
    files: list[Path] = field(default_factory=list)


class RenderPipeline:
    """Renders published posts and theme templates into a static site.

    Attributes:
        root: Project root directory.
        config: Effective configuration.
        output_dir: Existing, empty directory to write into.
        theme_dir: Directory of the active theme.
        template_dir: Directory holding the theme's Jinja templates.
    """

    def __init__(
        self,
        root: Path,
        config: EffectiveConfig,
        output_dir: Path,
        post_builder: PostBuilder | None = None,
    ):
        self.root = root
        self.config = config
        self.output_dir = output_dir
        self.post_source_dir = root / POST_DIR
        self.theme_dir = root / THEME_DIR / config.theme_name
        self.template_dir = self.theme_dir / config.dir_name("templateDir", "layout")
        self.post_builder = post_builder or PostBuilder()
        self.post_dir_name = config.dir_name("postDir", "posts")
        self.page_dir_name = config.dir_name("pageDir", "page")
        self.archive_dir_name = config.dir_name("archiveDir", "archive")

    def render(
        self,
        file_names: Iterable[str],
        records: Mapping[str, PostRecord] | None = None,
    ) -> BuildResult:
        """Render every listed post plus listing pages and resources.

        Args:
            file_names: Post names in store order.
            records: Store records keyed by post name, for titles and dates.

        Returns:
            BuildResult describing what was written.

        Raises:
            BuildError: If the theme is missing or any post fails.
        """
        if not self.template_dir.is_dir():
            raise BuildError(
                self.theme_dir,
                f"Theme templates not found in {self.template_dir}",
            )
        records = records or {}
        engine = TemplateEngine(self.template_dir, self.config)
        posts = PostCollection(self._load_post(name, records.get(name)) for name in file_names)
        engine.update_collections(posts, build_tags_index(posts))

        result = BuildResult(posts=posts, output_dir=self.output_dir)
        for post in posts:
            html = self._render(post.path, lambda p=post: engine.render_post(p))
            result.files.append(self._write(self._post_target(post.name), html))
        self._write_index_pages(engine, posts, result)
        archive_html = self._render(
            self.template_dir, lambda: engine.render_archive(posts)
        )
        result.files.append(
            self._write(self.output_dir / self.archive_dir_name / "index.html", archive_html)
        )
        self._write_resources()
        return result

    def _load_post(self, name: str, record: PostRecord | None) -> Post:
        path = self.post_source_dir / post_filename(name)
        try:
            source = parse_post(path)
            return self.post_builder.build(source, record, self._post_url(name))
        except RitsuError as exc:
            raise BuildError(path, exc.message, exc) from exc
        except Exception as exc:
            raise BuildError(path, _format_error_message(exc), exc) from exc

    def _render(self, source_path: Path, render) -> str:
        try:
            return render()
        except TemplateSyntaxError as exc:
            raise BuildError(
                Path(exc.filename) if exc.filename else source_path,
                f"Template syntax error on line {exc.lineno}: {exc.message}",
                exc,
            ) from exc
        except TemplateNotFound as exc:
            raise BuildError(source_path, f"Template not found: {exc.name}", exc) from exc
        except Exception as exc:
            raise BuildError(source_path, _format_error_message(exc), exc) from exc

    def _write_index_pages(
        self, engine: TemplateEngine, posts: PostCollection, result: BuildResult
    ) -> None:
        """Write the paginated index, newest publication first."""
        newest_first = list(reversed(list(posts)))
        per_page = self._posts_per_page()
        chunks = [
            newest_first[i : i + per_page] for i in range(0, len(newest_first), per_page)
        ] or [[]]
        total = len(chunks)
        for number, chunk in enumerate(chunks, start=1):
            prev_url = engine.url_for(self._index_url(number - 1)) if number > 1 else None
            next_url = engine.url_for(self._index_url(number + 1)) if number < total else None
            html = self._render(
                self.template_dir,
                lambda c=chunk, n=number, p=prev_url, x=next_url: engine.render_index(
                    PostCollection(c), n, total, p, x
                ),
            )
            result.files.append(self._write(self._index_target(number), html))

    def _write_resources(self) -> None:
        resource_dir = self.output_dir / RESOURCE_DIR
        resource_dir.mkdir(parents=True, exist_ok=True)
        theme_resources = self.theme_dir / RESOURCE_DIR
        if theme_resources.is_dir():
            copy_tree(theme_resources, resource_dir)
        (resource_dir / "pygments.css").write_text(pygments_css(), encoding="utf-8")

    def _posts_per_page(self) -> int:
        value = self.config.theme.get("postsPerPage", DEFAULT_POSTS_PER_PAGE)
        try:
            per_page = int(value)
        except (TypeError, ValueError):
            return DEFAULT_POSTS_PER_PAGE
        return per_page if per_page > 0 else DEFAULT_POSTS_PER_PAGE

    def _post_url(self, name: str) -> str:
        return f"/{self.post_dir_name}/{name}.html"

    def _post_target(self, name: str) -> Path:
        return self.output_dir / self.post_dir_name / f"{name}.html"

    def _index_url(self, number: int) -> str:
        return "/" if number == 1 else f"/{self.page_dir_name}/{number}.html"

    def _index_target(self, number: int) -> Path:
        if number == 1:
            return self.output_dir / "index.html"
        return self.output_dir / self.page_dir_name / f"{number}.html"

    @staticmethod
    def _write(target: Path, html: str) -> Path:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(html, encoding="utf-8")
        return target


def _format_error_message(exc: Exception) -> str:
    """Format an exception into a user-friendly error message.

    Args:
        exc: The exception to format.

    Returns:
        A human-readable error message.
    """
    error_type = type(exc).__name__
    error_msg = str(exc)

    if error_type == "UndefinedError":
        return f"Undefined variable: {error_msg}"
    if error_type == "TypeError":
        return f"Type error: {error_msg}"
    if error_type == "AttributeError":
        return f"Attribute error: {error_msg}"

    return f"{error_type}: {error_msg}"
