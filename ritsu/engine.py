"""Content lifecycle operations for Ritsu.

This module implements the operations behind the CLI commands. Posts live
in exactly one of ``drafts/``, ``posts/`` or ``trash/``; publishing moves a
draft into ``posts/`` and records it in the metadata store, deleting moves a
published post into ``trash/`` and drops its record.

Every operation resolves the project root and loads the store once when it
starts, then works on that ProjectContext. The store on disk is the only
source of truth; nothing is cached between operations.

Failure handling:
- init_blog and generate create a new top-level directory and delete it
  again if anything fails, except when the directory already existed.
- publish and delete validate everything (front matter, store entry) before
  moving the file, and move it back if the store write fails.
- new_post writes a single file and needs no cleanup.

Key functions:
- init_blog: Create a new blog directory.
- new_post: Create a draft from a template.
- publish: Move a draft to posts and record it.
- delete: Move a published post to trash and drop its record.
- generate: Render the site into a new output directory.
- regenerate: Replace an existing output directory with a fresh render.
"""

from __future__ import annotations

import os
import re
import shutil
from datetime import date, datetime
from pathlib import Path

from . import log
from .build import BuildResult, RenderPipeline
from .config import (
    DEFAULT_THEME_CONFIG_PATH,
    load_default_site_config,
    load_default_theme_config,
    resolve_config,
)
from .constants import (
    CONTENT_DIRS,
    DB_FILE,
    DEFAULT_DIR_NAME,
    DEFAULT_GENERATE_DIR,
    DEFAULT_POST,
    DEFAULT_TEMPLATE,
    POST_SUFFIX,
    RESOURCE_DIR,
    SCAFFOLD_DIR,
    SITE_CONFIG,
    TEMPLATE_DIR,
    THEME_CONFIG,
)
from .errors import (
    AlreadyExistsError,
    DuplicateNameError,
    InvalidDateError,
    NotFoundError,
    RitsuError,
    TemplateNotFoundError,
    TrashCollisionError,
)
from .frontmatter import parse_post, post_title
from .project import ProjectContext, open_project
from .store import PostRecord, SiteDatabase, save_database
from .themes import fetch_theme
from .utils import post_filename, remove_tree, titleize, to_epoch_millis

CREATE_TIME_RE = re.compile(r"^createTime:.*$", re.MULTILINE)
PLACEHOLDER_RE = re.compile(r"\{\{ (title|name|date) \}\}")


def init_blog(dir_name: str | None = None, cwd: Path | None = None) -> Path:
    """Initialize a new blog directory.

    Args:
        dir_name: Name of the directory to create; defaults to ``blog``.
        cwd: Directory to create it in; defaults to the working directory.

    Returns:
        The new project root.

    Raises:
        AlreadyExistsError: If the directory exists (left untouched).
        RitsuError: For any other failure, after the new directory is removed.
    """
    dir_name = dir_name or DEFAULT_DIR_NAME
    root = (cwd or Path.cwd()).resolve() / dir_name
    if root.exists():
        raise AlreadyExistsError(
            f"A blog with the same name already exists here: {dir_name}", root
        )

    log.info("Initializing...")
    try:
        _scaffold(root)
        db = SiteDatabase(
            root_path=str(root),
            default_site_config=load_default_site_config(),
            default_theme_config=load_default_theme_config(),
        )
        save_database(root, db)
        ctx = ProjectContext(root=root, db=db)
        _create_post(ctx, DEFAULT_POST)

        log.info("Fetching theme...")
        config = resolve_config(root)
        fetch_theme(
            ctx.theme_dir,
            config.theme_name,
            config.dir_name("templateDir", "layout"),
        )
    except Exception:
        log.warn("Reverting changes...")
        remove_tree(root)
        raise

    log.success("Blog successfully initialized! You can start writing :)")
    return root


def new_post(
    post_name: str,
    template_name: str | None = None,
    cwd: Path | None = None,
) -> Path:
    """Create a new draft from a template.

    Args:
        post_name: Name of the post (file stem).
        template_name: Template under ``templates/``; the default template
            is used when omitted.
        cwd: Directory to resolve the project from.

    Returns:
        Path of the new draft.

    Raises:
        DuplicateNameError: If the name is taken in drafts, posts, trash or
            the store.
        TemplateNotFoundError: If the named template does not exist.
    """
    post_name = _clean_post_name(post_name)
    ctx = open_project(cwd)
    log.info("Creating new post...")
    draft = _create_post(ctx, post_name, template_name)
    log.success(f"New post {post_name} created at {_display(draft.parent)}.")
    log.info(f"Run {log.hint(f'ritsu publish {post_name}')} when you finish writing.")
    return draft


def publish(
    post_name: str,
    publish_date: str | date | None = None,
    cwd: Path | None = None,
) -> PostRecord:
    """Publish a draft.

    The draft's front matter is parsed before anything moves, so a malformed
    draft stays in ``drafts/``.

    Args:
        post_name: Name of the draft.
        publish_date: Publish time as an ISO date/datetime; defaults to now.
        cwd: Directory to resolve the project from.

    Returns:
        The record appended to the store.

    Raises:
        NotFoundError: If the draft does not exist.
        DuplicateNameError: If a published post of that name exists.
        MalformedFrontMatterError: If the draft's front matter is malformed.
        InvalidDateError: If publish_date cannot be parsed.
    """
    post_name = _clean_post_name(post_name)
    ctx = open_project(cwd)
    draft = ctx.draft(post_name)
    if not draft.exists():
        raise NotFoundError(f"Post {post_name} does not exist, check your post name.")
    target = ctx.post(post_name)
    if target.exists() or ctx.db.has_post(post_name):
        raise DuplicateNameError(f"Post {post_name} is already published.")
    published_at = parse_publish_date(publish_date)

    log.info("Processing...")
    source = parse_post(draft)
    record = PostRecord(
        file_name=post_name,
        title=post_title(source),
        date=to_epoch_millis(published_at),
    )
    ctx.db.add_post(record)

    ctx.post_dir.mkdir(parents=True, exist_ok=True)
    shutil.move(str(draft), str(target))
    try:
        save_database(ctx.root, ctx.db)
    except Exception:
        shutil.move(str(target), str(draft))
        raise

    log.success(f"Successfully published your post {post_name}.")
    log.info(f"Run {log.hint('ritsu generate')} to build your blog.")
    return record


def delete(post_name: str, cwd: Path | None = None) -> Path:
    """Move a published post to the trash and drop its record.

    Args:
        post_name: Name of the published post.
        cwd: Directory to resolve the project from.

    Returns:
        Path of the trashed file.

    Raises:
        NotFoundError: If the post is not published or not recorded.
        TrashCollisionError: If the trash already holds a post of that name.
    """
    post_name = _clean_post_name(post_name)
    ctx = open_project(cwd)
    published = ctx.post(post_name)
    if not published.exists():
        raise NotFoundError(
            f"Post {post_name} is either not published or does not exist."
        )
    trashed = ctx.trashed(post_name)
    if trashed.exists():
        raise TrashCollisionError(
            f"A post with the same name already exists in directory {_display(ctx.trash_dir)}."
        )
    if not ctx.db.remove_post(post_name):
        raise NotFoundError(f"Post {post_name} is not recorded as published.")

    log.info("Deleting...")
    ctx.trash_dir.mkdir(parents=True, exist_ok=True)
    shutil.move(str(published), str(trashed))
    try:
        save_database(ctx.root, ctx.db)
    except Exception:
        shutil.move(str(trashed), str(published))
        raise

    log.success(
        f"Successfully deleted your post {post_name}, you can still find the post"
        f" inside {_display(ctx.trash_dir)} folder."
    )
    log.info(
        f"If you want to restore the post, move it to {_display(ctx.draft_dir)}"
        " folder and publish it again."
    )
    return trashed


def generate(dir_name: str | None = None, cwd: Path | None = None) -> BuildResult:
    """Render the site into a new directory at the project root.

    Args:
        dir_name: Output directory name; defaults to ``public``.
        cwd: Directory to resolve the project from.

    Returns:
        BuildResult of the render.

    Raises:
        AlreadyExistsError: If the output directory exists (left untouched).
        RitsuError: For any other failure, after the output directory is removed.
    """
    ctx = open_project(cwd)
    dir_name = dir_name or DEFAULT_GENERATE_DIR
    return _generate(ctx, dir_name)


def regenerate(dir_name: str | None = None, cwd: Path | None = None) -> BuildResult:
    """Remove an existing output directory, then generate into it again."""
    ctx = open_project(cwd)
    dir_name = dir_name or DEFAULT_GENERATE_DIR
    output_dir = _output_dir(ctx, dir_name)
    if output_dir.exists():
        log.info(f"Removing {_display(output_dir)}...")
        remove_tree(output_dir)
    return _generate(ctx, dir_name)


def _generate(ctx: ProjectContext, dir_name: str) -> BuildResult:
    output_dir = _output_dir(ctx, dir_name)
    if output_dir.exists():
        raise AlreadyExistsError(
            f"Directory {_display(output_dir)} already exists. Run"
            f" `ritsu regenerate {dir_name}` to regenerate blog or specify"
            " another directory name.",
            output_dir,
        )
    config = resolve_config(ctx.root)

    log.info("Generating...")
    try:
        output_dir.mkdir()
        (output_dir / RESOURCE_DIR).mkdir()
        records = {record.file_name: record for record in ctx.db.post_data}
        result = RenderPipeline(ctx.root, config, output_dir).render(
            ctx.db.file_names(), records
        )
    except Exception:
        log.warn("Reverting changes...")
        remove_tree(output_dir)
        raise

    log.success(f"Blog successfully generated in {_display(output_dir)} directory!")
    return result


def _scaffold(root: Path) -> None:
    """Create the directory skeleton and seed the user-editable files.

    Args:
        root: Root directory for the new project; must not exist.
    """
    root.mkdir(parents=True)
    for name in CONTENT_DIRS:
        (root / name).mkdir()

    site_config = (SCAFFOLD_DIR / SITE_CONFIG).read_text(encoding="utf-8")
    stamp = datetime.now().strftime("%Y-%m-%d")
    site_config = CREATE_TIME_RE.sub(f'createTime: "{stamp}"', site_config, count=1)
    (root / SITE_CONFIG).write_text(site_config, encoding="utf-8")

    default_template = post_filename(DEFAULT_TEMPLATE)
    shutil.copy2(
        SCAFFOLD_DIR / TEMPLATE_DIR / default_template,
        root / TEMPLATE_DIR / default_template,
    )
    shutil.copy2(DEFAULT_THEME_CONFIG_PATH, root / THEME_CONFIG)


def _create_post(
    ctx: ProjectContext, post_name: str, template_name: str | None = None
) -> Path:
    """Write ``drafts/<post_name>.md`` from a template.

    The default template is copied from the package into ``templates/``
    the first time it is needed.
    """
    draft = ctx.draft(post_name)
    if (
        draft.exists()
        or ctx.post(post_name).exists()
        or ctx.trashed(post_name).exists()
        or ctx.db.has_post(post_name)
    ):
        raise DuplicateNameError(f"Duplicate post name {post_name}.")

    if template_name:
        template_path = ctx.template_dir / post_filename(template_name)
        if not template_path.exists():
            raise TemplateNotFoundError(f"Template '{template_name}' does not exist.")
    else:
        template_path = ctx.template_dir / post_filename(DEFAULT_TEMPLATE)
        if not template_path.exists():
            template_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(
                SCAFFOLD_DIR / TEMPLATE_DIR / post_filename(DEFAULT_TEMPLATE),
                template_path,
            )

    content = render_post_template(template_path, post_name)
    ctx.draft_dir.mkdir(parents=True, exist_ok=True)
    draft.write_bytes(content)
    return draft


def render_post_template(template_path: Path, post_name: str) -> bytes:
    """Copy a template, filling the ``title``, ``name`` and ``date`` placeholders.

    Only the exact tokens ``{{ title }}``, ``{{ name }}`` and ``{{ date }}``
    are replaced; every other byte is copied as is. A template that is not
    UTF-8 text is copied unchanged.
    """
    source = template_path.read_bytes()
    try:
        text = source.decode("utf-8")
    except UnicodeDecodeError:
        return source
    values = {
        "title": titleize(post_name),
        "name": post_name,
        "date": datetime.now().strftime("%Y-%m-%d"),
    }
    return PLACEHOLDER_RE.sub(lambda m: values[m.group(1)], text).encode("utf-8")


def parse_publish_date(value: str | date | None) -> datetime:
    """Interpret a publish date argument.

    Args:
        value: None for now, a date/datetime, or an ISO 8601 string.

    Returns:
        The publish time.

    Raises:
        InvalidDateError: If a string is not ISO 8601.
    """
    if value is None:
        return datetime.now()
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise InvalidDateError(
            f"Invalid date '{value}', expected a date like 2024-01-31 or 2024-01-31T09:30."
        ) from exc


def _clean_post_name(post_name: str) -> str:
    """Strip a trailing .md and reject names that are not plain file stems."""
    name = (post_name or "").strip()
    if name.endswith(POST_SUFFIX):
        name = name[: -len(POST_SUFFIX)]
    if not name or name in {".", ".."} or "/" in name or "\\" in name:
        raise RitsuError(f"Invalid post name '{post_name}'.")
    return name


def _output_dir(ctx: ProjectContext, dir_name: str) -> Path:
    """Resolve an output directory directly below the root, away from content."""
    output_dir = (ctx.root / dir_name).resolve()
    reserved = {*CONTENT_DIRS, DB_FILE, SITE_CONFIG, THEME_CONFIG}
    if output_dir.parent != ctx.root or output_dir.name in reserved:
        raise RitsuError(f"Cannot use '{dir_name}' as the output directory.")
    return output_dir


def _display(path: Path) -> str:
    """Show a path relative to the working directory when it is below it."""
    try:
        rel = os.path.relpath(path, Path.cwd())
    except ValueError:
        return str(path)
    return "current directory" if rel == "." else rel
