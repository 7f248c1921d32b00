"""Command-line interface for Ritsu.

This module defines the CLI commands using Click framework.
Each command is a thin wrapper over an operation in the engine module and
is the single place where failures are reported: an expected failure is
printed as one line on stderr and the process exits with status 1.

Commands:
- init: Create a new blog directory.
- new: Create a new draft (prompts for a name when none is given).
- publish: Publish a draft.
- delete: Move a published post to the trash.
- generate: Render the site into a new output directory.
- regenerate: Render the site, replacing an existing output directory.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

import click
import questionary
import yaml

from . import __version__, log
from .constants import DEFAULT_TEMPLATE, POST_SUFFIX
from .errors import RitsuError

T = TypeVar("T")


@click.group()
@click.version_option(version=__version__, prog_name="ritsu")
def cli():
    """Ritsu static blog generator."""


@cli.command()
@click.argument("dir_name", required=False)
def init(dir_name: str | None):
    """Initialize a new blog in DIR_NAME (default: blog)."""
    from .engine import init_blog

    _run(lambda: init_blog(dir_name))


@cli.command()
@click.argument("post_name", required=False)
@click.option("--template", "-t", "template_name", help="Template under templates/")
def new(post_name: str | None, template_name: str | None):
    """Create a new draft post."""
    from .engine import new_post

    if post_name is None:
        post_name = _prompt_post_name()
        if template_name is None:
            template_name = _prompt_template()
    _run(lambda: new_post(post_name, template_name))


@cli.command()
@click.argument("post_name")
@click.option(
    "--date",
    "-d",
    "publish_date",
    help="Publish date in ISO format, e.g. 2024-01-31 (default: now)",
)
def publish(post_name: str, publish_date: str | None):
    """Publish a draft post."""
    from .engine import publish as publish_post

    _run(lambda: publish_post(post_name, publish_date))


@cli.command()
@click.argument("post_name")
def delete(post_name: str):
    """Move a published post to the trash."""
    from .engine import delete as delete_post

    _run(lambda: delete_post(post_name))


@cli.command()
@click.argument("dir_name", required=False)
def generate(dir_name: str | None):
    """Generate the site into DIR_NAME (default: public)."""
    from .engine import generate as generate_site

    result = _run(lambda: generate_site(dir_name))
    click.echo(f"Rendered {len(result.posts)} posts into {result.output_dir}")


@cli.command()
@click.argument("dir_name", required=False)
def regenerate(dir_name: str | None):
    """Regenerate the site, replacing DIR_NAME (default: public)."""
    from .engine import regenerate as regenerate_site

    result = _run(lambda: regenerate_site(dir_name))
    click.echo(f"Rendered {len(result.posts)} posts into {result.output_dir}")


def _run(operation: Callable[[], T]) -> T:
    """Run an engine operation, turning failures into a one-line message."""
    try:
        return operation()
    except RitsuError as exc:
        log.error(exc.message)
    except (OSError, yaml.YAMLError) as exc:
        log.error(f"{type(exc).__name__}: {exc}")
    raise SystemExit(1)


def _prompt_post_name() -> str:
    name = questionary.text(
        "Post name (without .md extension):",
        validate=lambda x: len(x.strip()) > 0 or "Post name cannot be empty",
        style=_questionary_style(),
    ).ask()
    if name is None:
        raise click.Abort()
    return name.strip()


def _prompt_template() -> str | None:
    """Let the user pick a template when the project has more than one."""
    from .project import open_project

    try:
        ctx = open_project()
    except RitsuError:
        return None
    choices = _get_template_names(ctx.template_dir)
    if len(choices) < 2:
        return None
    template = questionary.select(
        "Select template:",
        choices=choices,
        default=DEFAULT_TEMPLATE if DEFAULT_TEMPLATE in choices else None,
        style=_questionary_style(),
    ).ask()
    if template is None:
        raise click.Abort()
    return template


def _get_template_names(template_dir: Path) -> list[str]:
    """Get sorted names of the Markdown templates in a directory."""
    if not template_dir.is_dir():
        return []
    return sorted(
        path.stem
        for path in template_dir.iterdir()
        if path.is_file() and path.suffix == POST_SUFFIX
    )


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()
