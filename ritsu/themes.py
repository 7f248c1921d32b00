"""Theme acquisition for Ritsu projects.

New projects fetch their theme with ``git clone``. git is required: its
absence is reported as MissingToolError. When the clone itself fails, or
the cloned repository has no template directory, the copy of the theme
bundled with the package is installed instead.

Environment variables:
    RITSU_THEME_REPO: Repository to clone instead of the default theme.
    RITSU_SKIP_THEME_FETCH: Set to "1" to install the bundled theme without
        cloning.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

from . import log
from .constants import DEFAULT_THEME, DEFAULT_THEME_REPO, SCAFFOLD_DIR, THEME_DIR
from .errors import MissingToolError
from .utils import copy_tree, remove_tree

BUNDLED_THEMES_DIR = SCAFFOLD_DIR / THEME_DIR
GIT_INSTALL_HINT = (
    "Check https://git-scm.com/book/en/v2/Getting-Started-Installing-Git"
    " for the installation of git."
)


def theme_repo_url() -> str:
    return os.environ.get("RITSU_THEME_REPO") or DEFAULT_THEME_REPO


def install_bundled_theme(themes_dir: Path, name: str = DEFAULT_THEME) -> Path:
    """Copy the bundled theme into a project's themes directory.

    Args:
        themes_dir: The project's ``themes/`` directory.
        name: Directory name to install the theme under.

    Returns:
        Path of the installed theme.
    """
    target = themes_dir / name
    copy_tree(BUNDLED_THEMES_DIR / DEFAULT_THEME, target)
    return target


def fetch_theme(
    themes_dir: Path,
    name: str = DEFAULT_THEME,
    template_dir_name: str = "layout",
) -> Path:
    """Clone the theme repository into ``themes/<name>``.

    Blocks until git exits; there is no timeout. git is never allowed to
    prompt for credentials, so an unreachable repository fails instead.

    Args:
        themes_dir: The project's ``themes/`` directory.
        name: Directory name of the theme.
        template_dir_name: Template directory a usable theme must contain.

    Returns:
        Path of the installed theme.

    Raises:
        MissingToolError: If git is not installed.
    """
    if os.environ.get("RITSU_SKIP_THEME_FETCH") == "1":
        return install_bundled_theme(themes_dir, name)

    git_bin = shutil.which("git")
    if not git_bin:
        raise MissingToolError("git", GIT_INSTALL_HINT)

    target = themes_dir / name
    repo = theme_repo_url()
    result = subprocess.run(
        [git_bin, "clone", "--depth", "1", repo, str(target)],
        capture_output=True,
        text=True,
        env={**os.environ, "GIT_TERMINAL_PROMPT": "0"},
    )
    if result.returncode == 0 and (target / template_dir_name).is_dir():
        return target

    if result.returncode == 0:
        detail = f"no {template_dir_name}/ directory in repository"
    else:
        lines = (result.stderr or "").strip().splitlines()
        detail = lines[-1] if lines else f"git exited with status {result.returncode}"
    log.warn(f"Could not fetch theme from {repo} ({detail}); using the bundled theme.")
    remove_tree(target)
    return install_bundled_theme(themes_dir, name)
