"""Project root discovery and per-operation state.

A project root is the nearest directory, walking upward from the working
directory, that contains the metadata store file. Each lifecycle operation
resolves the root afresh and loads the store once; the result is carried
through the operation as a ProjectContext rather than kept on a long-lived
object.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .constants import DB_FILE, DRAFT_DIR, POST_DIR, TEMPLATE_DIR, THEME_DIR, TRASH_DIR
from .errors import NotInitializedError
from .store import SiteDatabase, load_database
from .utils import post_filename


def find_project_root(
    start: Path,
    exists: Callable[[Path], bool] = Path.exists,
) -> Path | None:
    """Find the nearest ancestor of start (inclusive) holding a store file.

    Args:
        start: Absolute directory to start searching from.
        exists: Predicate used to test for the store file.

    Returns:
        The project root, or None once the filesystem root is passed.
    """
    current = start
    while True:
        if exists(current / DB_FILE):
            return current
        parent = current.parent
        if parent == current:
            return None
        current = parent


@dataclass
class ProjectContext:
    """State of one project for the duration of one operation.

    Attributes:
        root: Project root directory.
        db: Metadata store record, loaded from disk at operation start.
    """

    root: Path
    db: SiteDatabase

    @property
    def draft_dir(self) -> Path:
        return self.root / DRAFT_DIR

    @property
    def post_dir(self) -> Path:
        return self.root / POST_DIR

    @property
    def template_dir(self) -> Path:
        return self.root / TEMPLATE_DIR

    @property
    def theme_dir(self) -> Path:
        return self.root / THEME_DIR

    @property
    def trash_dir(self) -> Path:
        return self.root / TRASH_DIR

    def draft(self, post_name: str) -> Path:
        return self.draft_dir / post_filename(post_name)

    def post(self, post_name: str) -> Path:
        return self.post_dir / post_filename(post_name)

    def trashed(self, post_name: str) -> Path:
        return self.trash_dir / post_filename(post_name)


def open_project(start: Path | None = None) -> ProjectContext:
    """Resolve the project root from start and load its store.

    Args:
        start: Directory to search from; defaults to the working directory.

    Returns:
        A fresh ProjectContext.

    Raises:
        NotInitializedError: If no project root is found.
    """
    start = (start or Path.cwd()).resolve()
    root = find_project_root(start)
    if root is None:
        raise NotInitializedError(start)
    return ProjectContext(root=root, db=load_database(root))
