"""Error types raised by Ritsu operations.

Every failure a lifecycle or render operation can report derives from
RitsuError. The CLI prints ``message`` as a single line and exits with a
non-zero status, so messages should read well on their own.
"""

from __future__ import annotations

from pathlib import Path


class RitsuError(Exception):
    """Base class for expected, user-facing failures.

    Attributes:
        message: Human-readable, single-line description of the failure.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotInitializedError(RitsuError):
    """No project root could be found from the working directory."""

    def __init__(self, start: Path | None = None):
        message = (
            "Please execute this command in a blog directory or run `ritsu init` first."
        )
        self.start = start
        super().__init__(message)


class AlreadyExistsError(RitsuError):
    """Target directory of init/generate is already present.

    Distinct from other errors so that rollback never removes a directory
    this invocation did not create.
    """

    def __init__(self, message: str, path: Path):
        self.path = path
        super().__init__(message)


class DuplicateNameError(RitsuError):
    """A post with the same name exists in drafts, posts, trash or the store."""


class NotFoundError(RitsuError):
    """A referenced post is absent."""


class TemplateNotFoundError(NotFoundError):
    """A post template is absent from the templates directory."""


class TrashCollisionError(RitsuError):
    """The trash already holds a post with the same name."""


class MalformedFrontMatterError(RitsuError):
    """Front matter was started but is unterminated, unparseable or incomplete."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed front matter in {path.name}: {reason}")


class MissingToolError(RitsuError):
    """A required external command-line tool is not installed."""

    def __init__(self, tool: str, hint: str = ""):
        self.tool = tool
        message = f"{tool} is not installed on your machine!"
        if hint:
            message = f"{message} {hint}"
        super().__init__(message)


class ConfigError(RitsuError):
    """A user configuration file is missing or cannot be parsed."""


class InvalidDateError(RitsuError):
    """A publish date could not be understood."""


class BuildError(RitsuError):
    """Error during site rendering with file context.

    Attributes:
        source_path: Path to the source file that caused the error.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.original_error = original_error
        super().__init__(f"{source_path.name}: {message}")
