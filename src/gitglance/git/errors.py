"""Git error taxonomy raised by the runner, parsers and service."""

from __future__ import annotations

from pathlib import Path
from typing import Union


class GitError(Exception):
    """Base class for every error surfaced by gitglance."""


class NotARepositoryError(GitError):
    """Raised when a path is not (inside) a git working tree."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        super().__init__(f"Not a Git repository: {self.path}")


class CommandFailedError(GitError):
    """Raised when git exits non-zero or cannot be started."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Git command failed: {message}")


class InvalidCommitError(CommandFailedError):
    """Raised when git cannot resolve a revision."""

    def __init__(self, sha: str, message: str = "") -> None:
        self.sha = sha
        super().__init__(message or f"invalid commit: {sha}")


class GitFileNotFoundError(CommandFailedError):
    """Raised when a path does not exist at the requested revision."""

    def __init__(self, path: str, message: str = "") -> None:
        self.path = path
        super().__init__(message or f"file not found: {path}")


class ParseError(GitError):
    """Raised when output the service depends on is structurally invalid."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Failed to parse Git output: {message}")
