"""Git interface layer: runner, parsers, models and the repository service."""

from gitglance.git.changes_parser import parse_changed_files, parse_status, parse_submodules
from gitglance.git.diff_parser import DiffParser, parse_diff
from gitglance.git.errors import (
    CommandFailedError,
    GitError,
    GitFileNotFoundError,
    InvalidCommitError,
    NotARepositoryError,
    ParseError,
)
from gitglance.git.log_parser import LOG_FORMAT, parse_commits
from gitglance.git.models import (
    Branch,
    ChangedFile,
    ChangeStatus,
    Commit,
    DiffHunk,
    DiffLine,
    DiffLineType,
    DiffResult,
    Submodule,
    Tag,
)
from gitglance.git.ref_parser import parse_branches, parse_tags
from gitglance.git.runner import GitRunner, SubprocessGitRunner
from gitglance.git.service import EMPTY_TREE_SHA, RepositoryService

__all__ = [
    "Branch",
    "ChangedFile",
    "ChangeStatus",
    "CommandFailedError",
    "Commit",
    "DiffHunk",
    "DiffLine",
    "DiffLineType",
    "DiffParser",
    "DiffResult",
    "EMPTY_TREE_SHA",
    "GitError",
    "GitFileNotFoundError",
    "GitRunner",
    "InvalidCommitError",
    "LOG_FORMAT",
    "NotARepositoryError",
    "ParseError",
    "RepositoryService",
    "SubprocessGitRunner",
    "Submodule",
    "Tag",
    "parse_branches",
    "parse_changed_files",
    "parse_commits",
    "parse_diff",
    "parse_status",
    "parse_submodules",
    "parse_tags",
]
