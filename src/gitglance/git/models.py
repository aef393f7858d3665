"""Domain models for parsed git output."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional, Tuple


class ChangeStatus(str, Enum):
    ADDED = "A"
    MODIFIED = "M"
    DELETED = "D"
    RENAMED = "R"
    COPIED = "C"
    UNTRACKED = "?"

    @classmethod
    def from_code(cls, code: str) -> "ChangeStatus":
        """Classify a raw status token such as ``M``, ``R100`` or ``C075``.

        Only the leading letter matters; the similarity score is dropped.
        Unknown codes (``T``, ``U``, ``X``...) count as modifications.
        """
        letter = code.strip()[:1]
        try:
            return cls(letter)
        except ValueError:
            return cls.MODIFIED

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @property
    def symbol(self) -> str:
        return _STATUS_SYMBOLS[self]


_STATUS_SYMBOLS = {
    ChangeStatus.ADDED: "+",
    ChangeStatus.MODIFIED: "~",
    ChangeStatus.DELETED: "-",
    ChangeStatus.RENAMED: "→",
    ChangeStatus.COPIED: "⧉",
    ChangeStatus.UNTRACKED: "?",
}


class DiffLineType(str, Enum):
    ADDITION = "addition"
    DELETION = "deletion"
    CONTEXT = "context"


@dataclass(frozen=True)
class ChangedFile:
    """A file touched by a commit or present in the working-tree status."""

    path: str
    status: ChangeStatus
    additions: int = 0
    deletions: int = 0
    old_path: Optional[str] = None  # renames and copies only

    @property
    def id(self) -> str:
        return self.path

    @property
    def file_name(self) -> str:
        return posixpath.basename(self.path)


@dataclass(frozen=True)
class Commit:
    """A single commit as produced by the log parser."""

    sha: str
    message: str
    full_message: str
    author_name: str
    author_email: str
    date: datetime
    parents: Tuple[str, ...] = ()
    changed_files: Tuple[ChangedFile, ...] = ()

    @property
    def id(self) -> str:
        return self.sha

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    @property
    def is_root(self) -> bool:
        return not self.parents

    @property
    def summary(self) -> str:
        """First line of the subject."""
        return self.message.splitlines()[0] if self.message else ""

    def with_changed_files(self, files: Iterable[ChangedFile]) -> "Commit":
        return replace(self, changed_files=tuple(files))


@dataclass(frozen=True)
class Branch:
    name: str
    is_head: bool
    is_remote: bool
    commit_sha: str
    remote_name: Optional[str] = None
    upstream: Optional[str] = None

    @property
    def id(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        """Branch name without the ``<remote>/`` prefix for remote branches."""
        prefix = f"{self.remote_name}/"
        if self.is_remote and self.remote_name and self.name.startswith(prefix):
            return self.name[len(prefix):]
        return self.name


@dataclass(frozen=True)
class Tag:
    name: str
    commit_sha: str
    message: Optional[str] = None  # None for lightweight tags

    @property
    def id(self) -> str:
        return self.name

    @property
    def is_annotated(self) -> bool:
        return self.message is not None


@dataclass(frozen=True, slots=True)
class DiffLine:
    """A single classified line inside a hunk."""

    content: str
    type: DiffLineType
    old_line_number: Optional[int] = None
    new_line_number: Optional[int] = None


@dataclass(frozen=True)
class DiffHunk:
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: Tuple[DiffLine, ...] = ()
    header: str = ""

    @property
    def additions(self) -> int:
        return sum(1 for line in self.lines if line.type == DiffLineType.ADDITION)

    @property
    def deletions(self) -> int:
        return sum(1 for line in self.lines if line.type == DiffLineType.DELETION)


@dataclass(frozen=True)
class DiffResult:
    """All hunks for one file in a diff."""

    file_path: str
    old_path: Optional[str] = None  # set only when it differs from file_path
    hunks: Tuple[DiffHunk, ...] = ()
    status: ChangeStatus = ChangeStatus.MODIFIED

    @property
    def file_name(self) -> str:
        return posixpath.basename(self.file_path)

    @property
    def total_additions(self) -> int:
        return sum(h.additions for h in self.hunks)

    @property
    def total_deletions(self) -> int:
        return sum(h.deletions for h in self.hunks)


@dataclass(frozen=True)
class Submodule:
    name: str
    path: str
    commit_sha: str
    url: str = ""  # not available from `git submodule status`

    @property
    def id(self) -> str:
        return self.path
