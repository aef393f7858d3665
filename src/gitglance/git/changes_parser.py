"""Parsers for changed-file listings, porcelain status and submodule status."""

from __future__ import annotations

import logging
import posixpath
import re
from typing import Dict, List, Optional, Tuple

from gitglance.git.models import ChangedFile, ChangeStatus, Submodule

logger = logging.getLogger(__name__)

_RENAME_ARROW = " => "
_BRACE_RENAME_RE = re.compile(r"^(.*)\{(.*) => (.*)\}(.*)$")

# porcelain v1: "XY path"
_STATUS_MIN_WIDTH = 4
_STATUS_PATH_COLUMN = 3
_STATUS_RENAME_ARROW = " -> "

_SUBMODULE_FLAGS = "+-U"


# --- diff-tree --name-status + --numstat ---


def parse_changed_files(status_output: str, numstat_output: str) -> List[ChangedFile]:
    """Merge ``--name-status`` and ``--numstat`` listings keyed by final path.

    A path missing from the numstat listing gets 0/0 rather than failing.
    """
    if not status_output.strip():
        return []

    stats = parse_numstat(numstat_output)
    files: List[ChangedFile] = []
    for line in status_output.splitlines():
        entry = _parse_name_status_line(line)
        if entry is None:
            continue
        status, path, old_path = entry
        additions, deletions = stats.get(path, (0, 0))
        files.append(
            ChangedFile(
                path=path,
                status=status,
                additions=additions,
                deletions=deletions,
                old_path=old_path,
            )
        )
    return files


def _parse_name_status_line(line: str) -> Optional[Tuple[ChangeStatus, str, Optional[str]]]:
    line = line.strip()
    if not line:
        return None

    parts = line.split("\t")
    status = ChangeStatus.from_code(parts[0])
    if status in (ChangeStatus.RENAMED, ChangeStatus.COPIED):
        if len(parts) < 3:
            logger.warning("Skipping malformed rename/copy line: %s", line)
            return None
        return status, parts[2], parts[1]
    if len(parts) < 2:
        logger.warning("Skipping malformed name-status line: %s", line)
        return None
    return status, parts[1], None


def parse_numstat(output: str) -> Dict[str, Tuple[int, int]]:
    """Map final path -> (additions, deletions). Binary ``-`` counts become 0."""
    stats: Dict[str, Tuple[int, int]] = {}
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        parts = line.split("\t", 2)
        if len(parts) < 3:
            continue
        stats[resolve_rename_path(parts[2])] = (_count(parts[0]), _count(parts[1]))
    return stats


def resolve_rename_path(path: str) -> str:
    """Return the destination path of a numstat rename entry.

    ``old => new`` gives ``new``; ``src/{a => b}/f.py`` gives ``src/b/f.py``.
    """
    if _RENAME_ARROW not in path:
        return path
    m = _BRACE_RENAME_RE.match(path)
    if m:
        prefix, _, new, suffix = m.groups()
        return (prefix + new + suffix).replace("//", "/")
    return path.split(_RENAME_ARROW, 1)[1]


def _count(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0


# --- status --porcelain=v1 ---

_WORKTREE_STATUS = {
    "A": ChangeStatus.ADDED,
    "M": ChangeStatus.MODIFIED,
    "D": ChangeStatus.DELETED,
    "R": ChangeStatus.RENAMED,
    "?": ChangeStatus.UNTRACKED,
}


def parse_status(output: str) -> List[ChangedFile]:
    """Parse porcelain v1 status, classifying on the work-tree column."""
    files = (parse_status_line(line) for line in output.splitlines())
    return [f for f in files if f is not None]


def parse_status_line(line: str) -> Optional[ChangedFile]:
    line = line.rstrip("\r\n")
    if len(line) < _STATUS_MIN_WIDTH or not line[_STATUS_PATH_COLUMN:].strip():
        return None

    if "R" in line[:2]:
        status = ChangeStatus.RENAMED  # staged or work-tree rename
    else:
        status = _WORKTREE_STATUS.get(line[1], ChangeStatus.MODIFIED)
    path = line[_STATUS_PATH_COLUMN:]
    old_path = None
    if status == ChangeStatus.RENAMED and _STATUS_RENAME_ARROW in path:
        old_path, path = path.split(_STATUS_RENAME_ARROW, 1)
    return ChangedFile(path=path, status=status, old_path=old_path)


# --- submodule status ---


def parse_submodules(output: str) -> List[Submodule]:
    modules = (parse_submodule_line(line) for line in output.splitlines())
    return [m for m in modules if m is not None]


def parse_submodule_line(line: str) -> Optional[Submodule]:
    """Parse ``[ +-U]<sha> <path> [(<describe>)]``."""
    parts = line.split()
    if len(parts) < 2:
        if parts:
            logger.warning("Skipping malformed submodule line: %s", line)
        return None

    sha = parts[0]
    if sha[0] in _SUBMODULE_FLAGS:
        sha = sha[1:]
    path = parts[1]
    return Submodule(name=posixpath.basename(path), path=path, commit_sha=sha)
