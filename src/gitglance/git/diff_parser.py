"""Unified diff parser: a small line-oriented state machine.

States: NO_FILE (before the first ``diff --git``), IN_FILE (file header
seen, no open hunk) and IN_HUNK. ``diff --git`` always starts a new file,
``@@`` always starts a new hunk, and end of input flushes both.

Only files with a resolved new path are emitted, so deletions (``+++
/dev/null``) and binary entries without ``---``/``+++`` headers are
dropped. Lines the machine does not recognise are ignored.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from gitglance.git.models import ChangeStatus, DiffHunk, DiffLine, DiffLineType, DiffResult

logger = logging.getLogger(__name__)

_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")

_DIFF_HEADER = "diff --git"
_OLD_PATH_PREFIX = "--- a/"
_NEW_PATH_PREFIX = "+++ b/"
_RENAME_FROM = "rename from "
_RENAME_TO = "rename to "
_NEW_FILE = "new file mode"
_COPY_FROM = "copy from "
_COPY_TO = "copy to "


class ParserState(str, Enum):
    NO_FILE = "no_file"
    IN_FILE = "in_file"
    IN_HUNK = "in_hunk"


@dataclass
class _FileAccumulator:
    old_path: Optional[str] = None
    new_path: Optional[str] = None
    status: ChangeStatus = ChangeStatus.MODIFIED
    hunks: List[DiffHunk] = field(default_factory=list)

    def build(self) -> Optional[DiffResult]:
        if self.new_path is None:
            return None
        renamed = self.old_path is not None and self.old_path != self.new_path
        status = self.status
        if renamed and status == ChangeStatus.MODIFIED:
            status = ChangeStatus.RENAMED
        return DiffResult(
            file_path=self.new_path,
            old_path=self.old_path if renamed else None,
            hunks=tuple(self.hunks),
            status=status,
        )


@dataclass
class _HunkAccumulator:
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    header: str
    lines: List[DiffLine] = field(default_factory=list)
    old_line: int = 0
    new_line: int = 0

    def __post_init__(self) -> None:
        self.old_line = self.old_start
        self.new_line = self.new_start

    @property
    def has_budget(self) -> bool:
        """True while the header's line counts are not yet consumed."""
        return self.old_line < self.old_start + self.old_count or (
            self.new_line < self.new_start + self.new_count
        )

    def add(self, line_type: DiffLineType, content: str) -> None:
        old_no: Optional[int] = None
        new_no: Optional[int] = None
        if line_type != DiffLineType.ADDITION:
            old_no = self.old_line
            self.old_line += 1
        if line_type != DiffLineType.DELETION:
            new_no = self.new_line
            self.new_line += 1
        self.lines.append(DiffLine(content, line_type, old_no, new_no))

    def build(self) -> DiffHunk:
        return DiffHunk(
            old_start=self.old_start,
            old_count=self.old_count,
            new_start=self.new_start,
            new_count=self.new_count,
            lines=tuple(self.lines),
            header=self.header,
        )


def parse_hunk_header(line: str) -> Optional[_HunkAccumulator]:
    """Parse ``@@ -a[,b] +c[,d] @@``; omitted counts default to 1."""
    m = _HUNK_HEADER_RE.match(line)
    if m is None:
        return None
    old_start, old_count, new_start, new_count = m.groups()
    return _HunkAccumulator(
        old_start=int(old_start),
        old_count=int(old_count) if old_count is not None else 1,
        new_start=int(new_start),
        new_count=int(new_count) if new_count is not None else 1,
        header=line,
    )


class DiffParser:
    """Parse unified diff text into :class:`DiffResult` objects.

    Usage::

        results = DiffParser(diff_text).parse()
        for result in results:
            print(result.file_path, result.total_additions)
    """

    def __init__(self, diff_text: str) -> None:
        self._lines = diff_text.splitlines()
        self._results: List[DiffResult] = []
        self._file: Optional[_FileAccumulator] = None
        self._hunk: Optional[_HunkAccumulator] = None

    @property
    def state(self) -> ParserState:
        if self._file is None:
            return ParserState.NO_FILE
        if self._hunk is None:
            return ParserState.IN_FILE
        return ParserState.IN_HUNK

    def parse(self) -> List[DiffResult]:
        for line in self._lines:
            self.feed(line)
        self.finish()
        return list(self._results)

    # ---- transitions ----

    def feed(self, line: str) -> None:
        """Advance the state machine by one line."""
        if line.startswith(_DIFF_HEADER):
            self._start_file()
            return

        state = self.state
        if state == ParserState.NO_FILE:
            return

        if state == ParserState.IN_HUNK and self._hunk.has_budget and _is_content(line):
            self._add_content(line)
            return

        if line.startswith("@@"):
            self._start_hunk(line)
        elif line.startswith(_OLD_PATH_PREFIX):
            self._file.old_path = line[len(_OLD_PATH_PREFIX):]
        elif line.startswith(_NEW_PATH_PREFIX):
            self._file.new_path = line[len(_NEW_PATH_PREFIX):]
        elif line.startswith("---") or line.startswith("+++"):
            pass  # /dev/null side of an add or delete
        elif state == ParserState.IN_HUNK:
            if line and _is_content(line):
                self._add_content(line)
        else:
            self._file_header(line)

    def finish(self) -> None:
        """Flush the open hunk and file at end of input."""
        self._flush_file()
        self._file = None

    def _start_file(self) -> None:
        self._flush_file()
        self._file = _FileAccumulator()

    def _file_header(self, line: str) -> None:
        if line.startswith(_RENAME_FROM):
            self._file.old_path = line[len(_RENAME_FROM):]
        elif line.startswith(_RENAME_TO):
            self._file.new_path = line[len(_RENAME_TO):]
        elif line.startswith(_COPY_FROM):
            self._file.old_path = line[len(_COPY_FROM):]
            self._file.status = ChangeStatus.COPIED
        elif line.startswith(_COPY_TO):
            self._file.new_path = line[len(_COPY_TO):]
        elif line.startswith(_NEW_FILE):
            self._file.status = ChangeStatus.ADDED

    def _start_hunk(self, line: str) -> None:
        self._flush_hunk()
        self._hunk = parse_hunk_header(line)
        if self._hunk is None:
            logger.warning("Ignoring unparsable hunk header: %s", line)

    def _add_content(self, line: str) -> None:
        marker, content = line[:1], line[1:]
        if marker == "+":
            self._hunk.add(DiffLineType.ADDITION, content)
        elif marker == "-":
            self._hunk.add(DiffLineType.DELETION, content)
        else:
            self._hunk.add(DiffLineType.CONTEXT, content)

    def _flush_hunk(self) -> None:
        if self._hunk is not None and self._hunk.lines and self._file is not None:
            self._file.hunks.append(self._hunk.build())
        self._hunk = None

    def _flush_file(self) -> None:
        self._flush_hunk()
        if self._file is not None:
            result = self._file.build()
            if result is not None:
                self._results.append(result)


def _is_content(line: str) -> bool:
    """Content lines start with a marker; an empty line is blank context."""
    return not line or line[0] in "+- "


def parse_diff(diff_text: str) -> List[DiffResult]:
    return DiffParser(diff_text).parse()
