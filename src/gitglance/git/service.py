"""Repository service: builds git invocations and hands output to the parsers.

The service holds configuration only (which runner / git executable to use
and how many context lines diffs carry). Every public method is a coroutine;
sub-fetches that do not depend on each other run concurrently.
"""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from gitglance.git.changes_parser import parse_changed_files, parse_status, parse_submodules
from gitglance.git.diff_parser import parse_diff
from gitglance.git.errors import (
    CommandFailedError,
    GitError,
    GitFileNotFoundError,
    InvalidCommitError,
    NotARepositoryError,
    ParseError,
)
from gitglance.git.log_parser import LOG_FORMAT, parse_commits
from gitglance.git.models import Branch, ChangedFile, Commit, DiffResult, Submodule, Tag
from gitglance.git.ref_parser import (
    LOCAL_BRANCH_FORMAT,
    REMOTE_BRANCH_FORMAT,
    TAG_FORMAT,
    parse_branches,
    parse_tags,
)
from gitglance.git.runner import GitRunner, SubprocessGitRunner

logger = logging.getLogger(__name__)

EMPTY_TREE_SHA = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

_SHA_RE = re.compile(r"^[0-9a-f]{4,64}$")

# stderr fragments of `git show <rev>:<path>`
_BAD_REVISION_MARKERS = ("invalid object name", "bad revision", "unknown revision")
_MISSING_PATH_MARKERS = ("does not exist in", "exists on disk, but not in")

RepoPath = Union[str, Path]


class RepositoryService:
    """Read-only access to one or more repositories through the git CLI."""

    def __init__(
        self,
        runner: Optional[GitRunner] = None,
        *,
        git_path: str = "git",
        context_lines: int = 3,
    ) -> None:
        self._runner: GitRunner = runner or SubprocessGitRunner(git_path)
        self.context_lines = context_lines

    async def _git(self, repo: RepoPath, *args: str) -> str:
        return await self._runner.run(list(args), Path(repo))

    # ---- repository ----

    async def is_git_repository(self, path: RepoPath) -> bool:
        try:
            output = await self._git(path, "rev-parse", "--is-inside-work-tree")
        except GitError as exc:
            logger.debug("%s is not a repository: %s", path, exc)
            return False
        return output.strip() == "true"

    async def repository_root(self, path: RepoPath) -> Path:
        output = await self._git(path, "rev-parse", "--show-toplevel")
        root = output.strip()
        if not root:
            raise NotARepositoryError(path)
        return Path(root)

    # ---- commits ----

    async def commits(self, repo: RepoPath, limit: int, offset: int = 0) -> List[Commit]:
        """One page of history, newest first."""
        args = _log_args(limit, offset)
        return parse_commits(await self._git(repo, *args))

    async def commits_for_file(
        self, repo: RepoPath, file_path: str, limit: int, offset: int = 0
    ) -> List[Commit]:
        """History of a single file, following renames."""
        args = _log_args(limit, offset, "--follow")
        args += ["--", file_path]
        return parse_commits(await self._git(repo, *args))

    async def commit(self, repo: RepoPath, sha: str) -> Optional[Commit]:
        """Look up a commit; an unknown SHA gives None."""
        try:
            _check_revision(sha)
            output = await self._git(repo, "log", f"--format={LOG_FORMAT}", "-n", "1", sha)
        except CommandFailedError as exc:
            logger.debug("Commit not found for %s: %s", sha, exc)
            return None
        commits = parse_commits(output)
        return commits[0] if commits else None

    async def changed_files(self, repo: RepoPath, sha: str) -> List[ChangedFile]:
        _check_revision(sha)
        base = ["diff-tree", "--no-commit-id", "--root", "-r", "-M"]
        status_output, numstat_output = await asyncio.gather(
            self._git(repo, *base, "--name-status", sha),
            self._git(repo, *base, "--numstat", sha),
        )
        return parse_changed_files(status_output, numstat_output)

    # ---- branches / tags ----

    async def branches(self, repo: RepoPath) -> List[Branch]:
        """Local branches followed by remote-tracking branches."""
        head = await self._head_branch_name(repo)
        local, remote = await asyncio.gather(
            self._local_branches(repo, head),
            self._remote_branches(repo),
        )
        return local + remote

    async def _local_branches(self, repo: RepoPath, head: Optional[str]) -> List[Branch]:
        output = await self._git(repo, "branch", f"--format={LOCAL_BRANCH_FORMAT}")
        return parse_branches(output, head)

    async def _remote_branches(self, repo: RepoPath) -> List[Branch]:
        try:
            output = await self._git(repo, "branch", "-r", f"--format={REMOTE_BRANCH_FORMAT}")
        except CommandFailedError as exc:
            logger.debug("No remote branches: %s", exc)
            return []
        return parse_branches(output)

    async def current_branch(self, repo: RepoPath) -> Optional[Branch]:
        """The checked-out branch, or None on a detached HEAD."""
        name = await self._head_branch_name(repo)
        if name is None:
            return None
        sha = (await self._git(repo, "rev-parse", "--short", "HEAD")).strip()
        if not sha:
            raise ParseError("rev-parse --short HEAD returned no SHA")
        return Branch(name=name, is_head=True, is_remote=False, commit_sha=sha)

    async def _head_branch_name(self, repo: RepoPath) -> Optional[str]:
        try:
            output = await self._git(repo, "symbolic-ref", "--short", "HEAD")
        except CommandFailedError:
            return None  # detached HEAD
        return output.strip() or None

    async def tags(self, repo: RepoPath) -> List[Tag]:
        output = await self._git(repo, "tag", "-l", f"--format={TAG_FORMAT}")
        return parse_tags(output)

    # ---- diffs ----

    async def diff(self, repo: RepoPath, sha: str, parent_index: int = 0) -> List[DiffResult]:
        """Diff *sha* against one of its parents (the empty tree for a root commit).

        An out-of-range *parent_index* falls back to the first parent.
        """
        parents = await self._parents(repo, sha)
        if not parents:
            base = EMPTY_TREE_SHA
        elif 0 <= parent_index < len(parents):
            base = parents[parent_index]
        else:
            base = parents[0]

        output = await self._git(repo, "diff", base, sha, f"--unified={self.context_lines}")
        return parse_diff(output)

    async def file_diff(
        self, repo: RepoPath, file_path: str, sha: str, parent_index: int = 0
    ) -> Optional[DiffResult]:
        for result in await self.diff(repo, sha, parent_index):
            if file_path in (result.file_path, result.old_path):
                return result
        return None

    async def _parents(self, repo: RepoPath, sha: str) -> List[str]:
        _check_revision(sha)
        try:
            output = await self._git(repo, "rev-parse", f"{sha}^@")
        except CommandFailedError as exc:
            raise InvalidCommitError(sha, exc.message) from exc
        parents = [line.strip() for line in output.splitlines() if line.strip()]
        for parent in parents:
            if not _SHA_RE.match(parent):
                raise ParseError(f"unexpected parent SHA {parent!r} for {sha}")
        return parents

    # ---- working tree / content ----

    async def file_content(self, repo: RepoPath, path: str, sha: str) -> str:
        _check_revision(sha)
        try:
            return await self._git(repo, "show", f"{sha}:{path}")
        except CommandFailedError as exc:
            detail = exc.message.lower()
            if any(marker in detail for marker in _MISSING_PATH_MARKERS):
                raise GitFileNotFoundError(path, exc.message) from exc
            if any(marker in detail for marker in _BAD_REVISION_MARKERS):
                raise InvalidCommitError(sha, exc.message) from exc
            raise

    async def status(self, repo: RepoPath) -> List[ChangedFile]:
        output = await self._git(repo, "status", "--porcelain=v1", "-uall")
        return parse_status(output)

    async def submodules(self, repo: RepoPath) -> List[Submodule]:
        try:
            output = await self._git(repo, "submodule", "status", "--recursive")
        except GitError as exc:
            logger.debug("No submodules: %s", exc)
            return []
        return parse_submodules(output)


def _check_revision(sha: str) -> None:
    """Refuse revisions git would read as an option (``--output=...``)."""
    if sha.startswith("-"):
        raise InvalidCommitError(sha, f"revision may not start with '-': {sha}")

def _log_args(limit: int, offset: int, *extra: str) -> List[str]:
    args = ["log", f"--format={LOG_FORMAT}", *extra, "-n", str(limit)]
    if offset > 0:
        args += ["--skip", str(offset)]
    return args
