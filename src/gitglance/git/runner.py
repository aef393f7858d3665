"""Git subprocess runner: argument vectors in, captured stdout out."""

from __future__ import annotations

import asyncio
import functools
import logging
import subprocess
from concurrent.futures import Executor
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Union

from gitglance.git.errors import CommandFailedError, NotARepositoryError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class GitRunner(Protocol):
    """Anything that can execute ``git <args>`` in a directory."""

    async def run(self, args: Sequence[str], cwd: PathLike) -> str:
        ...


class SubprocessGitRunner:
    """Run the git executable in a worker thread, one short-lived process per call.

    Arguments are passed as a vector (never through a shell). Output is
    decoded as UTF-8 with undecodable bytes replaced, so callers always get
    text back.

    Calls run on *executor*, or on the loop's default executor when it is
    None. The default executor caps concurrent git processes at its worker
    count (``min(32, cpu_count + 4)``); pass a larger pool to raise the cap.
    """

    def __init__(self, git_path: str = "git", executor: Optional[Executor] = None) -> None:
        self.git_path = git_path
        self.executor = executor

    async def run(self, args: Sequence[str], cwd: PathLike) -> str:
        loop = asyncio.get_running_loop()
        call = functools.partial(self.run_sync, list(args), Path(cwd))
        return await loop.run_in_executor(self.executor, call)

    def run_sync(self, args: List[str], cwd: Path) -> str:
        """Run a git command and return stdout. Raises CommandFailedError on failure."""
        if not cwd.is_dir():
            raise NotARepositoryError(cwd)

        command = " ".join(args)
        logger.debug("git %s (cwd=%s)", command, cwd)
        try:
            result = subprocess.run(
                [self.git_path, *args],
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as exc:
            raise CommandFailedError(
                f"git executable not found: {self.git_path}"
            ) from exc
        except OSError as exc:
            raise CommandFailedError(f"git {command}: {exc}") from exc

        if result.returncode != 0:
            stderr = result.stderr.strip()
            logger.debug("git %s exited %d: %s", command, result.returncode, stderr)
            raise CommandFailedError(f"git {command}: {stderr}")
        return result.stdout
