"""Shared test fixtures: sample git output, a fake runner, temp git repos."""

from __future__ import annotations

import asyncio
import subprocess
import textwrap
from pathlib import Path
from typing import Dict, List, Sequence, Tuple, Union

import pytest

from gitglance.git.errors import CommandFailedError


class FakeRunner:
    """GitRunner double returning canned output keyed by the argument vector."""

    def __init__(self, responses: Dict[Tuple[str, ...], Union[str, Exception]], delay: float = 0.0):
        self.responses = responses
        self.delay = delay
        self.calls: List[Tuple[str, ...]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def run(self, args: Sequence[str], cwd) -> str:
        key = tuple(args)
        self.calls.append(key)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        if key not in self.responses:
            raise CommandFailedError(f"git {' '.join(args)}: unexpected call")
        response = self.responses[key]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def sample_log_output() -> str:
    """Three commits: a merge, a regular commit and the root commit."""
    return (
        "c3|b2 a1|Alice|alice@test.com|2024-01-15T10:00:00+00:00|Merge feature|Merge feature\n\nLong body\n\0\n"
        "b2|a1|Bob|bob@test.com|2024-01-14T09:00:00+02:00|Add parser|Add parser\n\0\n"
        "a1||Carol|carol@test.com|2024-01-13T08:00:00-05:00|Initial commit|Initial commit\n\0\n"
    )


@pytest.fixture
def sample_diff_modified() -> str:
    return textwrap.dedent("""\
        diff --git a/app.py b/app.py
        index 1234567..abcdef0 100644
        --- a/app.py
        +++ b/app.py
        @@ -1,4 +1,5 @@
         import os
        -import sys
        +import json
        +import logging

         def main():
    """)


@pytest.fixture
def sample_diff_two_files() -> str:
    return textwrap.dedent("""\
        diff --git a/a.txt b/a.txt
        index 1111111..2222222 100644
        --- a/a.txt
        +++ b/a.txt
        @@ -1,2 +1,2 @@
        -old a
        +new a
         same
        @@ -10 +10 @@
        -ten
        +TEN
        diff --git a/b.txt b/b.txt
        new file mode 100644
        index 0000000..3333333
        --- /dev/null
        +++ b/b.txt
        @@ -0,0 +1,2 @@
        +first
        +second
    """)


@pytest.fixture
def sample_diff_rename() -> str:
    return textwrap.dedent("""\
        diff --git a/src/util.py b/src/helpers.py
        similarity index 88%
        rename from src/util.py
        rename to src/helpers.py
        index 3f2a9c1..7be04d2 100644
        --- a/src/util.py
        +++ b/src/helpers.py
        @@ -1,0 +2,1 @@
        +# shared helpers
    """)


@pytest.fixture
def sample_diff_binary() -> str:
    return textwrap.dedent("""\
        diff --git a/assets/logo.png b/assets/logo.png
        new file mode 100644
        index 0000000..51c0e8f
        Binary files /dev/null and b/assets/logo.png differ
    """)


def _git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=repo, capture_output=True, text=True, check=True,
    )
    return result.stdout


def _commit_file(repo: Path, name: str, content: str, message: str) -> str:
    path = repo / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    _git(repo, "add", name)
    _git(repo, "commit", "-q", "-m", message)
    return _git(repo, "rev-parse", "HEAD").strip()


@pytest.fixture
def git_commit():
    """Helper: write a file, stage it and commit. Returns the new SHA."""
    return _commit_file


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository with one commit."""
    subprocess.run(["git", "init", "-q", str(tmp_path)], capture_output=True, check=True)
    _git(tmp_path, "config", "user.email", "test@test.com")
    _git(tmp_path, "config", "user.name", "Test")
    _git(tmp_path, "config", "commit.gpgsign", "false")
    _git(tmp_path, "config", "tag.gpgsign", "false")
    _commit_file(tmp_path, "README.md", "# Test\n", "init")
    return tmp_path


@pytest.fixture
def history_repo(tmp_git_repo: Path) -> Path:
    """A repository with twelve linear commits (README plus notes 1-11)."""
    for i in range(1, 12):
        _commit_file(tmp_git_repo, "notes.txt", f"note {i}\n", f"note {i}")
    return tmp_git_repo
