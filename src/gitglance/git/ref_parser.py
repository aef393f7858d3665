"""Branch and tag parsers for ``git branch`` / ``git tag`` formatted output."""

from __future__ import annotations

import logging
from typing import List, Optional

from gitglance.git.models import Branch, Tag

logger = logging.getLogger(__name__)

# name | short sha | is-remote flag | remote name | upstream
LOCAL_BRANCH_FORMAT = "%(refname:short)|%(objectname:short)|false||%(upstream:short)"
REMOTE_BRANCH_FORMAT = "%(refname:short)|%(objectname:short)|true|%(upstream:remotename)|"

# name | short sha of the tagged commit | subject (annotated tags only)
TAG_FORMAT = (
    "%(refname:short)"
    "|%(if)%(*objectname)%(then)%(*objectname:short)%(else)%(objectname:short)%(end)"
    "|%(if)%(*objectname)%(then)%(contents:subject)%(end)"
)

_BRANCH_FIELDS = 4
_TAG_FIELDS = 2


def parse_branches(output: str, head_branch: Optional[str] = None) -> List[Branch]:
    """Parse branch lines; *head_branch* marks the checked-out local branch."""
    branches = (parse_branch_line(line, head_branch) for line in output.splitlines())
    return [b for b in branches if b is not None]


def parse_branch_line(line: str, head_branch: Optional[str] = None) -> Optional[Branch]:
    line = line.strip()
    if not line:
        return None

    parts = line.split("|")
    if len(parts) < _BRANCH_FIELDS:
        logger.warning("Skipping malformed branch line: %s", line)
        return None

    name, sha, remote_flag, remote_name = parts[:4]
    upstream = parts[4] if len(parts) > 4 and parts[4] else None
    is_remote = remote_flag == "true"

    if is_remote:
        # refs/remotes/<remote>/HEAD shortens to "<remote>" or "<remote>/HEAD"
        if "/" not in name or name.endswith("/HEAD"):
            return None
        remote_name = remote_name or name.split("/", 1)[0]

    return Branch(
        name=name,
        is_head=not is_remote and name == head_branch,
        is_remote=is_remote,
        commit_sha=sha,
        remote_name=remote_name or None,
        upstream=upstream,
    )


def parse_tags(output: str) -> List[Tag]:
    tags = (parse_tag_line(line) for line in output.splitlines())
    return [t for t in tags if t is not None]


def parse_tag_line(line: str) -> Optional[Tag]:
    line = line.strip()
    if not line:
        return None

    parts = line.split("|", 2)
    if len(parts) < _TAG_FIELDS:
        logger.warning("Skipping malformed tag line: %s", line)
        return None

    message = parts[2] if len(parts) > 2 and parts[2] else None
    return Tag(name=parts[0], commit_sha=parts[1], message=message)
