"""Commit log parser for NUL-terminated, pipe-delimited ``git log`` output.

Records are produced with :data:`LOG_FORMAT`. Each record ends with a NUL
byte because subjects and bodies may contain newlines and ``|``. The record
is split on ``|`` at most six times: the first pipe after the date ends
the subject and the body is kept exactly as written, pipes included.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from gitglance.git.models import Commit

logger = logging.getLogger(__name__)

# sha | parents | author name | author email | ISO date | subject | body
LOG_FORMAT = "%H|%P|%an|%ae|%aI|%s|%B%x00"

RECORD_SEPARATOR = "\0"
FIELD_SEPARATOR = "|"
MAX_FIELDS = 7
MIN_FIELDS = 6


def parse_commits(output: str) -> List[Commit]:
    """Parse ``git log --format=LOG_FORMAT`` output, newest first as given.

    Malformed records are dropped with a warning; the rest of the batch
    is still returned.
    """
    if not output.strip():
        return []
    commits = (parse_commit_record(record) for record in output.split(RECORD_SEPARATOR))
    return [commit for commit in commits if commit is not None]


def parse_commit_record(record: str) -> Optional[Commit]:
    """Parse one log record, or return None if it is blank or malformed."""
    if not record.strip():
        return None
    # newlines around the NUL come from git, the rest belongs to the body
    record = record.strip("\n")

    parts = record.split(FIELD_SEPARATOR, MAX_FIELDS - 1)
    if len(parts) < MIN_FIELDS:
        logger.warning(
            "Skipping malformed commit record: %d fields (need %d)",
            len(parts), MIN_FIELDS,
        )
        return None

    sha, parents_field, author_name, author_email, date_field = parts[:5]
    subject = parts[5]
    body = parts[6] if len(parts) == MAX_FIELDS else ""

    return Commit(
        sha=sha,
        message=subject,
        full_message=body or subject,
        author_name=author_name,
        author_email=author_email,
        date=parse_date(date_field, sha),
        parents=parse_parents(parents_field),
    )


def parse_parents(field: str) -> Tuple[str, ...]:
    """Space-separated parent SHAs; empty for a root commit."""
    return tuple(p for p in field.split(" ") if p)


def parse_date(value: str, sha: str = "") -> datetime:
    """Parse a strict ISO-8601 date with offset, falling back to now."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        parsed = None
    if parsed is None or parsed.tzinfo is None:
        logger.warning(
            "Failed to parse date %r for commit %s, using current time", value, sha
        )
        return datetime.now(timezone.utc)
    return parsed

