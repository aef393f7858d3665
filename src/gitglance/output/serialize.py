"""Convert domain models into JSON/YAML-serialisable dicts."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Union

from gitglance.git.models import (
    Branch,
    ChangedFile,
    Commit,
    DiffHunk,
    DiffResult,
    Submodule,
    Tag,
)

Model = Union[Branch, ChangedFile, Commit, DiffResult, Submodule, Tag]


def changed_file_to_dict(f: ChangedFile) -> Dict[str, Any]:
    return {
        "path": f.path,
        "status": f.status.display_name.lower(),
        "additions": f.additions,
        "deletions": f.deletions,
        **({"old_path": f.old_path} if f.old_path else {}),
    }


def commit_to_dict(c: Commit) -> Dict[str, Any]:
    return {
        "sha": c.sha,
        "short_sha": c.short_sha,
        "message": c.message,
        "full_message": c.full_message,
        "author": {"name": c.author_name, "email": c.author_email},
        "date": c.date.isoformat(),
        "parents": list(c.parents),
        "is_merge": c.is_merge,
        **({"changed_files": [changed_file_to_dict(f) for f in c.changed_files]}
           if c.changed_files else {}),
    }


def branch_to_dict(b: Branch) -> Dict[str, Any]:
    return {
        "name": b.name,
        "commit": b.commit_sha,
        "is_head": b.is_head,
        "is_remote": b.is_remote,
        **({"remote": b.remote_name} if b.remote_name else {}),
        **({"upstream": b.upstream} if b.upstream else {}),
    }


def tag_to_dict(t: Tag) -> Dict[str, Any]:
    return {
        "name": t.name,
        "commit": t.commit_sha,
        "annotated": t.is_annotated,
        **({"message": t.message} if t.message else {}),
    }


def hunk_to_dict(h: DiffHunk) -> Dict[str, Any]:
    return {
        "old_start": h.old_start,
        "old_count": h.old_count,
        "new_start": h.new_start,
        "new_count": h.new_count,
        "additions": h.additions,
        "deletions": h.deletions,
        "lines": [
            {
                "type": line.type.value,
                "content": line.content,
                "old": line.old_line_number,
                "new": line.new_line_number,
            }
            for line in h.lines
        ],
    }


def diff_to_dict(d: DiffResult) -> Dict[str, Any]:
    return {
        "path": d.file_path,
        **({"old_path": d.old_path} if d.old_path else {}),
        "status": d.status.display_name.lower(),
        "additions": d.total_additions,
        "deletions": d.total_deletions,
        "hunks": [hunk_to_dict(h) for h in d.hunks],
    }


def submodule_to_dict(s: Submodule) -> Dict[str, Any]:
    return {"name": s.name, "path": s.path, "commit": s.commit_sha, "url": s.url}


_CONVERTERS = {
    Branch: branch_to_dict,
    ChangedFile: changed_file_to_dict,
    Commit: commit_to_dict,
    DiffResult: diff_to_dict,
    Submodule: submodule_to_dict,
    Tag: tag_to_dict,
}


def to_dict(item: Model) -> Dict[str, Any]:
    return _CONVERTERS[type(item)](item)


def to_list(items: Sequence[Model]) -> List[Dict[str, Any]]:
    return [to_dict(i) for i in items]
