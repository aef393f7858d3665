"""JSON renderer for scripting and CI use."""

from __future__ import annotations

import json
from typing import Any, Dict, Sequence

from gitglance.output.serialize import Model, to_list


def to_document(kind: str, items: Sequence[Model]) -> Dict[str, Any]:
    """Wrap serialised items in a versioned envelope."""
    return {
        "version": "1.0",
        "kind": kind,
        "count": len(items),
        "items": to_list(items),
    }


def render(kind: str, items: Sequence[Model]) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_document(kind, items), indent=2, ensure_ascii=False)
