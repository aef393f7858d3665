"""YAML renderer: same document shape as the JSON report."""

from __future__ import annotations

from typing import Sequence

import yaml

from gitglance.output.json_report import to_document
from gitglance.output.serialize import Model


def render(kind: str, items: Sequence[Model]) -> str:
    return yaml.safe_dump(
        to_document(kind, items),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
