"""cli.common

Small shared helpers for CLI command modules.
"""

from __future__ import annotations

from typing import Iterable, List, Optional


def parse_csv(raw: Optional[str]) -> list[str]:
    """Parse a comma-separated list value into a list of non-empty strings."""
    if not raw:
        return []
    return [x.strip() for x in raw.split(",") if x.strip()]


def flatten_csv_args(values: Optional[Iterable[str]]) -> List[str]:
    """Merge repeated and comma-separated flag values, keeping first-seen order."""
    out: List[str] = []
    for raw in values or []:
        for item in parse_csv(raw):
            if item not in out:
                out.append(item)
    return out
