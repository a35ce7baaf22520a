"""
Assignee helpers.

Spreadsheets carry several people in one cell ("Ana/Ben", "Ana, Ben").
These helpers turn such text into a clean name list, split a value
equally across assignees and render a compact label for display.
"""

import re
from typing import Sequence

_SEPARATORS = re.compile(r"\s*[/,]\s*")

# Names shown in full by format_assignees before collapsing into "+n"
DISPLAY_LIMIT = 2


def parse_assignees(text: str | None) -> list[str]:
    """Split on "/" or ",", trim, drop blanks and duplicates (first wins)."""
    if not text or not text.strip():
        return []

    names = []
    for name in _SEPARATORS.split(text.strip()):
        name = name.strip()
        if name and name not in names:
            names.append(name)
    return names


def coerce_assignees(value):
    """Field-validator helper: cell text becomes a name tuple, lists pass through."""
    if value is None or isinstance(value, str):
        return tuple(parse_assignees(value))
    return value


def distribute_across_assignees(total: float, count: int) -> float:
    """Equal share of total per assignee; 0 when nobody is assigned."""
    if count <= 0:
        return 0
    return total / count


def format_assignees(names: Sequence[str]) -> str:
    if len(names) <= DISPLAY_LIMIT:
        return " / ".join(names)
    return " / ".join(names[:DISPLAY_LIMIT]) + f" +{len(names) - DISPLAY_LIMIT}"
