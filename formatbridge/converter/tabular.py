"""Decide whether an array of records can be written as a CSV table."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from shared.logger import get_logger

from .value import ValueKind, is_string, kind_of

logger = get_logger(__name__)


@dataclass
class TabularView:
    """Header plus string rows, built only for values accepted by ``is_tabular``."""

    header: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)

    def records(self) -> List[List[str]]:
        """Header row followed by the data rows."""
        return [list(self.header)] + [list(row) for row in self.rows]


def _key_counts(items: List[Dict[str, Any]]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for item in items:
        for key in item:
            counts[key] = counts.get(key, 0) + 1
    return counts


def is_tabular(value: Any) -> bool:
    """
    Check whether a value is an array of string-only objects with uniform columns.

    Column uniformity compares how many objects carry each key against the
    first key's count. Equal counts are accepted even when the key sets differ.

    Args:
        value: Parsed value

    Returns:
        True if ``to_table`` may be called on the value
    """
    if kind_of(value) != ValueKind.ARRAY:
        return False

    for item in value:
        if kind_of(item) != ValueKind.OBJECT:
            return False
        if not all(is_string(field_value) for field_value in item.values()):
            return False

    counts = list(_key_counts(value).values())
    if not counts:
        return False

    first_count = counts[0]
    uniform = all(count == first_count for count in counts)
    if not uniform:
        logger.debug(f"Rejecting table: uneven column counts {counts}")
    return uniform


def to_table(value: Any) -> TabularView:
    """
    Build the header and rows for a value accepted by ``is_tabular``.

    The header is the union of keys in first-seen order. Each row holds that
    object's own string values in its own key order, so cells line up with
    the header only when every object lists the same keys in the same order.
    This unaligned layout is kept on purpose to match existing exports.

    Args:
        value: Array of string-only objects

    Returns:
        TabularView with header and rows
    """
    header = list(_key_counts(value))
    rows = [
        [field_value for field_value in item.values() if is_string(field_value)]
        for item in value
        if kind_of(item) == ValueKind.OBJECT
    ]
    return TabularView(header=header, rows=rows)
