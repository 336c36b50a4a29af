"""Canonical value model shared by every format adapter.

Parsed documents are plain Python values: ``None``, ``bool``, ``int``,
``float``, ``str``, ``list`` and ``dict``. Anything else a parser hands back
(RON chars and named structs, TOML/YAML dates) is *opaque*: it survives a
same-format round trip, never counts as a string, and is lowered with
``to_plain`` before being written in a format that cannot express it.
"""

import datetime
import json
from enum import Enum
from typing import Any, List, Tuple, Type

from .errors import NotASequenceError


class ValueKind(str, Enum):
    """Variants of the canonical value model."""

    NULL = "null"
    BOOL = "bool"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"
    OPAQUE = "opaque"


class Opaque:
    """Base class for format-specific values without a canonical variant."""

    def plain(self) -> Any:
        """Return the closest canonical value."""
        raise NotImplementedError


DATE_TYPES: Tuple[Type, ...] = (datetime.date, datetime.time)


def kind_of(value: Any) -> ValueKind:
    """Classify a value. ``bool`` is checked before ``int`` on purpose."""
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, list):
        return ValueKind.ARRAY
    if isinstance(value, dict):
        return ValueKind.OBJECT
    return ValueKind.OPAQUE


def is_string(value: Any) -> bool:
    return kind_of(value) == ValueKind.STRING


def as_sequence(value: Any) -> List[Any]:
    """
    View a value as an ordered sequence.

    Args:
        value: Parsed value

    Returns:
        The array elements in original order

    Raises:
        NotASequenceError: If the value is not an array
    """
    kind = kind_of(value)
    if kind != ValueKind.ARRAY:
        raise NotASequenceError(kind.value)
    return value


def _plain_key(key: Any, native: Tuple[Type, ...]) -> Any:
    lowered = to_plain(key, native)
    # Map keys must stay hashable
    if isinstance(lowered, (list, dict)):
        return json.dumps(lowered, ensure_ascii=False)
    return lowered


def to_plain(value: Any, native: Tuple[Type, ...] = ()) -> Any:
    """
    Build a copy of ``value`` with opaque parts lowered to canonical values.

    Args:
        value: Parsed value
        native: Extra types the target format writes natively (kept as-is)

    Returns:
        New value made of canonical types plus ``native`` instances
    """
    if native and isinstance(value, native):
        return value
    if isinstance(value, Opaque):
        return to_plain(value.plain(), native)
    if isinstance(value, dict):
        return {_plain_key(key, native): to_plain(item, native) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(item, native) for item in value]
    if isinstance(value, DATE_TYPES):
        return value.isoformat()
    return value
