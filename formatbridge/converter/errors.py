"""Conversion error types.

All of them subclass ``ValueError`` so callers that only care about
"the input could not be converted" can keep catching ``ValueError``.
"""

from typing import Optional


class ConversionError(ValueError):
    """Base class for every failure raised by the conversion engine."""


class ParseError(ConversionError):
    """Source text does not conform to the declared format."""

    def __init__(self, format: str, message: str):
        self.format = format
        self.message = message
        super().__init__(f"Failed to parse {format}: {message}")


class SerializeError(ConversionError):
    """A value cannot be rendered in the target format."""

    def __init__(self, format: str, message: str):
        self.format = format
        self.message = message
        super().__init__(f"Failed to convert to {format}: {message}")


class NotASequenceError(ConversionError):
    """A sequence was required but the root value is a scalar or an object."""

    def __init__(self, kind: Optional[str] = None):
        self.kind = kind
        found = f" (found {kind})" if kind else ""
        super().__init__(f"Expected an array at the document root{found}")
