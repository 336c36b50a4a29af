"""Data Converter - Convert between JSON, YAML, RON, TOML and CSV formats."""

from .converter import ConversionFormat, ConversionRequest, DataConverter, convert
from .errors import ConversionError, NotASequenceError, ParseError, SerializeError

__all__ = [
    "ConversionError",
    "ConversionFormat",
    "ConversionRequest",
    "DataConverter",
    "NotASequenceError",
    "ParseError",
    "SerializeError",
    "convert",
]
