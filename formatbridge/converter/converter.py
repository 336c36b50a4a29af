"""Core data conversion logic."""

import csv
import datetime
import io
import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional

import jmespath
import toml
import yaml
from jmespath.exceptions import JMESPathError

from shared.logger import get_logger

from . import ron
from .csv_reader import parse_csv
from .errors import ConversionError, ParseError, SerializeError
from .tabular import is_tabular, to_table
from .value import DATE_TYPES, ValueKind, as_sequence, kind_of, to_plain

logger = get_logger(__name__)


class ConversionFormat(str, Enum):
    """Supported conversion formats."""

    JSON = "json"
    YAML = "yaml"
    RON = "ron"
    TOML = "toml"
    CSV = "csv"

    @classmethod
    def parse(cls, tag: str) -> "ConversionFormat":
        """
        Parse a format tag. Tags are case-sensitive lowercase identifiers.

        Raises:
            ValueError: If the tag is not a known format
        """
        for member in cls:
            if member.value == tag:
                return member
        raise ValueError(f"Unknown format: {tag!r}")

    @property
    def uses_csv_options(self) -> bool:
        """Whether the CSV options apply when this is the input format."""
        return self is ConversionFormat.CSV


EXTENSIONS = {
    ".json": ConversionFormat.JSON,
    ".yaml": ConversionFormat.YAML,
    ".yml": ConversionFormat.YAML,
    ".ron": ConversionFormat.RON,
    ".toml": ConversionFormat.TOML,
    ".csv": ConversionFormat.CSV,
}


@dataclass(frozen=True)
class ConversionRequest:
    """Everything one conversion needs, fetched by the caller beforehand."""

    raw_text: str
    source_format: ConversionFormat
    target_format: ConversionFormat
    csv_has_header: bool = True


def _find_null(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, dict):
        return any(_find_null(item) for item in value.values())
    if isinstance(value, list):
        return any(_find_null(item) for item in value)
    return False


def _csv_cell(value: Any) -> str:
    kind = kind_of(value)
    if kind == ValueKind.NULL:
        return ""
    if kind == ValueKind.BOOL:
        return "true" if value else "false"
    if kind in (ValueKind.ARRAY, ValueKind.OBJECT):
        raise SerializeError("csv", f"cannot write a nested {kind.value} into a CSV cell")
    return str(value)


def _csv_record(item: Any) -> List[str]:
    item = to_plain(item)
    if isinstance(item, list):
        return [_csv_cell(cell) for cell in item]
    if isinstance(item, dict):
        return [_csv_cell(cell) for cell in item.values()]
    return [_csv_cell(item)]


class DataConverter:
    """
    Convert between JSON, YAML, RON, TOML and CSV formats.

    Every format is parsed into plain Python values first; CSV output
    decides between a header+rows table and one record per array element.
    """

    def __init__(self, indent: int = 2):
        """
        Initialize data converter.

        Args:
            indent: Indentation level for JSON and YAML output
        """
        self.indent = indent
        logger.debug("Initialized DataConverter")

    def load_file(
        self,
        filepath: Path,
        format: Optional[ConversionFormat] = None,
        csv_has_header: bool = True,
    ) -> Any:
        """
        Load data from file.

        Args:
            filepath: Path to file
            format: Format to parse (auto-detect if None)
            csv_has_header: Whether CSV input starts with a header row

        Returns:
            Parsed data

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If format is unknown or parsing fails
        """
        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")

        if format is None:
            format = self.detect_format(filepath)

        logger.info(f"Loading {format.value} from {filepath}")

        with open(filepath, "r", encoding="utf-8", newline="") as f:
            content = f.read()

        return self.parse(content, format, csv_has_header=csv_has_header)

    def detect_format(self, filepath: Path) -> ConversionFormat:
        """Guess the format from the file extension."""
        suffix = filepath.suffix.lower()
        if suffix not in EXTENSIONS:
            raise ValueError(f"Cannot auto-detect format for: {filepath}")
        return EXTENSIONS[suffix]

    def parse(self, data: str, format: ConversionFormat, csv_has_header: bool = True) -> Any:
        """
        Parse data string.

        Args:
            data: Data string
            format: Input format
            csv_has_header: Whether CSV input starts with a header row

        Returns:
            Parsed data

        Raises:
            ParseError: If parsing fails
        """
        try:
            if format == ConversionFormat.JSON:
                return json.loads(data)
            elif format == ConversionFormat.YAML:
                return yaml.safe_load(data)
            elif format == ConversionFormat.RON:
                return ron.loads(data)
            elif format == ConversionFormat.TOML:
                return toml.loads(data)
            elif format == ConversionFormat.CSV:
                return parse_csv(data, has_header=csv_has_header)
            else:
                raise ParseError(str(format), "unsupported format")

        except ConversionError as e:
            logger.error(str(e))
            raise

        except Exception as e:
            logger.error(f"Failed to parse {format.value}: {e}")
            raise ParseError(format.value, str(e)) from e

    def convert(
        self,
        data: Any,
        to_format: ConversionFormat,
        pretty: bool = True,
        indent: Optional[int] = None,
    ) -> str:
        """
        Convert data to specified format.

        Args:
            data: Parsed data
            to_format: Target format
            pretty: Whether to pretty-print (JSON only)
            indent: Indentation level (defaults to the converter's)

        Returns:
            Formatted string

        Raises:
            NotASequenceError: If CSV output is requested for a non-array root
            SerializeError: If the data cannot be expressed in the target format
        """
        indent = self.indent if indent is None else indent

        try:
            if to_format == ConversionFormat.JSON:
                plain = to_plain(data)
                if pretty:
                    return json.dumps(plain, indent=indent, ensure_ascii=False)
                else:
                    return json.dumps(plain, ensure_ascii=False)

            elif to_format == ConversionFormat.YAML:
                return yaml.safe_dump(
                    to_plain(data, native=(datetime.date,)),
                    default_flow_style=False,
                    allow_unicode=True,
                    sort_keys=False,
                    indent=indent,
                )

            elif to_format == ConversionFormat.RON:
                return ron.dumps(data)

            elif to_format == ConversionFormat.TOML:
                return self._to_toml(data)

            elif to_format == ConversionFormat.CSV:
                return self._to_csv(data)

            else:
                raise SerializeError(str(to_format), "unsupported format")

        except ConversionError as e:
            logger.error(str(e))
            raise

        except Exception as e:
            logger.error(f"Failed to convert to {to_format.value}: {e}")
            raise SerializeError(to_format.value, str(e)) from e

    def _to_toml(self, data: Any) -> str:
        plain = to_plain(data, native=DATE_TYPES)
        if kind_of(plain) != ValueKind.OBJECT:
            raise SerializeError("toml", f"the document root must be a table, not {kind_of(plain).value}")
        if _find_null(plain):
            raise SerializeError("toml", "null values cannot be expressed in TOML")
        return toml.dumps(plain)

    def _to_csv(self, data: Any) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")

        if is_tabular(data):
            table = to_table(data)
            logger.debug(f"Writing table with {len(table.header)} columns and {len(table.rows)} rows")
            writer.writerows(table.records())
        else:
            for item in as_sequence(data):
                writer.writerow(_csv_record(item))

        return buffer.getvalue()

    def convert_text(self, request: ConversionRequest) -> str:
        """
        Run one conversion: parse ``raw_text`` and write it in the target format.

        Args:
            request: Conversion request

        Returns:
            Converted text

        Raises:
            ConversionError: The first parse or serialize failure
        """
        logger.debug(f"Converting {request.source_format.value} to {request.target_format.value}")
        data = self.parse(request.raw_text, request.source_format, csv_has_header=request.csv_has_header)
        return self.convert(data, request.target_format)

    def convert_file(
        self,
        input_path: Path,
        output_path: Path,
        to_format: ConversionFormat,
        from_format: Optional[ConversionFormat] = None,
        csv_has_header: bool = True,
        pretty: bool = True,
    ) -> None:
        """
        Convert file from one format to another.

        Args:
            input_path: Input file path
            output_path: Output file path
            to_format: Target format
            from_format: Source format (auto-detect if None)
            csv_has_header: Whether CSV input starts with a header row
            pretty: Whether to pretty-print
        """
        data = self.load_file(input_path, format=from_format, csv_has_header=csv_has_header)

        output_data = self.convert(data, to_format, pretty=pretty)

        with open(output_path, "w", encoding="utf-8", newline="") as f:
            f.write(output_data)

        logger.info(f"Converted {input_path} to {output_path}")

    def query(self, data: Any, query_str: str) -> Any:
        """
        Query data using JMESPath.

        Args:
            data: Data to query
            query_str: JMESPath query string

        Returns:
            Query result

        Raises:
            ValueError: If query fails
        """
        try:
            return jmespath.search(query_str, data)

        except JMESPathError as e:
            logger.error(f"Query failed: {e}")
            raise ValueError(f"Query failed: {e}") from e

    def minify_json(self, data: Any) -> str:
        """
        Minify JSON data (remove whitespace).

        Args:
            data: Data to minify

        Returns:
            Minified JSON string
        """
        return json.dumps(to_plain(data), separators=(",", ":"), ensure_ascii=False)


def convert(request: ConversionRequest, converter: Optional[DataConverter] = None) -> str:
    """Convert ``request.raw_text`` with a default converter unless one is given."""
    return (converter or DataConverter()).convert_text(request)
