"""Read CSV text into records."""

import csv
import io
from typing import Dict, List, Union

from shared.logger import get_logger

from .errors import ParseError

logger = get_logger(__name__)

CsvRecords = Union[List[Dict[str, str]], List[List[str]]]


def _read_rows(text: str) -> List[List[str]]:
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    try:
        # Blank lines come back as empty lists
        return [row for row in reader if row]
    except csv.Error as e:
        raise ParseError("csv", f"line {reader.line_num}: {e}") from e


def parse_csv(text: str, has_header: bool = True) -> CsvRecords:
    """
    Parse CSV text. Cells are always strings.

    Args:
        text: Raw CSV text (comma separated, RFC 4180 quoting)
        has_header: Whether the first record holds column names

    Returns:
        A list of header-keyed dicts when ``has_header`` is set,
        otherwise a list of cell lists (row lengths may vary)

    Raises:
        ParseError: On malformed quoting, or when a record's length differs
            from the header's
    """
    rows = _read_rows(text)

    if not has_header:
        logger.debug(f"Read {len(rows)} CSV rows without header")
        return rows

    if not rows:
        return []

    header, body = rows[0], rows[1:]
    records: List[Dict[str, str]] = []

    for index, row in enumerate(body, start=2):
        if len(row) != len(header):
            raise ParseError(
                "csv",
                f"record {index} has {len(row)} fields, but the header has {len(header)}",
            )
        records.append({name: row[position] for position, name in enumerate(header)})

    logger.debug(f"Read {len(records)} CSV records with {len(header)} columns")
    return records
