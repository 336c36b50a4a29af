"""Share-link query string state."""

from dataclasses import dataclass
from typing import List, Optional, Tuple
from urllib.parse import parse_qsl, urlencode

from formatbridge.converter.converter import ConversionFormat
from shared.logger import get_logger

from .payload import decode, encode

logger = get_logger(__name__)

LEFT_KEY = "left"
INPUT_FORMAT_KEY = "input_format"
TARGET_FORMAT_KEY = "target_format"


@dataclass
class ShareState:
    """
    Decoded contents of a share link.

    Absent fields mean "keep the current value".

    Attributes:
        left_text: Source pane text
        input_format: Source format
        target_format: Target format
    """

    left_text: Optional[str] = None
    input_format: Optional[ConversionFormat] = None
    target_format: Optional[ConversionFormat] = None

    def to_query(self) -> str:
        """
        Serialize to a query string (without leading ``?``).

        The source text is carried as a payload token under ``left``.
        """
        pairs: List[Tuple[str, str]] = []
        if self.left_text is not None:
            pairs.append((LEFT_KEY, encode(self.left_text)))
        if self.input_format is not None:
            pairs.append((INPUT_FORMAT_KEY, self.input_format.value))
        if self.target_format is not None:
            pairs.append((TARGET_FORMAT_KEY, self.target_format.value))
        return urlencode(pairs)

    @classmethod
    def from_query(cls, query: str) -> "ShareState":
        """
        Parse a query string, with or without leading ``?``.

        Unknown keys are ignored.

        Raises:
            DecodeError: If the ``left`` token cannot be decoded
            ValueError: If a format tag is unknown
        """
        query = query[1:] if query.startswith("?") else query
        state = cls()

        for key, value in parse_qsl(query, keep_blank_values=True):
            if key == LEFT_KEY:
                state.left_text = decode(value)
            elif key == INPUT_FORMAT_KEY:
                state.input_format = ConversionFormat.parse(value)
            elif key == TARGET_FORMAT_KEY:
                state.target_format = ConversionFormat.parse(value)
            else:
                logger.debug(f"Ignoring unknown share-link key: {key}")

        return state
