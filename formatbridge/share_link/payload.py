"""Pack text into a URL-safe token and back.

A token is the raw-deflated UTF-8 text, base64 encoded, then
percent-encoded so it can sit in a query string value.
"""

import base64
import binascii
import zlib
from enum import Enum
from typing import NewType
from urllib.parse import quote, unquote

from shared.logger import get_logger

logger = get_logger(__name__)

PayloadToken = NewType("PayloadToken", str)

COMPRESSION_LEVEL = 5

# Negative window bits: raw deflate stream, no zlib header or checksum
RAW_DEFLATE_WBITS = -zlib.MAX_WBITS


class DecodeStage(str, Enum):
    """Decoding steps, in the order they run."""

    PERCENT = "percent"
    BASE64 = "base64"
    INFLATE = "inflate"
    UTF8 = "utf8"


class DecodeError(ValueError):
    """A token could not be turned back into text."""

    def __init__(self, stage: DecodeStage, cause: str):
        self.stage = stage
        self.cause = cause
        super().__init__(f"Failed to decode payload ({stage.value}): {cause}")


def encode(text: str) -> PayloadToken:
    """
    Encode text as a payload token.

    Args:
        text: Any text

    Returns:
        ASCII token safe to use as a single query parameter value
    """
    compressor = zlib.compressobj(COMPRESSION_LEVEL, zlib.DEFLATED, RAW_DEFLATE_WBITS)
    compressed = compressor.compress(text.encode("utf-8")) + compressor.flush()
    encoded = base64.b64encode(compressed).decode("ascii")
    token = quote(encoded, safe="")
    logger.debug(f"Encoded {len(text)} characters into a {len(token)} character token")
    return PayloadToken(token)


def decode(token: str) -> str:
    """
    Decode a payload token produced by ``encode``.

    Args:
        token: Payload token

    Returns:
        The original text

    Raises:
        DecodeError: With ``stage`` set to the step that failed
    """
    try:
        unquoted = unquote(token, errors="strict")
    except UnicodeDecodeError as e:
        raise DecodeError(DecodeStage.PERCENT, str(e)) from e

    try:
        compressed = base64.b64decode(unquoted, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(DecodeStage.BASE64, str(e)) from e

    decompressor = zlib.decompressobj(RAW_DEFLATE_WBITS)
    try:
        raw = decompressor.decompress(compressed) + decompressor.flush()
    except zlib.error as e:
        raise DecodeError(DecodeStage.INFLATE, str(e)) from e
    if not decompressor.eof:
        raise DecodeError(DecodeStage.INFLATE, "truncated deflate stream")

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(DecodeStage.UTF8, str(e)) from e
