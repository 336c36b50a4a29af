"""Share Link - Compact URL-safe tokens for converter state."""

from .payload import DecodeError, DecodeStage, decode, encode
from .state import ShareState

__all__ = ["DecodeError", "DecodeStage", "ShareState", "decode", "encode"]
