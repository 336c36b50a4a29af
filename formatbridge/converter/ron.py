"""Rusty Object Notation (RON) reader and pretty printer.

RON values map onto the canonical model where they can:

* ``()`` and ``None`` become ``None``
* lists become ``list``, maps and anonymous structs ``(x: 1)`` become ``dict``
* strings (including raw ``r#"..."#`` strings) become ``str``

The rest stays opaque so RON-to-RON conversion keeps it: ``Char``,
``Some``, ``Tuple`` (anonymous or named), ``Struct`` (named) and ``Unit``
(bare identifiers such as enum variants).
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple as TupleType

from .errors import ParseError
from .value import DATE_TYPES, Opaque

INDENT = "    "

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NUMBER_RE = re.compile(
    r"[+-]?(?:"
    r"0x[0-9A-Fa-f_]+|0o[0-7_]+|0b[01_]+"
    r"|(?:[0-9][0-9_]*)?\.?[0-9][0-9_]*(?:[eE][+-]?[0-9_]+)?"
    r")"
)
_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "'": "'",
}


@dataclass(frozen=True)
class Char(Opaque):
    """A single character literal, ``'c'``."""

    value: str

    def plain(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Some(Opaque):
    """A present optional value, ``Some(x)``."""

    value: Any

    def plain(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Tuple(Opaque):
    """A tuple or tuple struct, ``(a, b)`` or ``Name(a, b)``."""

    items: TupleType[Any, ...]
    name: Optional[str] = None

    def plain(self) -> Any:
        return list(self.items)


@dataclass(frozen=True)
class Struct(Opaque):
    """A named struct, ``Name(x: 1)``."""

    name: str
    fields: Dict[str, Any] = field(default_factory=dict)

    def plain(self) -> Any:
        return dict(self.fields)


@dataclass(frozen=True)
class Unit(Opaque):
    """A bare identifier such as an enum variant or unit struct."""

    name: str

    def plain(self) -> Any:
        return self.name


class _Reader:
    """Recursive-descent reader over RON text."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    # -- low level -------------------------------------------------------

    def error(self, message: str) -> ParseError:
        line = self.text.count("\n", 0, self.pos) + 1
        column = self.pos - (self.text.rfind("\n", 0, self.pos) + 1) + 1
        return ParseError("ron", f"{line}:{column}: {message}")

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_ws(self) -> None:
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch.isspace():
                self.pos += 1
            elif text.startswith("//", self.pos):
                end = text.find("\n", self.pos)
                self.pos = len(text) if end == -1 else end + 1
            elif text.startswith("/*", self.pos):
                self.skip_block_comment()
            else:
                break

    def skip_block_comment(self) -> None:
        depth = 0
        while self.pos < len(self.text):
            if self.text.startswith("/*", self.pos):
                depth += 1
                self.pos += 2
            elif self.text.startswith("*/", self.pos):
                depth -= 1
                self.pos += 2
                if depth == 0:
                    return
            else:
                self.pos += 1
        raise self.error("unterminated block comment")

    def expect(self, ch: str) -> None:
        self.skip_ws()
        if self.peek() != ch:
            found = repr(self.peek()) if self.peek() else "end of input"
            raise self.error(f"expected {ch!r}, found {found}")
        self.pos += 1

    def consume(self, ch: str) -> bool:
        self.skip_ws()
        if self.peek() == ch:
            self.pos += 1
            return True
        return False

    def ident(self) -> Optional[str]:
        match = _IDENT_RE.match(self.text, self.pos)
        if not match:
            return None
        self.pos = match.end()
        return match.group()

    # -- grammar ---------------------------------------------------------

    def document(self) -> Any:
        self.skip_ws()
        while self.text.startswith("#!", self.pos):
            end = self.text.find("]", self.pos)
            if end == -1:
                raise self.error("unterminated attribute")
            self.pos = end + 1
            self.skip_ws()

        value = self.value()
        self.skip_ws()
        if self.pos != len(self.text):
            raise self.error("trailing characters")
        return value

    def value(self) -> Any:
        self.skip_ws()
        ch = self.peek()
        if not ch:
            raise self.error("unexpected end of input")
        if ch == "[":
            return self.seq()
        if ch == "{":
            return self.map()
        if ch == "(":
            return self.parens(None)
        if ch == '"':
            return self.string()
        if ch == "r" and self.text.startswith(("r\"", "r#"), self.pos):
            return self.raw_string()
        if ch == "'":
            return self.char()
        if ch.isdigit() or ch in "+-.":
            return self.number()
        if ch.isalpha() or ch == "_":
            return self.named()
        raise self.error(f"unexpected character {ch!r}")

    def seq(self) -> List[Any]:
        self.expect("[")
        items = []
        while not self.consume("]"):
            items.append(self.value())
            if not self.consume(","):
                self.expect("]")
                break
        return items

    def map(self) -> Dict[Any, Any]:
        self.expect("{")
        entries: Dict[Any, Any] = {}
        while not self.consume("}"):
            key = self.value()
            if isinstance(key, (list, dict)):
                raise self.error("map keys must be scalars")
            self.expect(":")
            entries[key] = self.value()
            if not self.consume(","):
                self.expect("}")
                break
        return entries

    def parens(self, name: Optional[str]) -> Any:
        self.expect("(")
        if self.consume(")"):
            return Tuple((), name) if name else None

        self.skip_ws()
        start = self.pos
        key = self.ident()
        is_struct = key is not None and self.consume(":")
        self.pos = start

        if is_struct:
            fields: Dict[str, Any] = {}
            while not self.consume(")"):
                self.skip_ws()
                key = self.ident()
                if key is None:
                    raise self.error("expected field name")
                self.expect(":")
                fields[key] = self.value()
                if not self.consume(","):
                    self.expect(")")
                    break
            return Struct(name, fields) if name else fields

        items = []
        while not self.consume(")"):
            items.append(self.value())
            if not self.consume(","):
                self.expect(")")
                break
        if name == "Some":
            if len(items) != 1:
                raise self.error("Some takes exactly one value")
            return Some(items[0])
        return Tuple(tuple(items), name)

    def named(self) -> Any:
        name = self.ident()
        if name == "true":
            return True
        if name == "false":
            return False
        if name == "None":
            return None
        if name == "inf":
            return math.inf
        if name == "NaN":
            return math.nan

        self.skip_ws()
        if self.peek() == "(":
            return self.parens(name)
        return Unit(name)

    def number(self) -> Any:
        if self.text.startswith(("inf", "NaN"), self.pos + 1) and self.peek() in "+-":
            sign = -1.0 if self.peek() == "-" else 1.0
            self.pos += 1
            word = self.ident()
            return sign * math.inf if word == "inf" else math.nan

        match = _NUMBER_RE.match(self.text, self.pos)
        if not match or not match.group().strip("+-"):
            raise self.error("invalid number")
        self.pos = match.end()
        literal = match.group().replace("_", "")
        digits = literal.lstrip("+-")

        try:
            if digits[:2] in ("0x", "0o", "0b"):
                return int(literal, 0)
            if any(ch in digits for ch in ".eE"):
                return float(literal)
            return int(literal)
        except ValueError as e:
            raise self.error(f"invalid number {match.group()!r}") from e

    def escape(self) -> str:
        self.pos += 1
        ch = self.peek()
        self.pos += 1
        if ch in _ESCAPES:
            return _ESCAPES[ch]
        if ch == "x":
            digits = self.text[self.pos:self.pos + 2]
            self.pos += 2
            return chr(self._hex(digits))
        if ch == "u":
            if self.peek() == "{":
                end = self.text.find("}", self.pos)
                if end == -1:
                    raise self.error("unterminated unicode escape")
                digits = self.text[self.pos + 1:end]
                self.pos = end + 1
            else:
                digits = self.text[self.pos:self.pos + 4]
                self.pos += 4
            return chr(self._hex(digits))
        raise self.error(f"unknown escape \\{ch}")

    def _hex(self, digits: str) -> int:
        try:
            return int(digits, 16)
        except ValueError as e:
            raise self.error(f"invalid escape digits {digits!r}") from e

    def string(self) -> str:
        self.pos += 1
        parts = []
        while True:
            ch = self.peek()
            if not ch:
                raise self.error("unterminated string")
            if ch == '"':
                self.pos += 1
                return "".join(parts)
            if ch == "\\":
                parts.append(self.escape())
            else:
                parts.append(ch)
                self.pos += 1

    def raw_string(self) -> str:
        self.pos += 1
        hashes = 0
        while self.peek() == "#":
            hashes += 1
            self.pos += 1
        if self.peek() != '"':
            raise self.error("invalid raw string")
        self.pos += 1
        terminator = '"' + "#" * hashes
        end = self.text.find(terminator, self.pos)
        if end == -1:
            raise self.error("unterminated raw string")
        value = self.text[self.pos:end]
        self.pos = end + len(terminator)
        return value

    def char(self) -> Char:
        self.pos += 1
        if self.peek() == "\\":
            value = self.escape()
        else:
            value = self.peek()
            self.pos += 1
        if self.peek() != "'":
            raise self.error("invalid char literal")
        self.pos += 1
        return Char(value)


def loads(text: str) -> Any:
    """
    Parse RON text.

    Raises:
        ParseError: If the text is not valid RON
    """
    return _Reader(text).document()


def _quote(text: str, quote: str = '"') -> str:
    out = []
    for ch in text:
        if ch == "\\":
            out.append("\\\\")
        elif ch == quote:
            out.append("\\" + quote)
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\r":
            out.append("\\r")
        elif ch == "\t":
            out.append("\\t")
        elif ch == "\0":
            out.append("\\0")
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{{{ord(ch):x}}}")
        else:
            out.append(ch)
    return quote + "".join(out) + quote


def _float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return repr(value)


def _block(open_: str, close: str, lines: List[str], level: int) -> str:
    if not lines:
        return open_ + close
    pad = INDENT * (level + 1)
    body = "".join(f"{pad}{line},\n" for line in lines)
    return f"{open_}\n{body}{INDENT * level}{close}"


def _dump(value: Any, level: int) -> str:
    if value is None:
        return "()"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _float(value)
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, list):
        return _block("[", "]", [_dump(item, level + 1) for item in value], level)
    if isinstance(value, dict):
        lines = [f"{_dump(key, level + 1)}: {_dump(item, level + 1)}" for key, item in value.items()]
        return _block("{", "}", lines, level)
    if isinstance(value, Char):
        return _quote(value.value, "'")
    if isinstance(value, Some):
        return f"Some({_dump(value.value, level)})"
    if isinstance(value, Tuple):
        items = [_dump(item, level) for item in value.items]
        inner = ", ".join(items) + ("," if len(items) == 1 else "")
        return f"{value.name or ''}({inner})"
    if isinstance(value, Struct):
        lines = [f"{key}: {_dump(item, level + 1)}" for key, item in value.fields.items()]
        return _block(f"{value.name}(", ")", lines, level)
    if isinstance(value, Unit):
        return value.name
    if isinstance(value, (tuple, set, frozenset)):
        return _dump(list(value), level)
    if isinstance(value, DATE_TYPES):
        return _quote(value.isoformat())
    if isinstance(value, Opaque):
        return _dump(value.plain(), level)
    raise TypeError(f"Object of type {type(value).__name__} is not RON serializable")


def dumps(value: Any) -> str:
    """Pretty-print a value as RON, four-space indented with trailing commas."""
    return _dump(value, 0)


__all__ = ["Char", "Some", "Struct", "Tuple", "Unit", "dumps", "loads"]
