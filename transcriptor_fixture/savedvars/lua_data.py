"""Data-only reader for WoW SavedVariables files.

SavedVariables are Lua chunks made of top-level assignments whose right-hand
sides are table constructors and literals. This module reads that subset as
data and never evaluates code: the only values it can produce are dicts,
lists, str, int, float, bool and None. Anything else (function calls,
operators, identifiers on the right-hand side) is a syntax error.

Tables whose keys are exactly 1..n become lists, all other tables become
dicts. ``nil`` values are dropped from tables, as Lua does.
"""

import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NUMBER = re.compile(
    r"0[xX][0-9a-fA-F]+|(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"
)
_LONG_BRACKET = re.compile(r"\[(=*)\[")
_WHITESPACE = re.compile(r"\s+")
_STRING_RUNS = {
    '"': re.compile(r'[^"\\\n]+'),
    "'": re.compile(r"[^'\\\n]+"),
}
_DECIMAL_ESCAPE = re.compile(r"[0-9]{1,3}")
_HEX_ESCAPE = re.compile(r"[0-9a-fA-F]{2}")
_UNICODE_ESCAPE = re.compile(r"\{([0-9a-fA-F]+)\}")

_SIMPLE_ESCAPES = {
    "a": b"\a", "b": b"\b", "f": b"\f", "n": b"\n", "r": b"\r",
    "t": b"\t", "v": b"\v", "\\": b"\\", '"': b'"', "'": b"'", "\n": b"\n",
}

_KEYWORDS = {"true": True, "false": False, "nil": None}

MAX_TABLE_DEPTH = 200
_MAX_CODE_POINT = 0x10FFFF


class LuaSyntaxError(ValueError):
    """Raised when the input is not a well-formed SavedVariables data chunk."""

    def __init__(self, message: str, pos: int, text: str) -> None:
        line = text.count("\n", 0, pos) + 1
        super().__init__(f"{message} (line {line})")
        self.pos = pos
        self.line = line


class _Reader:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.depth = 0

    def error(self, message: str) -> LuaSyntaxError:
        return LuaSyntaxError(message, self.pos, self.text)

    def skip(self) -> None:
        """Skip whitespace and comments."""
        text = self.text
        while self.pos < len(text):
            m = _WHITESPACE.match(text, self.pos)
            if m:
                self.pos = m.end()
                continue
            if text.startswith("--", self.pos):
                self.pos += 2
                m = _LONG_BRACKET.match(text, self.pos)
                if m:
                    self._long_bracket(m)
                else:
                    end = text.find("\n", self.pos)
                    self.pos = len(text) if end == -1 else end + 1
                continue
            break

    def peek(self) -> str:
        self.skip()
        return self.text[self.pos:self.pos + 1]

    def expect(self, token: str) -> None:
        self.skip()
        if not self.text.startswith(token, self.pos):
            raise self.error(f"expected {token!r}")
        self.pos += len(token)

    def accept(self, token: str) -> bool:
        self.skip()
        if self.text.startswith(token, self.pos):
            self.pos += len(token)
            return True
        return False

    def name(self) -> str | None:
        self.skip()
        m = _NAME.match(self.text, self.pos)
        if not m:
            return None
        self.pos = m.end()
        return m.group(0)

    def value(self) -> Any:
        ch = self.peek()
        if ch == "{":
            return self.table()
        if ch in ("'", '"'):
            return self.string(ch)
        if ch == "[":
            m = _LONG_BRACKET.match(self.text, self.pos)
            if m:
                return self._long_bracket(m)
        if ch == "-":
            self.pos += 1
            return -self.number()
        if ch.isdigit() or ch == ".":
            return self.number()
        start = self.pos
        word = self.name()
        if word in _KEYWORDS:
            return _KEYWORDS[word]
        self.pos = start
        raise self.error("expected a literal value")

    def number(self) -> int | float:
        self.skip()
        m = _NUMBER.match(self.text, self.pos)
        if not m:
            raise self.error("malformed number")
        self.pos = m.end()
        token = m.group(0)
        if token[:2] in ("0x", "0X"):
            return int(token, 16)
        if re.fullmatch(r"\d+", token):
            return int(token)
        return float(token)

    def string(self, quote: str) -> str:
        text = self.text
        run = _STRING_RUNS[quote]
        self.pos += 1
        out = bytearray()
        while True:
            m = run.match(text, self.pos)
            if m:
                out += m.group(0).encode("utf-8", "surrogateescape")
                self.pos = m.end()
            ch = text[self.pos:self.pos + 1]
            if ch == quote:
                self.pos += 1
                break
            if ch != "\\":
                # end of input or a raw newline
                raise self.error("unfinished string")
            self.pos += 1
            esc = text[self.pos:self.pos + 1]
            if esc in _SIMPLE_ESCAPES:
                out += _SIMPLE_ESCAPES[esc]
                self.pos += 1
            elif esc.isascii() and esc.isdigit():
                m = _DECIMAL_ESCAPE.match(text, self.pos)
                code = int(m.group(0))
                if code > 255:
                    raise self.error("decimal escape too large")
                out.append(code)
                self.pos = m.end()
            elif esc == "x":
                m = _HEX_ESCAPE.match(text, self.pos + 1)
                if not m:
                    raise self.error("hexadecimal digit expected")
                out.append(int(m.group(0), 16))
                self.pos = m.end()
            elif esc == "z":
                m = _WHITESPACE.match(text, self.pos + 1)
                self.pos = m.end() if m else self.pos + 1
            elif esc == "u":
                m = _UNICODE_ESCAPE.match(text, self.pos + 1)
                if not m:
                    raise self.error("malformed unicode escape")
                code = int(m.group(1), 16)
                if code > _MAX_CODE_POINT:
                    raise self.error("unicode escape too large")
                out += chr(code).encode("utf-8", "surrogatepass")
                self.pos = m.end()
            else:
                raise self.error("invalid escape sequence")
        return out.decode("utf-8", "surrogateescape")

    def _long_bracket(self, m: re.Match) -> str:
        close = "]" + m.group(1) + "]"
        start = m.end()
        end = self.text.find(close, start)
        if end == -1:
            raise self.error("unfinished long string")
        self.pos = end + len(close)
        body = self.text[start:end]
        # A newline right after the opening bracket is not part of the string
        if body.startswith("\r\n"):
            return body[2:]
        if body.startswith("\n"):
            return body[1:]
        return body

    def table(self) -> dict | list:
        self.expect("{")
        self.depth += 1
        if self.depth > MAX_TABLE_DEPTH:
            raise self.error("tables nested too deeply")
        items: dict[Any, Any] = {}
        next_index = 1
        while not self.accept("}"):
            if self.peek() == "[" and not _LONG_BRACKET.match(self.text, self.pos):
                self.pos += 1
                key = self.value()
                if isinstance(key, (dict, list)) or key is None:
                    raise self.error("invalid table key")
                self.expect("]")
                self.expect("=")
                items[key] = self.value()
            else:
                start = self.pos
                key = self.name()
                if key is not None and key not in _KEYWORDS and self.accept("="):
                    items[key] = self.value()
                else:
                    self.pos = start
                    items[next_index] = self.value()
                    next_index += 1
            if not (self.accept(",") or self.accept(";")):
                self.expect("}")
                break
        self.depth -= 1
        return _table_to_python(items)


def _table_to_python(items: dict[Any, Any]) -> dict | list:
    items = {k: v for k, v in items.items() if v is not None}
    keys = list(items)
    if all(isinstance(k, int) and not isinstance(k, bool) for k in keys):
        if sorted(keys) == list(range(1, len(keys) + 1)):
            return [items[i] for i in range(1, len(keys) + 1)]
    return items


def loads(text: str) -> dict[str, Any]:
    """Parse a SavedVariables chunk into a mapping of global name -> value."""
    reader = _Reader(text)
    result: dict[str, Any] = {}
    while reader.peek():
        name = reader.name()
        if name is None:
            raise reader.error("expected a variable name")
        reader.expect("=")
        value = reader.value()
        if value is not None:
            result[name] = value
        reader.accept(";")
    logger.debug("Parsed %d top-level variables", len(result))
    return result

