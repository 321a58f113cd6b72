"""Render typed values as Lua literals for the fixture file."""

from transcriptor_fixture.models import Bitmask, Value
from transcriptor_fixture.pipeline.coercion import format_number

_UINT64_MASK = 0xFFFFFFFFFFFFFFFF

# Bytes that were not valid UTF-8 are carried as lone surrogates (surrogateescape)
_RAW_BYTE_SURROGATES = range(0xDC80, 0xDD00)

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\0": "\\0",
}


def quote_string(value: str) -> str:
    parts = ['"']
    for i, ch in enumerate(value):
        if ch in _ESCAPES:
            escaped = _ESCAPES[ch]
            # "\0" followed by a digit would read as a longer decimal escape
            if ch == "\0" and value[i + 1:i + 2].isdigit():
                escaped = "\\000"
            parts.append(escaped)
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            parts.append("\\%03d" % ord(ch))
        elif ord(ch) in _RAW_BYTE_SURROGATES:
            parts.append("\\%03d" % (ord(ch) - 0xDC00))
        else:
            parts.append(ch)
    parts.append('"')
    return "".join(parts)


def format_bitmask(mask: Bitmask) -> str:
    # Negative masks print as 64-bit two's complement, like Lua's %x
    return "0x%x" % (mask.value & _UINT64_MASK)


def literal(value: Value | Bitmask) -> str:
    if isinstance(value, Bitmask):
        return format_bitmask(value)
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    return quote_string(str(value))


def literals(values) -> list[str]:
    return [literal(v) for v in values]
