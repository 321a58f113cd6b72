"""Guess the type of a raw transcript token.

Transcriptor stringifies every event argument, so the original type has to be
inferred. Numbers are only accepted when their canonical rendering reproduces
the token exactly; "007", "1.0", "1e5" and "0x10" stay strings. A real string
argument "nil" cannot be told apart from an absent value.
"""

import re

from transcriptor_fixture.models import Value

_INTEGER = re.compile(r"-?\d+")
_FLOAT = re.compile(r"-?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

INT_MIN = -(2**63)
INT_MAX = 2**63 - 1


def parse_number(token: str) -> int | float | None:
    """Parse decimal number text, or return None if the token is not a number."""
    token = token.strip()
    if _INTEGER.fullmatch(token):
        value = int(token)
        if INT_MIN <= value <= INT_MAX:
            return value
        return float(value)
    if _FLOAT.fullmatch(token):
        return float(token)
    return None


def format_number(value: int | float) -> str:
    """Canonical text for a number (integers verbatim, floats with 14 significant digits)."""
    if isinstance(value, int):
        return str(value)
    return "%.14g" % value


def guess_type(token: str) -> Value:
    if token == "nil":
        return None
    if token == "true":
        return True
    if token == "false":
        return False
    number = parse_number(token)
    if number is not None and format_number(number) == token:
        return number
    return token


def guess_types(tokens: list[str]) -> list[Value]:
    return [guess_type(t) for t in tokens]
