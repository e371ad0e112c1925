"""Numeric argument parsing for the command line."""

from __future__ import annotations

import re

from samplemem.core.errors import InvalidParameterError

_HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")
_OCT_RE = re.compile(r"^0[0-7]*$")
_DEC_RE = re.compile(r"^[1-9][0-9]*$")


def parse_uint(text: str, description: str, maximum: int | None = None) -> int:
    """Parse an unsigned integer the way C `strtoumax(text, &end, 0)` reads it.

    `0x` selects hex, a leading `0` selects octal, anything else is decimal.
    Leading and trailing whitespace is ignored; signs and trailing characters
    are rejected.
    """
    stripped = text.strip()
    if _HEX_RE.match(stripped):
        value = int(stripped[2:], 16)
    elif _OCT_RE.match(stripped):
        value = int(stripped, 8)
    elif _DEC_RE.match(stripped):
        value = int(stripped, 10)
    else:
        raise InvalidParameterError(f"invalid {description} - {text}")

    if maximum is not None and value > maximum:
        raise InvalidParameterError(f"{description} too large - {value}")
    return value
