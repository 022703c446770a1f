"""
NES Compress - Number and Hex String Utilities

Parsing for the number syntaxes accepted on the command line and inside
format templates, plus hex formatting used in diagnostics.
"""

import re
from typing import Iterable, List, Optional

_DECIMAL = re.compile(r"[0-9]+")
_HEX = re.compile(r"[0-9a-fA-F]+")


def parse_int(text: str) -> int:
    """
    Parse a decimal, 0x-prefixed hex or $-prefixed hex integer.

    Args:
        text: Number string (e.g., "128", "0x80", "$80")

    Returns:
        Integer value

    Raises:
        ValueError: If text is not one of the accepted forms

    Example:
        >>> parse_int("$2000")
        8192
    """
    s = text.strip()
    if s.startswith("0x"):
        digits = s[2:]
        base = 16
    elif s.startswith("$"):
        digits = s[1:]
        base = 16
    else:
        digits = s
        base = 10

    pattern = _HEX if base == 16 else _DECIMAL
    if not pattern.fullmatch(digits):
        raise ValueError(f"Invalid number: {text!r}")
    return int(digits, base)


def parse_byte(text: str) -> int:
    """Parse a number and check that it fits in one byte."""
    value = parse_int(text)
    if not 0 <= value <= 0xFF:
        raise ValueError(f"Value {text!r} does not fit in a byte")
    return value


def format_hex_row(row: Iterable[Optional[int]]) -> str:
    """
    Format byte values as a space-separated hex string.

    Missing values (past the end of a buffer) are shown as "--".

    Example:
        >>> format_hex_row([1, 2, 163, None])
        '01 02 A3 --'
    """
    return " ".join("--" if b is None else f"{b:02X}" for b in row)


def format_hex_rows(data: bytes, width: int = 16) -> List[str]:
    """
    Format a buffer as rows of space-separated hex bytes.

    Args:
        data: Bytes to format
        width: Bytes per row

    Returns:
        List of hex strings, one per row
    """
    return [format_hex_row(data[i : i + width]) for i in range(0, len(data), width)]
