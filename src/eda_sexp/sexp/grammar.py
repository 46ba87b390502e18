"""
Grammar primitives of the document format.

Node kinds and the character rules for list names, tokens and quoted strings.

Accepted charsets:
    list name   a letter or ``_`` followed by letters, digits and ``_ . : + -``
    token       any non-empty run without whitespace, control characters,
                parentheses or double quotes
    string      anything; backslash, double quote and the control characters
                in ESCAPES are written as backslash escapes, every other
                control character (U+0000..U+001F, U+007F) as ``\\xHH``
"""

from __future__ import annotations

import re
from enum import Enum

__all__ = [
    "NodeType",
    "ESCAPES",
    "UNESCAPES",
    "is_valid_list_name",
    "is_valid_token",
    "escape_string",
    "unescape_char",
    "decode_hex_escape",
]


class NodeType(Enum):
    """Kind of an S-expression node."""

    LIST = "list"  # has a name and an arbitrary number of children
    TOKEN = "token"  # value without quotes, e.g. -12.34
    STRING = "string"  # value with double quotes, e.g. "Foo!"
    LINE_BREAK = "line_break"  # manual line break inside a list


_LIST_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_.:+\-]*")
_TOKEN_RE = re.compile(r'[^\s()"\x00-\x1f\x7f]+')

# Characters written as backslash escapes inside quoted strings
ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
}

# Escape letter -> character; any other escaped character stands for itself
UNESCAPES: dict[str, str] = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}

_ESCAPE_TABLE = str.maketrans(
    {
        **{chr(c): f"\\x{c:02x}" for c in (*range(0x20), 0x7F)},
        **ESCAPES,
    }
)

_HEX_ESCAPE_RE = re.compile(r"[0-9a-fA-F]{2}")


def is_valid_list_name(name: str) -> bool:
    """Check if ``name`` may be used as the name of a list node."""
    return _LIST_NAME_RE.fullmatch(name) is not None


def is_valid_token(token: str) -> bool:
    """Check if ``token`` can be written unquoted."""
    return _TOKEN_RE.fullmatch(token) is not None


def escape_string(text: str) -> str:
    """Escape ``text`` for use between double quotes."""
    return text.translate(_ESCAPE_TABLE)


def unescape_char(char: str) -> str:
    """Return the character a backslash followed by ``char`` stands for."""
    return UNESCAPES.get(char, char)


def decode_hex_escape(digits: str) -> str | None:
    """Decode the two digits of a ``\\xHH`` escape; None if they are not hex."""
    if not _HEX_ESCAPE_RE.fullmatch(digits):
        return None
    return chr(int(digits, 16))
