"""
Structured value types understood by the value codec.

Python has no unsigned integer and no color type in the standard library, so
the two atoms the document format stores for them are modelled here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = ["UInt", "Color"]


class UInt(int):
    """Non-negative integer.

    Behaves like ``int`` everywhere; only construction is restricted.
    """

    def __new__(cls, value=0):
        obj = super().__new__(cls, value)
        if obj < 0:
            raise ValueError(f"UInt cannot be negative: {value!r}")
        return obj

    def __repr__(self) -> str:
        return f"UInt({int(self)})"


_HEX_RE = re.compile(r"#([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})")

# Names accepted in addition to hex notation (subset of the SVG color names)
NAMED_COLORS: dict[str, tuple[int, int, int, int]] = {
    "black": (0, 0, 0, 255),
    "white": (255, 255, 255, 255),
    "red": (255, 0, 0, 255),
    "green": (0, 128, 0, 255),
    "lime": (0, 255, 0, 255),
    "blue": (0, 0, 255, 255),
    "yellow": (255, 255, 0, 255),
    "cyan": (0, 255, 255, 255),
    "magenta": (255, 0, 255, 255),
    "gray": (128, 128, 128, 255),
    "grey": (128, 128, 128, 255),
    "orange": (255, 165, 0, 255),
    "transparent": (0, 0, 0, 0),
}


@dataclass(frozen=True)
class Color:
    """
    RGBA color with 8 bits per channel.

    A color built with ``valid=False`` (see :meth:`invalid`) stands for "no
    color"; it serializes to an empty atom.

    Examples:
        Color(255, 0, 0).name()          -> "#ffff0000"
        Color.from_string("#80ff0000")   -> Color(255, 0, 0, 128)
    """

    red: int = 0
    green: int = 0
    blue: int = 0
    alpha: int = 255
    valid: bool = True

    @classmethod
    def invalid(cls) -> Color:
        """Create the "no color" value."""
        return cls(valid=False)

    @property
    def is_valid(self) -> bool:
        channels = (self.red, self.green, self.blue, self.alpha)
        return self.valid and all(0 <= c <= 255 for c in channels)

    def name(self) -> str:
        """Return the color as ``#aarrggbb``."""
        return f"#{self.alpha:02x}{self.red:02x}{self.green:02x}{self.blue:02x}"

    @classmethod
    def from_string(cls, text: str) -> Color:
        """
        Parse ``#rgb``, ``#rrggbb``, ``#aarrggbb`` or a known color name.

        Raises:
            ValueError: If the text is not a valid color
        """
        named = NAMED_COLORS.get(text.lower())
        if named is not None:
            return cls(*named)

        match = _HEX_RE.fullmatch(text)
        if not match:
            raise ValueError(f"Not a valid color: {text!r}")

        digits = match.group(1)
        if len(digits) == 3:
            r, g, b = (int(d * 2, 16) for d in digits)
            return cls(r, g, b)
        if len(digits) == 6:
            return cls(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))
        return cls(
            int(digits[2:4], 16),
            int(digits[4:6], 16),
            int(digits[6:8], 16),
            int(digits[0:2], 16),
        )
