"""Quantity parsing for catalog measurement strings."""

import math
from types import MappingProxyType

# Vulgar fraction glyph to value mapping
FRACTIONS = MappingProxyType(
    {
        "¼": 0.25,
        "½": 0.5,
        "¾": 0.75,
        "⅐": 1 / 7,
        "⅑": 1 / 9,
        "⅒": 0.1,
        "⅓": 1 / 3,
        "⅔": 2 / 3,
        "⅕": 0.2,
        "⅖": 0.4,
        "⅗": 0.6,
        "⅘": 0.8,
        "⅙": 1 / 6,
        "⅚": 5 / 6,
        "⅛": 0.125,
        "⅜": 0.375,
        "⅝": 0.625,
        "⅞": 0.875,
        "⅟": 1.0,
        "↉": 0.0,
    }
)


class ParseError(ValueError):
    """Exception raised when a quantity string cannot be parsed."""

    def __init__(self, text: str, reason: str):
        self.text = text
        super().__init__(f"{reason}: {text!r}")


def _parse_decimal(text: str) -> float | None:
    """Parse an ASCII decimal number, returning None if it isn't one."""
    if not text.isascii():
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_quantity(text: str) -> float:
    """
    Parse a quantity string into a number.

    Examples:
        "3" -> 3.0
        "0.5" -> 0.5
        "½" -> 0.5
        "1 ½" -> 1.5

    Raises:
        ParseError: If the text is not a decimal, a fraction glyph or a mixed number
    """
    value = _parse_decimal(text)
    if value is not None:
        return value

    parts = text.split()

    if len(parts) == 2:
        # Mixed number: whole part and a fraction glyph
        whole = _parse_decimal(parts[0])
        if whole is None:
            raise ParseError(text, "Invalid whole part in mixed number")
        if len(parts[1]) != 1:
            raise ParseError(text, "Invalid fraction in mixed number")
        if parts[1] not in FRACTIONS:
            raise ParseError(text, "Not a fraction")
        return whole + FRACTIONS[parts[1]]

    if len(parts) == 1 and len(parts[0]) == 1:
        if parts[0] not in FRACTIONS:
            raise ParseError(text, "Not a fraction")
        return FRACTIONS[parts[0]]

    raise ParseError(text, "Malformed quantity")
