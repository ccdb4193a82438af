"""Braille cell helpers and the 8-dot to 6-dot normalizer.

A cell is one code point in U+2800..U+28FF. Its offset from U+2800 is the dot
mask: bit i set means dot i+1 is raised, so dots 7 and 8 are bits 6 and 7.
"""

from __future__ import annotations

BRAILLE_BASE = 0x2800
BRAILLE_LAST = 0x28FF
SIX_DOT_LAST = 0x283F
BLANK = "⠀"

DOT7 = 0x40
DOT8 = 0x80


def is_cell(ch: str) -> bool:
    return len(ch) == 1 and BRAILLE_BASE <= ord(ch) <= BRAILLE_LAST


def is_8dot(ch: str) -> bool:
    """True when the cell raises dot 7 and/or dot 8."""
    return is_cell(ch) and ord(ch) > SIX_DOT_LAST


def is_6dot(ch: str) -> bool:
    return len(ch) == 1 and BRAILLE_BASE <= ord(ch) <= SIX_DOT_LAST


def dot_mask(ch: str) -> int:
    if not is_cell(ch):
        raise ValueError(f"Not a braille cell: {ch!r}")
    return ord(ch) - BRAILLE_BASE


def lower_mask(mask: int) -> int:
    """Drop dots 7 and 8 from a dot mask (0-255)."""
    if mask < DOT7:
        return mask
    if mask < DOT8:
        return mask - DOT7
    if mask < DOT8 + DOT7:
        return mask - DOT8
    return mask - (DOT8 + DOT7)


def strip_cell(ch: str) -> str:
    """Return the 6-dot equivalent of a cell; non-cells come back unchanged."""
    if not is_8dot(ch):
        return ch
    return chr(BRAILLE_BASE + lower_mask(ord(ch) - BRAILLE_BASE))


def strip_lowered_dots(text: str) -> str:
    """Replace every 8-dot cell in text with its 6-dot equivalent."""
    return text.translate(_LOWERED_TABLE)


def blank_to_space(text: str) -> str:
    return text.replace(BLANK, " ")


_LOWERED_TABLE = {
    code: BRAILLE_BASE + lower_mask(code - BRAILLE_BASE)
    for code in range(SIX_DOT_LAST + 1, BRAILLE_LAST + 1)
}
