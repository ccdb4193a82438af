"""Typed failures raised by the conversion engine."""

from __future__ import annotations


class BrlcError(Exception):
    """Base class for every engine failure."""


class TableError(BrlcError):
    """A code table file is missing, unreadable, or malformed."""


class UndetectableEncoding(BrlcError):
    """The byte encoding of the input could not be determined."""

    def __init__(self, message: str, confidence: float | None = None) -> None:
        super().__init__(message)
        self.confidence = confidence


class UnencodableCharacter(BrlcError):
    """The destination byte encoding cannot represent a produced character."""

    def __init__(self, encoding: str, character: str, position: int) -> None:
        super().__init__(
            f"Cannot encode {character!r} (U+{ord(character):04X}) at position {position} "
            f"with {encoding}"
        )
        self.encoding = encoding
        self.character = character
        self.position = position
