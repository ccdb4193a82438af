"""Conversion entry point.

The route is chosen per call from the two formats:

- unicode -> unicode: clean blank cells, optionally drop dots 7/8
- unicode -> table:   reverse transcode in clean mode
- table -> unicode:   forward transcode, then clear_unicode
- table -> table:     forward transcode, reverse transcode in tagged mode
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from brlc.cells import blank_to_space, strip_lowered_dots
from brlc.detect import DEFAULT_DETECTION, DetectionConfig, decode_bytes, encode_text
from brlc.tables import UNICODE, Format, is_unicode
from brlc.transcode import clear_unicode, from_unicode, to_unicode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionRequest:
    source: Format
    dest: Format
    data: bytes
    force_6dot: bool = False
    encoding: str | None = None
    detection: DetectionConfig = DEFAULT_DETECTION

    def run(self) -> bytes:
        return convert(
            self.source,
            self.dest,
            self.data,
            force_6dot=self.force_6dot,
            encoding=self.encoding,
            detection=self.detection,
        )


def route_name(source: Format, dest: Format) -> str:
    src = "unicode" if is_unicode(source) else "legacy"
    dst = "unicode" if is_unicode(dest) else "legacy"
    return f"{src}->{dst}"


def convert_text(source: Format, dest: Format, text: str, force_6dot: bool = False) -> str:
    """Transcode already-decoded text between two formats."""
    if is_unicode(source) and is_unicode(dest):
        text = blank_to_space(text)
        return strip_lowered_dots(text) if force_6dot else text
    if is_unicode(source):
        return from_unicode(dest, blank_to_space(text), is_clean=True)
    tokens = to_unicode(source, text)
    if is_unicode(dest):
        return clear_unicode(tokens, is_source_8dot=source.is_8dot, force_6dot=force_6dot)
    return from_unicode(dest, tokens, is_clean=False)


def convert(
    source: Format,
    dest: Format,
    data: bytes,
    force_6dot: bool = False,
    encoding: str | None = None,
    detection: DetectionConfig = DEFAULT_DETECTION,
) -> bytes:
    """Convert raw bytes from source format to dest format.

    The input byte encoding is detected from the bytes unless encoding is
    given. Output is UTF-8 for Unicode, otherwise the destination table's
    encoding. Raises UndetectableEncoding or UnencodableCharacter.
    """
    text, detected = decode_bytes(data, encoding=encoding, config=detection)
    out_text = convert_text(source, dest, text, force_6dot=force_6dot)
    out_encoding = UNICODE.encoding if is_unicode(dest) else dest.encoding
    logger.debug(
        "%s: %d bytes read as %s, writing %d chars as %s",
        route_name(source, dest),
        len(data),
        detected,
        len(out_text),
        out_encoding,
    )
    return encode_text(out_text, out_encoding)
