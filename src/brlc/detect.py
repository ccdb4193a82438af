"""Byte encoding detection, decoding and encoding.

Detection always looks at the raw input bytes. The declared source format only
supplies a glyph table; it says nothing about how the file was written to disk.
"""

from __future__ import annotations

import codecs
import logging
from dataclasses import dataclass

import chardet

from brlc.errors import UndetectableEncoding, UnencodableCharacter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectionConfig:
    """Knobs for detection.

    min_confidence: guesses below this are rejected (0.0 accepts any named guess).
    fallback_encoding: used instead of raising when detection fails.
    """

    min_confidence: float = 0.0
    fallback_encoding: str | None = None


@dataclass(frozen=True)
class Detection:
    encoding: str
    confidence: float
    language: str | None = None


DEFAULT_DETECTION = DetectionConfig()


def _codec_name(name: str) -> str | None:
    try:
        return codecs.lookup(name).name
    except LookupError:
        return None


def detect_encoding(data: bytes, config: DetectionConfig = DEFAULT_DETECTION) -> Detection:
    """Guess the byte encoding of data with chardet's statistical probers."""
    if not data:
        return Detection(encoding="ascii", confidence=1.0)

    guess = chardet.detect(data)
    raw_name = guess.get("encoding")
    confidence = float(guess.get("confidence") or 0.0)
    name = _codec_name(raw_name) if raw_name else None
    logger.debug("chardet guess: %s (%.2f) -> %s", raw_name, confidence, name)

    if name is not None and confidence >= config.min_confidence:
        return Detection(encoding=name, confidence=confidence, language=guess.get("language"))

    if config.fallback_encoding:
        fallback = _codec_name(config.fallback_encoding)
        if fallback is None:
            raise UndetectableEncoding(
                f"Unknown fallback encoding '{config.fallback_encoding}'", confidence
            )
        logger.warning(
            "Encoding detection failed (%s, %.2f); falling back to %s",
            raw_name,
            confidence,
            fallback,
        )
        return Detection(encoding=fallback, confidence=0.0)

    if raw_name is None:
        raise UndetectableEncoding("No encoding could be detected for the input", confidence)
    if name is None:
        raise UndetectableEncoding(f"Detected encoding '{raw_name}' is not supported", confidence)
    raise UndetectableEncoding(
        f"Detected {name} with confidence {confidence:.2f}, "
        f"below the required {config.min_confidence:.2f}",
        confidence,
    )


def decode_bytes(
    data: bytes,
    encoding: str | None = None,
    config: DetectionConfig = DEFAULT_DETECTION,
) -> tuple[str, str]:
    """Return (text, encoding). An explicit encoding skips detection."""
    if encoding is None:
        encoding = detect_encoding(data, config).encoding
    elif _codec_name(encoding) is None:
        raise UndetectableEncoding(f"Unknown encoding '{encoding}'")
    if _codec_name(encoding) == "utf-8" and data.startswith(codecs.BOM_UTF8):
        encoding = "utf-8-sig"
    try:
        return data.decode(encoding), encoding
    except UnicodeDecodeError as exc:
        raise UndetectableEncoding(
            f"Input is not valid {encoding} at byte {exc.start}: {exc.reason}"
        ) from exc


def encode_text(text: str, encoding: str) -> bytes:
    """Serialize text, failing loudly instead of dropping characters."""
    try:
        return text.encode(encoding)
    except UnicodeEncodeError as exc:
        raise UnencodableCharacter(encoding, text[exc.start], exc.start) from exc