"""Code table model and loading.

A code table maps the symbols of a legacy braille code page to Unicode braille
cells and names the byte encoding used to read and write that code page.
Table files are JSON or YAML objects:

    {"characters": {"a": "⠁", ...}, "encoding": "ascii", "format": "brf", "8dots": false}

Single capital letters (A-Z) used as keys are marker entries: they are
resolved before every other key by the forward transcoder.
"""

from __future__ import annotations

import codecs
import logging
import string
from collections.abc import Mapping
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from types import MappingProxyType
from typing import Any, Final

import orjson
import yaml

from brlc.errors import TableError

logger = logging.getLogger(__name__)

MARKER_LETTERS: Final = frozenset(string.ascii_uppercase)
TABLE_SUFFIXES: Final = (".json", ".yml", ".yaml")
DEFAULT_DATA_DIR: Final = Path(__file__).parent / "data"
UNICODE_NAME: Final = "unicode"


class _Unicode:
    """Sentinel format: the wire alphabet is Unicode braille itself."""

    name = UNICODE_NAME
    encoding = "utf-8"
    format = "txt"
    is_8dot = True

    def __repr__(self) -> str:
        return "UNICODE"


UNICODE: Final = _Unicode()


@dataclass(frozen=True, eq=False)
class CodeTable:
    name: str
    characters: Mapping[str, str]
    encoding: str
    format: str
    is_8dot: bool = False

    def __post_init__(self) -> None:
        # callers may keep their dict; the table only ever sees a frozen copy
        object.__setattr__(self, "characters", MappingProxyType(dict(self.characters)))

    @staticmethod
    def from_mapping(payload: Mapping[str, Any], name: str = "") -> CodeTable:
        if not isinstance(payload, Mapping):
            raise TableError(f"Table {name or '<inline>'} must be an object")
        for key in ("characters", "encoding", "format"):
            if key not in payload:
                raise TableError(f"Table {name or '<inline>'} is missing required field '{key}'")

        characters = payload["characters"]
        if not isinstance(characters, Mapping) or not characters:
            raise TableError(f"Table {name or '<inline>'}: 'characters' must be a non-empty object")
        for key, value in characters.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise TableError(
                    f"Table {name or '<inline>'}: entry {key!r} must map a string to a string"
                )
            if not key or not value:
                raise TableError(f"Table {name or '<inline>'}: empty key or value for {key!r}")

        encoding = payload["encoding"]
        if not isinstance(encoding, str):
            raise TableError(f"Table {name or '<inline>'}: 'encoding' must be a string")
        try:
            codecs.lookup(encoding)
        except LookupError as exc:
            raise TableError(
                f"Table {name or '<inline>'}: unknown byte encoding '{encoding}'"
            ) from exc

        fmt = payload["format"]
        if not isinstance(fmt, str) or not fmt:
            raise TableError(f"Table {name or '<inline>'}: 'format' must be a non-empty string")

        return CodeTable(
            name=name,
            characters=characters,
            encoding=encoding,
            format=fmt.lstrip("."),
            is_8dot=bool(payload.get("8dots", False)),
        )

    @cached_property
    def markers(self) -> Mapping[str, str]:
        """Entries keyed by a single capital letter."""
        return MappingProxyType(
            {k: v for k, v in self.characters.items() if k in MARKER_LETTERS}
        )

    @cached_property
    def content(self) -> Mapping[str, str]:
        return MappingProxyType(
            {k: v for k, v in self.characters.items() if k not in MARKER_LETTERS}
        )

    @cached_property
    def reverse_index(self) -> Mapping[str, str]:
        """Cell string -> table key. Later keys win when values repeat."""
        return MappingProxyType({v: k for k, v in self.characters.items()})

    def __repr__(self) -> str:
        return (
            f"CodeTable(name={self.name!r}, entries={len(self.characters)}, "
            f"encoding={self.encoding!r}, format={self.format!r}, is_8dot={self.is_8dot})"
        )


Format = CodeTable | _Unicode


def is_unicode(fmt: Format) -> bool:
    return fmt is UNICODE


def is_format_8dot(fmt: Format) -> bool:
    """Unicode counts as 8-dot; tables answer through their '8dots' flag."""
    return True if is_unicode(fmt) else fmt.is_8dot


def load_table(path: Path) -> CodeTable:
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise TableError(f"Cannot read table {path}: {exc}") from exc
    try:
        if path.suffix.lower() in {".yml", ".yaml"}:
            payload = yaml.safe_load(raw)
        else:
            payload = orjson.loads(raw)
    except (orjson.JSONDecodeError, yaml.YAMLError) as exc:
        raise TableError(f"Cannot parse table {path}: {exc}") from exc
    table = CodeTable.from_mapping(payload, name=path.stem)
    logger.debug("Loaded table %s (%d entries) from %s", table.name, len(table.characters), path)
    return table


def available_formats(directory: Path | None = None) -> list[str]:
    directory = directory or DEFAULT_DATA_DIR
    if not directory.is_dir():
        raise TableError(f"Table directory not found: {directory}")
    return sorted(
        {p.stem for p in directory.iterdir() if p.is_file() and p.suffix.lower() in TABLE_SUFFIXES}
    )


def load_formats(directory: Path | None = None) -> dict[str, CodeTable]:
    """Load every table file in a directory, keyed by file stem."""
    directory = directory or DEFAULT_DATA_DIR
    tables: dict[str, CodeTable] = {}
    for name in available_formats(directory):
        tables[name] = load_table(_table_path(name, directory))
    return tables


def resolve_format(name: str, directory: Path | None = None) -> Format:
    if name.lower() == UNICODE_NAME:
        return UNICODE
    directory = directory or DEFAULT_DATA_DIR
    path = _table_path(name, directory)
    if path is None:
        raise TableError(f"Unknown format '{name}' (looked in {directory})")
    return load_table(path)


def _table_path(name: str, directory: Path) -> Path | None:
    for suffix in TABLE_SUFFIXES:
        candidate = directory / f"{name}{suffix}"
        if candidate.is_file():
            return candidate
    return None


def output_extension(fmt: Format) -> str:
    return ".txt" if is_unicode(fmt) else f".{fmt.format}"


def output_filename(path: Path, fmt: Format) -> str:
    return f"{path.stem}{output_extension(fmt)}"
