"""Transcoding between legacy code pages and Unicode braille.

Legacy text is first rewritten into a list of tokens: a ``TaggedCell`` for
every braille cell (optionally carrying a one-letter tag that records which
source symbol produced it) and plain strings for characters that are neither
cells nor table keys. Tags are "0" for a plain one-cell 6-dot mapping or a
capital letter A-Z taken from the table value itself (e.g. "⠿A").

Going back out, clean Unicode is matched cell by cell against the destination
table's reverse index; tagged tokens walk a fallback chain that gives up dot
count before it gives up the tag.
"""

from __future__ import annotations

import logging
import re
import string
from collections.abc import Iterable, Sequence
from functools import lru_cache
from typing import NamedTuple

from brlc.cells import BLANK, is_6dot, is_8dot, is_cell, strip_cell
from brlc.tables import CodeTable

logger = logging.getLogger(__name__)

BASE_TAG = "0"
TAG_CHARS = frozenset(BASE_TAG + string.ascii_uppercase)


class TaggedCell(NamedTuple):
    cell: str
    tag: str | None = None

    def render(self) -> str:
        return self.cell + (self.tag or "")


Token = TaggedCell | str


def parse_tagged(text: str) -> list[Token]:
    """Split intermediate text into cells (with their tag, if any) and literals."""
    tokens: list[Token] = []
    idx = 0
    total = len(text)
    while idx < total:
        ch = text[idx]
        if is_cell(ch):
            nxt = text[idx + 1] if idx + 1 < total else ""
            if nxt in TAG_CHARS:
                tokens.append(TaggedCell(ch, nxt))
                idx += 2
                continue
            tokens.append(TaggedCell(ch))
        elif tokens and isinstance(tokens[-1], str):
            tokens[-1] += ch
        else:
            tokens.append(ch)
        idx += 1
    return tokens


def render_tagged(tokens: Iterable[Token]) -> str:
    """Inverse of parse_tagged; handy for logging and tests."""
    return "".join(t.render() if isinstance(t, TaggedCell) else t for t in tokens)


class ForwardTokenizer:
    """Single-pass, longest-match rewriter for one source table.

    Marker letters win at any position they occur. Content keys are tried
    longest first. A content key containing a marker letter can never match,
    since the marker always claims that letter first, so it is left out.
    """

    def __init__(self, table: CodeTable) -> None:
        self.table = table
        self._expansions: dict[str, tuple[Token, ...]] = {}
        for key, value in table.markers.items():
            self._expansions[key] = tuple(parse_tagged(value))

        markers = set(table.markers)
        content_keys: list[str] = []
        for key, value in table.content.items():
            if markers.intersection(key):
                logger.debug("Table %s: key %r is shadowed by marker letters", table.name, key)
                continue
            if is_6dot(value):
                self._expansions[key] = (TaggedCell(value, BASE_TAG),)
            else:
                self._expansions[key] = tuple(parse_tagged(value))
            content_keys.append(key)

        alternatives: list[str] = []
        if markers:
            alternatives.append("[" + "".join(sorted(markers)) + "]")
        alternatives.extend(re.escape(k) for k in sorted(content_keys, key=len, reverse=True))
        self._pattern = re.compile("|".join(alternatives)) if alternatives else None

    def tokenize(self, text: str) -> list[Token]:
        tokens: list[Token] = []
        pos = 0
        if self._pattern is not None:
            for match in self._pattern.finditer(text):
                _append_plain(tokens, text[pos : match.start()])
                tokens.extend(self._expansions[match.group()])
                pos = match.end()
        _append_plain(tokens, text[pos:])
        return tokens


def _append_plain(tokens: list[Token], chunk: str) -> None:
    """Unmatched text: stray braille cells become untagged cells, the rest stays literal."""
    for ch in chunk:
        if is_cell(ch):
            tokens.append(TaggedCell(ch))
        elif tokens and isinstance(tokens[-1], str):
            tokens[-1] += ch
        else:
            tokens.append(ch)


@lru_cache(maxsize=64)
def forward_tokenizer(table: CodeTable) -> ForwardTokenizer:
    return ForwardTokenizer(table)


def to_unicode(table: CodeTable, text: str) -> list[Token]:
    """Rewrite legacy text into intermediate tagged tokens."""
    return forward_tokenizer(table).tokenize(text)


def clear_unicode(
    tokens: Iterable[Token] | str, is_source_8dot: bool = False, force_6dot: bool = False
) -> str:
    """Render tokens as user-facing Unicode braille.

    Tags are dropped and the blank cell becomes a space. Dots 7 and 8 are
    stripped unless the source really is an 8-dot code page and the caller
    did not force 6-dot output.
    """
    if isinstance(tokens, str):
        tokens = parse_tagged(tokens)
    strip = not is_source_8dot or force_6dot
    out: list[str] = []
    for token in tokens:
        if not isinstance(token, TaggedCell):
            out.append(token)
        elif token.cell == BLANK:
            out.append(" ")
        else:
            out.append(strip_cell(token.cell) if strip else token.cell)
    return "".join(out)


def from_unicode(
    table: CodeTable, source: str | Sequence[Token], is_clean: bool = True
) -> str:
    """Rewrite Unicode braille into the alphabet of table.

    Clean mode reads user-supplied Unicode; tagged mode reads the output of
    to_unicode. Cells without any counterpart are passed through untouched.
    """
    if is_clean:
        if not isinstance(source, str):
            source = "".join(t.cell if isinstance(t, TaggedCell) else t for t in source)
        return _from_clean(table, source)
    tokens = parse_tagged(source) if isinstance(source, str) else source
    return _from_tagged(table, tokens)


def _from_clean(table: CodeTable, text: str) -> str:
    reverse = table.reverse_index
    resolved: dict[str, str] = {}
    out: list[str] = []
    for ch in text:
        if ch == BLANK:
            out.append(" ")
            continue
        if not is_cell(ch):
            out.append(ch)
            continue
        hit = resolved.get(ch)
        if hit is None:
            hit = reverse.get(ch)
            if hit is None and is_8dot(ch):
                hit = reverse.get(strip_cell(ch))
            if hit is None:
                logger.debug("Table %s has no symbol for %s; passing through", table.name, ch)
                hit = ch
            resolved[ch] = hit
        out.append(hit)
    return "".join(out)


def resolve_cell(table: CodeTable, cell: str, tag: str | None = None) -> str | None:
    """Find the destination symbol for a tagged cell, or None.

    Order: exact cell+tag, bare cell, 6-dot cell+tag, bare 6-dot cell. The
    last two only apply to 8-dot cells.
    """
    reverse = table.reverse_index
    suffix = tag or ""
    key = reverse.get(cell + suffix)
    if key is None and tag:
        key = reverse.get(cell)
    if key is None and is_8dot(cell):
        lowered = strip_cell(cell)
        key = reverse.get(lowered + suffix)
        if key is None and tag:
            key = reverse.get(lowered)
    return key


def _from_tagged(table: CodeTable, tokens: Iterable[Token]) -> str:
    resolved: dict[TaggedCell, str] = {}
    out: list[str] = []
    for token in tokens:
        if not isinstance(token, TaggedCell):
            out.append(token)
            continue
        if token.cell == BLANK:
            out.append(" ")
            continue
        hit = resolved.get(token)
        if hit is None:
            key = resolve_cell(table, token.cell, token.tag)
            if key is None:
                logger.debug(
                    "Table %s has no symbol for %s; keeping bare cell", table.name, token.render()
                )
                key = token.cell
            hit = resolved[token] = key
        out.append(hit)
    return "".join(out)
