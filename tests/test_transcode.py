from concurrent.futures import ThreadPoolExecutor

from brlc.tables import CodeTable
from brlc.transcode import (
    TaggedCell,
    clear_unicode,
    from_unicode,
    parse_tagged,
    render_tagged,
    resolve_cell,
    to_unicode,
)


def _table(characters: dict[str, str], is_8dot: bool = False) -> CodeTable:
    return CodeTable(
        name="test", characters=characters, encoding="utf-8", format="txt", is_8dot=is_8dot
    )


def test_to_unicode_tags_single_six_dot_mappings():
    table = _table({"a": "⠁", "b": "⠃"})
    tokens = to_unicode(table, "ab")
    assert tokens == [TaggedCell("⠁", "0"), TaggedCell("⠃", "0")]
    assert render_tagged(tokens) == "⠁0⠃0"


def test_to_unicode_keeps_eight_dot_and_multi_cell_values_verbatim():
    table = _table({"x": "⡇", "É": "⠠⠑"})
    assert to_unicode(table, "xÉ") == [TaggedCell("⡇"), TaggedCell("⠠"), TaggedCell("⠑")]


def test_to_unicode_prefers_longest_key():
    table = _table({"a": "⠁", "ab": "⠡", "b": "⠃"})
    assert render_tagged(to_unicode(table, "abb")) == "⠡0⠃0"


def test_marker_letters_win_over_content_keys_containing_them():
    table = _table({"X": "⠭", "aX": "⠿", "a": "⠁"})
    assert to_unicode(table, "aX") == [TaggedCell("⠁", "0"), TaggedCell("⠭")]


def test_marker_value_tags_are_parsed():
    table = _table({"é": "⠿A", "A": "⠁"})
    assert to_unicode(table, "éA") == [TaggedCell("⠿", "A"), TaggedCell("⠁")]


def test_unmapped_text_passes_through():
    table = _table({"a": "⠁"})
    assert to_unicode(table, "a?\n⠃") == [TaggedCell("⠁", "0"), "?\n", TaggedCell("⠃")]


def test_to_unicode_does_not_touch_the_table():
    table = _table({"X": "⠭", "a": "⠁"})
    to_unicode(table, "Xa")
    assert dict(table.characters) == {"X": "⠭", "a": "⠁"}
    assert to_unicode(table, "Xa") == [TaggedCell("⠭"), TaggedCell("⠁", "0")]


def test_to_unicode_is_safe_to_share_across_threads():
    table = _table({"X": "⠭", "a": "⠁", "b": "⠃"})
    texts = ["abX" * n for n in range(1, 40)]
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda t: render_tagged(to_unicode(table, t)), texts))
    assert results == ["⠁0⠃0⠭" * n for n in range(1, 40)]


def test_parse_tagged_round_trips_intermediate_text():
    text = "⠁A⠃0⠉ x"
    tokens = parse_tagged(text)
    assert tokens == [TaggedCell("⠁", "A"), TaggedCell("⠃", "0"), TaggedCell("⠉"), " x"]
    assert render_tagged(tokens) == text


def test_clear_unicode_strips_dots_unless_source_is_8dot():
    tokens = to_unicode(_table({"x": "⡇", " ": "⠀", "é": "⠿A"}), "x é")
    assert clear_unicode(tokens, is_source_8dot=False) == "⠇ ⠿"
    assert clear_unicode(tokens, is_source_8dot=True) == "⡇ ⠿"
    assert clear_unicode(tokens, is_source_8dot=True, force_6dot=True) == "⠇ ⠿"


def test_clear_unicode_accepts_intermediate_text():
    assert clear_unicode("⠁A⠀0⣿") == "⠁ ⠿"


def test_from_unicode_clean_mode():
    table = _table({"a": "⠁", "b": "⠃"})
    assert from_unicode(table, "⠁⠃") == "ab"
    assert from_unicode(table, "⡁⠀⠿x") == "a ⠿x"


def test_resolve_cell_fallback_chain():
    table = _table({"e": "⡁A", "s": "⠁A", "t": "⠁"})
    # exact match wins even when 6-dot candidates exist
    assert resolve_cell(table, "⡁", "A") == "e"
    assert resolve_cell(table, "⠁", "A") == "s"
    # tag dropped before anything else
    assert resolve_cell(table, "⠁", "B") == "t"
    assert resolve_cell(table, "⠁", "0") == "t"


def test_resolve_cell_downgrades_dots_before_dropping_tag():
    table = _table({"s": "⠁A", "t": "⠁"})
    assert resolve_cell(table, "⡁", "A") == "s"
    assert resolve_cell(table, "⡁", "B") == "t"
    assert resolve_cell(table, "⡁") == "t"


def test_resolve_cell_prefers_bare_eight_dot_over_downgraded_tag():
    table = _table({"b": "⡁", "s": "⠁A"})
    assert resolve_cell(table, "⡁", "A") == "b"


def test_from_unicode_tagged_mode_keeps_bare_cell_when_unmapped():
    table = _table({"t": "⠁"})
    tokens = [TaggedCell("⠿", "A"), TaggedCell("⠁", "0"), TaggedCell("⠀", "0"), "!"]
    assert from_unicode(table, tokens, is_clean=False) == "⠿t !"
    assert from_unicode(table, "⠿A⠁0", is_clean=False) == "⠿t"
