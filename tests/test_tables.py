from pathlib import Path

import pytest

from brlc.errors import TableError
from brlc.tables import (
    UNICODE,
    CodeTable,
    available_formats,
    is_format_8dot,
    load_formats,
    load_table,
    output_extension,
    output_filename,
    resolve_format,
)


def _payload(**overrides):
    payload = {"characters": {"a": "⠁", "B": "⠃"}, "encoding": "ascii", "format": "brf"}
    payload.update(overrides)
    return payload


def test_from_mapping_partitions_markers_and_content():
    table = CodeTable.from_mapping(_payload(), name="sample")
    assert dict(table.markers) == {"B": "⠃"}
    assert dict(table.content) == {"a": "⠁"}
    assert table.is_8dot is False
    assert table.format == "brf"


def test_from_mapping_reads_8dot_flag():
    table = CodeTable.from_mapping(_payload(**{"8dots": True}))
    assert table.is_8dot is True
    assert is_format_8dot(table)
    assert is_format_8dot(UNICODE)


@pytest.mark.parametrize("missing", ["characters", "encoding", "format"])
def test_from_mapping_requires_fields(missing):
    payload = _payload()
    del payload[missing]
    with pytest.raises(TableError, match=missing):
        CodeTable.from_mapping(payload)


def test_from_mapping_rejects_unknown_encoding():
    with pytest.raises(TableError, match="unknown byte encoding"):
        CodeTable.from_mapping(_payload(encoding="no-such-codec"))


def test_from_mapping_rejects_non_string_values():
    with pytest.raises(TableError):
        CodeTable.from_mapping(_payload(characters={"a": 1}))


def test_table_characters_are_read_only_copy():
    chars = {"a": "⠁"}
    table = CodeTable(name="t", characters=chars, encoding="ascii", format="brf")
    chars["b"] = "⠃"
    assert "b" not in table.characters
    with pytest.raises(TypeError):
        table.characters["c"] = "⠉"


def test_reverse_index_prefers_later_keys():
    table = CodeTable(name="t", characters={"A": "⠁", "a": "⠁"}, encoding="ascii", format="brf")
    assert table.reverse_index["⠁"] == "a"


def test_load_table_yaml(tmp_path: Path):
    path = tmp_path / "mini.yaml"
    path.write_text('characters:\n  a: "⠁"\nencoding: cp437\nformat: txt\n8dots: true\n', "utf-8")
    table = load_table(path)
    assert table.name == "mini"
    assert table.encoding == "cp437"
    assert table.is_8dot is True


def test_load_table_bad_json(tmp_path: Path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", "utf-8")
    with pytest.raises(TableError, match="Cannot parse"):
        load_table(path)


def test_bundled_tables_load():
    assert {"brf", "nabcc8"} <= set(available_formats())
    tables = load_formats()
    assert tables["brf"].characters["A"] == "⠁"
    assert tables["nabcc8"].characters["A"] == "⡁"
    assert tables["nabcc8"].is_8dot


def test_resolve_format(tmp_path: Path):
    assert resolve_format("unicode") is UNICODE
    assert resolve_format("Unicode") is UNICODE
    assert resolve_format("brf").encoding == "ascii"
    with pytest.raises(TableError, match="Unknown format"):
        resolve_format("nothing", tmp_path)


def test_output_naming():
    brf = resolve_format("brf")
    assert output_extension(UNICODE) == ".txt"
    assert output_extension(brf) == ".brf"
    assert output_filename(Path("books/story.txt"), brf) == "story.brf"
