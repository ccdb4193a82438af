from pathlib import Path

from typer.testing import CliRunner

from brlc.cli import app

runner = CliRunner()


def test_formats_lists_bundled_tables():
    result = runner.invoke(app, ["formats"])
    assert result.exit_code == 0
    assert "brf" in result.output
    assert "nabcc8" in result.output


def test_convert_single_file(tmp_path: Path):
    src = tmp_path / "story.txt"
    src.write_bytes("⠁⠃".encode("utf-8"))
    result = runner.invoke(app, ["convert", str(src), "--to", "brf", "--encoding", "utf-8"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "story.brf").read_bytes() == b"ab"


def test_convert_to_unicode_with_explicit_output(tmp_path: Path):
    src = tmp_path / "story.brf"
    src.write_bytes(b"HELLO")
    out = tmp_path / "result.txt"
    result = runner.invoke(app, ["convert", str(src), "-f", "brf", "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert out.read_text("utf-8") == "⠓⠑⠇⠇⠕"


def test_convert_unknown_format_is_rejected(tmp_path: Path):
    src = tmp_path / "story.txt"
    src.write_bytes(b"x")
    result = runner.invoke(app, ["convert", str(src), "--to", "no-such-format"])
    assert result.exit_code != 0


def test_convert_reports_unencodable_output(tmp_path: Path):
    src = tmp_path / "story.txt"
    src.write_bytes("é⠁".encode("utf-8"))
    result = runner.invoke(app, ["convert", str(src), "--to", "brf", "--encoding", "utf-8"])
    assert result.exit_code == 1
    assert "Error during conversion" in result.output


def test_convert_directory_with_jsonl_log(tmp_path: Path):
    in_dir = tmp_path / "books"
    in_dir.mkdir()
    (in_dir / "one.brf").write_bytes(b"AB")
    out_dir = tmp_path / "out"
    log = tmp_path / "logs" / "convert.jsonl"
    result = runner.invoke(
        app,
        ["convert", str(in_dir), "-f", "brf", "-o", str(out_dir), "--log-jsonl", str(log)],
    )
    assert result.exit_code == 0, result.output
    assert (out_dir / "one.txt").read_text("utf-8") == "⠁⠃"
    assert '"converted":1' in log.read_text()


def test_detect_prints_encoding(tmp_path: Path):
    src = tmp_path / "story.brf"
    src.write_bytes(b"HELLO WORLD")
    result = runner.invoke(app, ["detect", str(src)])
    assert result.exit_code == 0
    assert '"ascii"' in result.output
