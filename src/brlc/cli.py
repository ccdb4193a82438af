import logging
from pathlib import Path

import orjson
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from brlc.batch import (
    convert_directory,
    convert_file,
    default_output_dir,
    default_output_path,
)
from brlc.detect import DetectionConfig, detect_encoding
from brlc.errors import BrlcError, TableError
from brlc.report import append_csv, append_jsonl, summary_to_row
from brlc.tables import (
    DEFAULT_DATA_DIR,
    UNICODE_NAME,
    Format,
    is_format_8dot,
    is_unicode,
    load_formats,
    resolve_format,
)

app = typer.Typer(help="Convert braille text between Unicode and legacy braille code pages.")
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _read_bytes(path: Path) -> bytes:
    if not path.is_file():
        raise typer.BadParameter(f"Input file not found: {path}")
    return path.read_bytes()


def _load_format(name: str, data_dir: Path | None) -> Format:
    try:
        return resolve_format(name, data_dir)
    except TableError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command("convert")
def convert_cmd(
    input: Path = typer.Argument(..., help="File or directory to convert."),
    from_: str = typer.Option(
        UNICODE_NAME, "--from", "-f", help="Braille format of the input (table name or unicode)."
    ),
    to: str = typer.Option(
        UNICODE_NAME, "--to", "-t", help="Braille format of the output (table name or unicode)."
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Output file, or output folder when converting a folder."
    ),
    force_6dot: bool = typer.Option(
        False, "--force-6dot", help="Remove dots 7/8 when converting to Unicode."
    ),
    encoding: str | None = typer.Option(
        None, "--encoding", "-e", help="Input byte encoding; skips detection when given."
    ),
    min_confidence: float = typer.Option(
        0.0, "--min-confidence", help="Reject detected encodings below this confidence."
    ),
    data_dir: Path | None = typer.Option(
        None, "--data-dir", envvar="BRLC_DATA_DIR", help="Folder holding code table files."
    ),
    log_csv: Path | None = typer.Option(
        None, "--log-csv", help="Append a folder conversion summary as a CSV row."
    ),
    log_jsonl: Path | None = typer.Option(
        None, "--log-jsonl", help="Append a folder conversion summary as a JSON line."
    ),
    tag: str | None = typer.Option(None, "--tag", help="Optional tag to mark this run in logs."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Convert a file, or every file in a folder, between braille formats."""
    _configure_logging(verbose)
    source = _load_format(from_, data_dir)
    dest = _load_format(to, data_dir)
    detection = DetectionConfig(min_confidence=min_confidence)

    if force_6dot and not (is_unicode(dest) and is_format_8dot(source)):
        console.print("[yellow]--force-6dot only applies to 8-dot input converted to unicode.[/]")

    if input.is_dir():
        out_dir = output or default_output_dir(input, to)
        summary = convert_directory(
            input,
            out_dir,
            source,
            dest,
            force_6dot=force_6dot,
            encoding=encoding,
            detection=detection,
        )
        if not summary.files:
            console.print("No files found in the input directory.")
        for result in summary.files:
            if result.ok:
                console.print(f"  Converted: {result.source.name} -> {result.output.name}")
            else:
                console.print(f"  [red]Error converting {result.source.name}:[/] {result.error}")
        errors = f", {summary.failed} error(s)" if summary.failed else ""
        console.print(f"[bold green]Done![/] {summary.converted} file(s) converted{errors}.")
        console.print(f"Output directory: {out_dir.resolve()}")

        row = summary_to_row(summary, source=from_, dest=to, tag=tag)
        if log_csv:
            append_csv(log_csv, row)
            console.print(f"[bold green]Appended CSV log[/] to {log_csv}")
        if log_jsonl:
            append_jsonl(log_jsonl, row)
            console.print(f"[bold green]Appended JSONL log[/] to {log_jsonl}")
        if summary.failed:
            raise typer.Exit(code=1)
        return

    if not input.is_file():
        raise typer.BadParameter(f"Input file not found: {input}")
    target = output or default_output_path(input, dest)
    try:
        written = convert_file(
            input,
            target,
            source,
            dest,
            force_6dot=force_6dot,
            encoding=encoding,
            detection=detection,
        )
    except BrlcError as exc:
        console.print(f"[bold red]Error during conversion:[/] {exc}")
        raise typer.Exit(code=1) from exc
    console.print(f"[bold green]Done![/] Wrote {written} bytes to {target}")


@app.command()
def detect(
    input: Path = typer.Argument(..., help="File whose byte encoding should be detected."),
    min_confidence: float = typer.Option(
        0.0, "--min-confidence", help="Reject detected encodings below this confidence."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Report the byte encoding the converter would use for a file."""
    _configure_logging(verbose)
    data = _read_bytes(input)
    try:
        result = detect_encoding(data, DetectionConfig(min_confidence=min_confidence))
    except BrlcError as exc:
        console.print(f"[bold red]Detection failed:[/] {exc}")
        raise typer.Exit(code=1) from exc
    payload = {
        "input": str(input),
        "bytes": len(data),
        "encoding": result.encoding,
        "confidence": round(result.confidence, 4),
        "language": result.language,
    }
    console.print(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())


@app.command()
def formats(
    data_dir: Path | None = typer.Option(
        None, "--data-dir", envvar="BRLC_DATA_DIR", help="Folder holding code table files."
    ),
) -> None:
    """List the available braille formats."""
    directory = data_dir or DEFAULT_DATA_DIR
    try:
        tables = load_formats(directory)
    except TableError as exc:
        console.print(f"[bold red]Cannot load tables:[/] {exc}")
        raise typer.Exit(code=1) from exc

    table = Table(title=f"Formats in {directory}")
    table.add_column("Name")
    table.add_column("Encoding")
    table.add_column("Extension")
    table.add_column("8-dot", justify="center")
    table.add_row(UNICODE_NAME, "utf-8", ".txt", "yes")
    for name, code_table in tables.items():
        table.add_row(
            name,
            code_table.encoding,
            f".{code_table.format}",
            "yes" if code_table.is_8dot else "no",
        )
    console.print(table)


if __name__ == "__main__":
    app()
