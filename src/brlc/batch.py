"""File and directory conversion around the engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from brlc.convert import convert
from brlc.detect import DEFAULT_DETECTION, DetectionConfig
from brlc.errors import BrlcError
from brlc.tables import Format, output_filename

logger = logging.getLogger(__name__)


@dataclass
class FileResult:
    source: Path
    output: Path
    ok: bool
    bytes_written: int = 0
    error: str | None = None


@dataclass
class BatchSummary:
    input_dir: Path
    output_dir: Path
    converted: int = 0
    failed: int = 0
    files: list[FileResult] = field(default_factory=list)


def default_output_path(input_path: Path, dest: Format) -> Path:
    """Single file: same location, output extension swapped in."""
    return input_path.with_name(output_filename(input_path, dest))


def default_output_dir(input_dir: Path, dest_name: str) -> Path:
    """Directory: '<dirname>_<format>' in the working directory."""
    return Path(f"{input_dir.resolve().name}_{dest_name}")


def convert_file(
    input_path: Path,
    output_path: Path,
    source: Format,
    dest: Format,
    force_6dot: bool = False,
    encoding: str | None = None,
    detection: DetectionConfig = DEFAULT_DETECTION,
) -> int:
    """Convert one file and return the number of bytes written."""
    data = input_path.read_bytes()
    out = convert(source, dest, data, force_6dot=force_6dot, encoding=encoding, detection=detection)
    output_path.write_bytes(out)
    return len(out)


def convert_directory(
    input_dir: Path,
    output_dir: Path,
    source: Format,
    dest: Format,
    force_6dot: bool = False,
    encoding: str | None = None,
    detection: DetectionConfig = DEFAULT_DETECTION,
) -> BatchSummary:
    """Convert every regular file directly inside input_dir.

    A failing file is recorded and skipped; the rest of the batch still runs.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    summary = BatchSummary(input_dir=input_dir, output_dir=output_dir)
    files = sorted(p for p in input_dir.iterdir() if p.is_file())
    logger.debug("Converting %d file(s) from %s", len(files), input_dir)

    for path in files:
        target = output_dir / output_filename(path, dest)
        try:
            written = convert_file(
                path,
                target,
                source,
                dest,
                force_6dot=force_6dot,
                encoding=encoding,
                detection=detection,
            )
        except (BrlcError, OSError) as exc:
            summary.failed += 1
            summary.files.append(FileResult(source=path, output=target, ok=False, error=str(exc)))
            logger.warning("Error converting %s: %s", path.name, exc)
            continue
        summary.converted += 1
        summary.files.append(
            FileResult(source=path, output=target, ok=True, bytes_written=written)
        )
    return summary
