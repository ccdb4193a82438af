"""Helpers to log batch summaries for trend tracking."""

from __future__ import annotations

import csv
from datetime import datetime, timezone
from pathlib import Path

import orjson

from brlc.batch import BatchSummary


def summary_to_row(
    summary: BatchSummary, source: str, dest: str, tag: str | None = None
) -> dict:
    """Flatten a BatchSummary into a CSV/JSONL-friendly row."""
    failures = {r.source.name: r.error for r in summary.files if not r.ok}
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "input_dir": str(summary.input_dir),
        "output_dir": str(summary.output_dir),
        "from": source,
        "to": dest,
        "tag": tag or "",
        "converted": summary.converted,
        "failed": summary.failed,
        "bytes_written": sum(r.bytes_written for r in summary.files),
        "failures": orjson.dumps(failures).decode(),
    }


def append_csv(path: Path, row: dict) -> None:
    """Append a row to a CSV file, writing headers when the file is new."""
    path.parent.mkdir(parents=True, exist_ok=True)
    is_new = not path.exists()
    with path.open("a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(row.keys()))
        if is_new:
            writer.writeheader()
        writer.writerow(row)


def append_jsonl(path: Path, payload: dict) -> None:
    """Append a JSON line (UTF-8) to a log file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("ab") as f:
        f.write(orjson.dumps(payload) + b"\n")
