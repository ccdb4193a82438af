"""Micro-benchmarks for the conversion routes on bundled tables."""

from __future__ import annotations

import time

from brlc.convert import convert
from brlc.tables import UNICODE, resolve_format

SAMPLE = "⠓⠑⠇⠇⠕ ⠺⠕⠗⠇⠙ ⠼⠁⠃⠉ ⡁⠃⠉⠙⠑ "


def benchmark_convert(repeat: int = 2000, runs: int = 3) -> dict[str, dict[str, float]]:
    brf = resolve_format("brf")
    nabcc8 = resolve_format("nabcc8")
    unicode_data = (SAMPLE * repeat).encode("utf-8")
    legacy_data = convert(UNICODE, nabcc8, unicode_data)
    routes = {
        "unicode->unicode": (UNICODE, UNICODE, unicode_data),
        "unicode->brf": (UNICODE, brf, unicode_data),
        "nabcc8->unicode": (nabcc8, UNICODE, legacy_data),
        "nabcc8->brf": (nabcc8, brf, legacy_data),
    }
    results: dict[str, dict[str, float]] = {}
    for name, (source, dest, data) in routes.items():
        best = None
        for _ in range(runs):
            start = time.perf_counter()
            convert(source, dest, data)
            elapsed = time.perf_counter() - start
            best = elapsed if best is None or elapsed < best else best
        mbps = (len(data) / 1_000_000) / best if best else 0.0
        results[name] = {"bytes": len(data), "best_seconds": best or 0.0, "mbps": mbps}
    return results


if __name__ == "__main__":
    for route, result in benchmark_convert().items():
        print(route, result)
