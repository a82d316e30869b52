#!/usr/bin/env python3
"""
Tokenizer benchmark: production tokenizers vs regular expression baseline.

Compares the flat text tokenizer used by ``TextCodec`` with the regular
expression version in ``biorecords.formats._regex``, and splitting tabular rows
with ``str.split`` against a compiled delimiter pattern.

Usage:
    python benchmarks/tokenizers.py [--entries 1000] [--runs 5] [--output results.json]

Requirements:
    pip install -e .
"""

import argparse
import gc
import json
import pathlib
import statistics
import time
from dataclasses import asdict, dataclass
from typing import List

from biorecords.formats import _regex
from biorecords.formats.text import tokenize
from biorecords.uniprot import ProteinTextMapping

DATA_DIR = pathlib.Path(__file__).parent.parent / "tests" / "data"


@dataclass
class TimingResult:
    """Timing statistics of one operation."""

    operation: str
    implementation: str
    mean_seconds: float
    std_seconds: float
    min_seconds: float
    runs: int
    items: int


def time_operation(func, runs: int = 5, warmup: int = 1) -> tuple:
    """Time a function several times and return the timings and its last result."""
    for _ in range(warmup):
        func()
        gc.collect()

    times = []
    result = None
    for _ in range(runs):
        gc.collect()
        start = time.perf_counter()
        result = func()
        times.append(time.perf_counter() - start)
    return times, result


def summarize(operation: str, implementation: str, times: List[float], items: int) -> TimingResult:
    return TimingResult(
        operation=operation,
        implementation=implementation,
        mean_seconds=statistics.mean(times),
        std_seconds=statistics.stdev(times) if len(times) > 1 else 0.0,
        min_seconds=min(times),
        runs=len(times),
        items=items,
    )


def load_entry_lines() -> List[str]:
    with open(DATA_DIR / "gapdh.dat") as fin:
        return [x.rstrip("\n") for x in fin if not x.startswith("//")]


def load_rows() -> List[str]:
    with open(DATA_DIR / "proteins.tsv") as fin:
        return [x.rstrip("\n") for x in fin]


def benchmark_text(n_entries: int, runs: int) -> List[TimingResult]:
    lines = load_entry_lines()
    itemized = ProteinTextMapping.itemized
    blocks = [lines] * n_entries

    def production():
        return [tokenize(x, itemized) for x in blocks]

    def baseline():
        return [_regex.tokenize(x, itemized) for x in blocks]

    results = list()
    for name, func in (("production", production), ("regex", baseline)):
        times, items = time_operation(func, runs=runs)
        results.append(summarize("tokenize entry", name, times, len(items)))
    return results


def benchmark_rows(n_entries: int, runs: int) -> List[TimingResult]:
    rows = load_rows() * n_entries

    def production():
        return [x.split("\t") for x in rows]

    def baseline():
        return [_regex.split_row(x, "\t") for x in rows]

    results = list()
    for name, func in (("str.split", production), ("regex", baseline)):
        times, items = time_operation(func, runs=runs)
        results.append(summarize("split row", name, times, len(items)))
    return results


def print_results(results: List[TimingResult]):
    print(f"{'operation':<16}{'implementation':<16}{'mean (ms)':>12}{'std (ms)':>12}{'items':>10}")
    for r in results:
        print(
            f"{r.operation:<16}{r.implementation:<16}"
            f"{r.mean_seconds * 1e3:>12.3f}{r.std_seconds * 1e3:>12.3f}{r.items:>10}"
        )


def main():
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--entries", type=int, default=1000, help="number of copies of each fixture")
    parser.add_argument("--runs", type=int, default=5, help="timed runs per operation")
    parser.add_argument("--output", type=pathlib.Path, default=None, help="save the results as JSON")
    args = parser.parse_args()

    results = benchmark_text(args.entries, args.runs) + benchmark_rows(args.entries, args.runs)
    print_results(results)
    if args.output is not None:
        with open(args.output, "w") as fout:
            json.dump([asdict(x) for x in results], fout, indent=2)


if __name__ == "__main__":
    main()
