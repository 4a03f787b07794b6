#!/usr/bin/env python3
# scripts/check_receipts.py
# Receipt comparison tool for determinism verification

from __future__ import annotations
import json
import sys


def load_jsonl(path: str) -> list[dict]:
    """Load JSONL file as list of records."""
    with open(path) as f:
        return [json.loads(line) for line in f if line.strip()]


def deep_diff(a, b, path: str = "") -> list[str]:
    """
    Recursively find differences between two receipt values.

    Dicts are compared key by key, lists element by element.

    Returns:
        list of difference descriptions
    """
    if isinstance(a, dict) and isinstance(b, dict):
        diffs = []
        only_a = set(a) - set(b)
        only_b = set(b) - set(a)
        if only_a:
            diffs.append(f"{path}: keys only in A: {sorted(only_a)}")
        if only_b:
            diffs.append(f"{path}: keys only in B: {sorted(only_b)}")
        for key in sorted(set(a) & set(b)):
            diffs.extend(deep_diff(a[key], b[key], f"{path}.{key}" if path else key))
        return diffs

    if isinstance(a, list) and isinstance(b, list):
        if len(a) != len(b):
            return [f"{path}: length {len(a)} != {len(b)}"]
        diffs = []
        for i, (x, y) in enumerate(zip(a, b)):
            diffs.extend(deep_diff(x, y, f"{path}[{i}]"))
        return diffs

    return [] if a == b else [f"{path}: {a!r} != {b!r}"]


def compare_records(records_a: list[dict], records_b: list[dict]) -> list[str]:
    """
    Compare two receipt streams.

    Records are matched positionally. The env section is skipped: only
    the computation must agree across machines.
    """
    if len(records_a) != len(records_b):
        return [f"record count mismatch ({len(records_a)} vs {len(records_b)})"]

    diffs = []
    for i, (rec_a, rec_b) in enumerate(zip(records_a, records_b)):
        rec_a = {k: v for k, v in rec_a.items() if k != "env"}
        rec_b = {k: v for k, v in rec_b.items() if k != "env"}
        diffs.extend(deep_diff(rec_a, rec_b, f"record[{i}]"))
    return diffs


def main(argv: list[str] | None = None) -> int:
    """
    Compare two receipt JSONL files.

    Usage:
        python scripts/check_receipts.py <file1.jsonl> <file2.jsonl>

    Exit codes:
        0: receipts match
        1: receipts differ
    """
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 2:
        print("Usage: python scripts/check_receipts.py <file1.jsonl> <file2.jsonl>")
        return 1

    file_a, file_b = argv

    print("Comparing receipts:")
    print(f"  A: {file_a}")
    print(f"  B: {file_b}")

    records_a = load_jsonl(file_a)
    diffs = compare_records(records_a, load_jsonl(file_b))

    if not diffs:
        print(f"✓ RECEIPTS_MATCH ({len(records_a)} records)")
        return 0

    print("\n✗ Differences:")
    for diff in diffs[:10]:
        print(f"  {diff}")
    if len(diffs) > 10:
        print(f"  ... and {len(diffs) - 10} more differences")
    print("\n✗ RECEIPTS_DIFFER")
    return 1


if __name__ == "__main__":
    sys.exit(main())
