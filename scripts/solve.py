#!/usr/bin/env python3
# scripts/solve.py
# Single-shot solver: read one case, print the answer

"""
Usage:
    python scripts/solve.py case.in
    python scripts/solve.py < case.in
    python scripts/solve.py case.in --receipts out/receipts/case.jsonl
"""

from __future__ import annotations
import argparse
import sys
from pathlib import Path

# Add project root to path
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

from gridrun.io.load_data import parse_case
from gridrun.io.save import format_answer, write_jsonl
from gridrun.op.receipts import aggregate
from gridrun.runner import solve


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Largest shape size on a passability grid")
    parser.add_argument("path", nargs="?", help="Case file (default: stdin)")
    parser.add_argument("--receipts", type=str, help="Write the run receipt as JSONL")
    parser.add_argument("--self-check", action="store_true", help="Verify D4 invariance of the answer")
    args = parser.parse_args(argv)

    if args.path:
        with open(args.path, "r") as f:
            text = f.read()
    else:
        text = sys.stdin.read()

    try:
        case = parse_case(text)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    k, run_rc = solve(case, self_check=True if args.self_check else None)
    sys.stdout.write(format_answer(k))

    if args.receipts:
        write_jsonl(args.receipts, [aggregate(run_rc)])

    return 0


if __name__ == "__main__":
    sys.exit(main())
