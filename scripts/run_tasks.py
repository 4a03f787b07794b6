#!/usr/bin/env python3
# scripts/run_tasks.py
# Batch case runner with run-twice determinism check

"""
Run solve() on every *.in case in a directory, twice per case.

Determinism:
- Compare section hashes, table_hash and k between the two runs
- NONDETERMINISTIC_EXECUTION if anything differs within the same env
- NONDETERMINISTIC_ENV if env fingerprints differ

Oracle:
- If <case>.out exists next to <case>.in, the answer must match it (else FAIL)

Output:
- Per-case records to out/receipts/run.jsonl
- Summary: result counts, mode counts
"""

from __future__ import annotations
import json
import sys
from pathlib import Path
from typing import List, Dict, Any

# Add project root to path
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

from gridrun.io.load_data import Case, load_case, load_expected
from gridrun.op.receipts import aggregate
from gridrun.runner import solve


def list_cases(cases_dir: Path) -> List[Path]:
    """Case files in sorted order."""
    return sorted(cases_dir.glob("*.in"))


def run_case_with_determinism(
    case_id: str,
    case: Case,
    expected: int | None,
    self_check: bool = False
) -> Dict[str, Any]:
    """
    Run solve() twice and check determinism.

    Returns:
        {
            "case_id": str,
            "result": "PASS" | "FAIL" | "NONDETERMINISTIC_EXECUTION" | "NONDETERMINISTIC_ENV" | "ERROR",
            "mode": str,
            "n": int,
            "k": int,
            "expected": int | None,
            "table_hash_run1": str,
            "table_hash_run2": str,
            "error": str | None
        }
    """
    summary = {
        "case_id": case_id,
        "result": "PASS",
        "mode": None,
        "n": case.n,
        "k": None,
        "expected": expected,
        "table_hash_run1": None,
        "table_hash_run2": None,
        "error": None
    }

    try:
        k1, rc1 = solve(case, self_check=self_check)
        k2, rc2 = solve(case, self_check=self_check)

        summary["mode"] = rc1.final["mode"]
        summary["k"] = k1
        summary["table_hash_run1"] = rc1.table_hash
        summary["table_hash_run2"] = rc2.table_hash

        if aggregate(rc1.env) != aggregate(rc2.env):
            summary["result"] = "NONDETERMINISTIC_ENV"
            summary["error"] = "Environment fingerprints differ between runs"
            return summary

        if rc1.hashes != rc2.hashes:
            diff_sections = [s for s in rc1.hashes if rc1.hashes.get(s) != rc2.hashes.get(s)]
            summary["result"] = "NONDETERMINISTIC_EXECUTION"
            summary["error"] = f"Section hashes differ between runs: {diff_sections}"
            return summary

        if rc1.table_hash != rc2.table_hash or k1 != k2:
            summary["result"] = "NONDETERMINISTIC_EXECUTION"
            summary["error"] = f"Table hash or answer differs between runs ({k1} vs {k2})"
            return summary

        if expected is not None and k1 != expected:
            summary["result"] = "FAIL"
            summary["error"] = f"Answer {k1} does not match oracle {expected}"

    except Exception as e:
        summary["result"] = "ERROR"
        summary["error"] = str(e)

    return summary


def run_batch(
    cases_dir: Path,
    output_path: Path,
    fail_fast: bool = False,
    self_check: bool = False
) -> Dict[str, Any]:
    """
    Run every case in a directory with determinism checks.

    Args:
        cases_dir: directory holding *.in (and optional *.out) files
        output_path: output JSONL file
        fail_fast: stop on first non-PASS
        self_check: verify D4 invariance on every case

    Returns:
        Summary dict with counts and per-case results
    """
    results = []
    result_counts: Dict[str, int] = {}
    mode_counts: Dict[str, int] = {}

    paths = list_cases(cases_dir)

    for idx, path in enumerate(paths):
        case_id = path.stem
        print(f"[{idx+1}/{len(paths)}] Running {case_id}...", end=" ", flush=True)

        try:
            case = load_case(str(path))
            oracle_path = path.with_suffix(".out")
            expected = load_expected(str(oracle_path)) if oracle_path.exists() else None
            result = run_case_with_determinism(case_id, case, expected, self_check=self_check)
        except Exception as e:
            result = {"case_id": case_id, "result": "ERROR", "error": str(e)}

        status = result["result"]
        result_counts[status] = result_counts.get(status, 0) + 1
        if result.get("mode"):
            mode_counts[result["mode"]] = mode_counts.get(result["mode"], 0) + 1

        if status == "PASS":
            oracle_str = "✓ oracle" if result.get("expected") is not None else "? no oracle"
            print(f"{status} ({result['mode']}, k={result['k']}) {oracle_str}")
        else:
            print(f"{status}: {result.get('error', 'unknown')}")

        results.append(result)

        if fail_fast and status != "PASS":
            print(f"\nFail-fast: Stopping on first {status}")
            break

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        for result in results:
            f.write(json.dumps(result) + "\n")

    return {
        "total": len(results),
        "result_counts": result_counts,
        "mode_counts": mode_counts,
        "results": results
    }


def main(argv: list[str] | None = None) -> int:
    """
    Usage:
        python scripts/run_tasks.py --cases tests/cases [--fail-fast] [--self-check]
    """
    import argparse

    parser = argparse.ArgumentParser(description="Batch case runner with determinism checks")
    parser.add_argument("--cases", type=str, required=True, help="Directory with *.in / *.out files")
    parser.add_argument("--fail-fast", action="store_true", help="Stop on first failure")
    parser.add_argument("--self-check", action="store_true", help="Verify D4 invariance per case")
    parser.add_argument("--output", type=str, default="out/receipts/run.jsonl", help="Output JSONL path")

    args = parser.parse_args(argv)

    cases_dir = Path(args.cases)
    output_path = Path(args.output)

    print(f"Cases dir: {cases_dir}")
    print(f"Output: {output_path}")
    print(f"Fail-fast: {args.fail_fast}\n")

    summary = run_batch(cases_dir, output_path, fail_fast=args.fail_fast, self_check=args.self_check)

    print("\n" + "=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print(f"Total cases: {summary['total']}")
    print("\nResult counts:")
    for result, count in sorted(summary["result_counts"].items()):
        print(f"  {result}: {count}")

    if summary["mode_counts"]:
        print("\nMode counts:")
        for mode, count in sorted(summary["mode_counts"].items()):
            print(f"  {mode}: {count}")

    print(f"\nReceipts written to: {output_path}")

    counts = summary["result_counts"]
    if counts.get("NONDETERMINISTIC_EXECUTION", 0) > 0:
        print("\n❌ NONDETERMINISTIC_EXECUTION detected!")
        return 1
    if counts.get("ERROR", 0) > 0 or counts.get("FAIL", 0) > 0:
        print("\n❌ Errors or oracle mismatches detected!")
        return 1
    print("\n✓ All cases passed with determinism")
    return 0


if __name__ == "__main__":
    sys.exit(main())
