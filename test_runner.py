#!/usr/bin/env python3
"""Runner, Loader and Script Tests"""

import importlib.util
import itertools
import json
import random
from pathlib import Path

import numpy as np
import pytest

from gridrun.io.load_data import Case, MODE_LINE, parse_case, load_case, load_expected
from gridrun.io.save import format_answer, write_json, write_jsonl
from gridrun.op.d4 import POSES, apply_pose, get_inverse_pose
from gridrun.op.grid import Grid
from gridrun.op.receipts import aggregate
from gridrun.runner import solve, solve_text, solve_grid, check_symmetry

REPO_ROOT = Path(__file__).parent
CASES_DIR = REPO_ROOT / "cases"


def _load_script(name):
    spec = importlib.util.spec_from_file_location(f"scripts_{name}", REPO_ROOT / "scripts" / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _case(rows, m):
    return Case(n=len(rows), m=m, grid=Grid.from_rows(rows))


def _brute_line(G):
    best = 0
    lines = [list(row) for row in G] + [list(col) for col in zip(*G)]
    for line in lines:
        for cell, group in itertools.groupby(line):
            if cell:
                best = max(best, len(list(group)))
    return best


# ============================================================================
# Scenarios
# ============================================================================

def test_fully_passable_3x3():
    """3×3 all passable: line 3, pair 3."""
    print("Testing fully passable 3x3...")

    rows = ["...", "...", "..."]
    assert solve(_case(rows, 1))[0] == 3
    assert solve(_case(rows, 2))[0] == 3

    print("  ✓ Fully passable scenario works")


def test_checkerboard_isolated_cells():
    """Isolated cells: line 1, pair 1."""
    rows = ["#.#", ".#.", "#.#"]
    assert solve(_case(rows, 1))[0] == 1
    assert solve(_case(rows, 0))[0] == 1


def test_single_cell():
    """1×1 grids: an open cell is one line of length 1 but not two disjoint segments."""
    assert solve(_case(["."], 1))[0] == 1
    assert solve(_case(["."], 2))[0] == 0
    assert solve(_case(["#"], 1))[0] == 0
    assert solve(_case(["#"], 2))[0] == 0


def test_all_blocked_pair_mode_zero():
    g = Grid(np.zeros((6, 6), dtype=np.bool_))
    k, rc = solve(Case(n=6, m=5, grid=g))
    assert k == 0
    assert rc.final == {"mode": "pair", "n": 6, "k": 0}


def test_mode_dispatch():
    """m == 1 is line mode; every other value is pair mode."""
    rows = ["....", "####", "####", "####"]
    for m in (0, 2, 3, -1, 99):
        k, rc = solve(_case(rows, m))
        assert k == 2 and rc.final["mode"] == "pair", f"m={m}"
        assert "search" in rc.sections and "line_scan" not in rc.sections
    k, rc = solve(_case(rows, MODE_LINE))
    assert k == 4 and rc.final["mode"] == "line"
    assert "line_scan" in rc.sections and "search" not in rc.sections


def test_line_mode_matches_brute_force():
    print("Testing line mode vs brute force...")

    rng = random.Random(5)
    for n in range(1, 10):
        for _ in range(20):
            g = Grid(np.array([[rng.random() < 0.55 for _ in range(n)] for _ in range(n)], dtype=np.bool_))
            k, rc = solve(Case(n=n, m=1, grid=g))
            assert k == _brute_line(g.cells.tolist()), f"grid={g.to_rows()}"
            line = rc.sections["line_scan"]
            assert k == max(line["best_row"], line["best_col"])

    print("  ✓ Line mode matches brute force")


def test_pair_mode_bounds_and_symmetry():
    """Pair answers lie in [0, n] and are invariant under every D4 pose."""
    print("Testing pair mode symmetry...")

    rng = random.Random(17)
    for n in range(1, 8):
        for _ in range(10):
            g = Grid(np.array([[rng.random() < 0.7 for _ in range(n)] for _ in range(n)], dtype=np.bool_))
            k, _ = solve_grid(g, 2)
            assert 0 <= k <= n
            rotated = Grid(apply_pose(g.cells, 2))
            assert solve_grid(rotated, 2)[0] == k, f"rot180 changed answer for {g.to_rows()}"
            check_symmetry(g, 2, k)
            check_symmetry(g, 1, solve_grid(g, 1)[0])

    print("  ✓ Pair mode symmetric")


def test_check_symmetry_detects_wrong_answer():
    g = Grid.from_rows(["...", "#.#", "#.#"])
    with pytest.raises(AssertionError):
        check_symmetry(g, 2, 3)


def test_d4_inverse_poses():
    G = np.arange(9).reshape(3, 3)
    for pose_id in POSES:
        back = apply_pose(apply_pose(G, pose_id), get_inverse_pose(pose_id))
        assert np.array_equal(back, G), f"pose {pose_id} not inverted"
    with pytest.raises(ValueError):
        apply_pose(G, 8)


# ============================================================================
# Receipts
# ============================================================================

def test_run_receipts_deterministic():
    """Two runs give identical hashes, table hash and answer."""
    case = _case(["..#..", ".....", "#.#.#", ".....", "..#.."], 2)
    k1, rc1 = solve(case)
    k2, rc2 = solve(case)

    assert k1 == k2
    assert rc1.hashes == rc2.hashes
    assert rc1.table_hash == rc2.table_hash
    assert set(rc1.hashes) == {"grid", "search", "feasibility"}
    json.dumps(aggregate(rc1))


def test_search_receipt_records_every_oracle_call():
    case = _case(["...", "#.#", "#.#"], 2)
    k, rc = solve(case)
    search = rc.sections["search"]
    calls = rc.sections["feasibility"]

    assert k == 2
    assert [p[0] for p in search["probes"]] == [c["k"] for c in calls]
    assert [p[1] for p in search["probes"]] == [c["feasible"] for c in calls]
    assert calls[0]["k"] == 4 and calls[0]["feasible"] is False


def test_self_check_env(monkeypatch):
    """GRIDRUN_SELF_CHECK=1 adds the self_check section; explicit False skips it."""
    case = _case(["..", ".#"], 2)

    monkeypatch.setenv("GRIDRUN_SELF_CHECK", "1")
    _, rc = solve(case)
    assert rc.sections["self_check"]["ok"] is True
    _, rc = solve(case, self_check=False)
    assert "self_check" not in rc.sections

    monkeypatch.delenv("GRIDRUN_SELF_CHECK")
    _, rc = solve(case)
    assert "self_check" not in rc.sections


# ============================================================================
# Loader / writer
# ============================================================================

def test_parse_case():
    case = parse_case("3 2\n#.#\n.#.\n#.#\n")
    assert case.n == 3 and case.m == 2
    assert case.grid.to_rows() == ["#.#", ".#.", "#.#"]
    assert solve_text("1 1\n.\n")[0] == 1


@pytest.mark.parametrize("text", [
    "",
    "3",
    "x 1\n...\n...\n...\n",
    "3 y\n...\n...\n...\n",
    "0 1\n",
    "2 1\n..\n",
    "2 1\n..\n..\n..\n",
    "2 1\n...\n..\n",
    "2 1\n.a\n..\n",
])
def test_parse_case_rejects_malformed(text):
    with pytest.raises(ValueError):
        parse_case(text)


def test_files_roundtrip(tmp_path):
    case_path = tmp_path / "a.in"
    case_path.write_text("2 1\n..\n#.\n")
    (tmp_path / "a.out").write_text("2\n")

    case = load_case(str(case_path))
    assert solve(case)[0] == load_expected(str(tmp_path / "a.out"))
    assert format_answer(7) == "7\n"

    write_json(str(tmp_path / "sub" / "x.json"), {"k": 1})
    assert json.loads((tmp_path / "sub" / "x.json").read_text()) == {"k": 1}
    write_jsonl(str(tmp_path / "r.jsonl"), [{"a": 1}, {"b": 2}])
    assert (tmp_path / "r.jsonl").read_text().splitlines() == ['{"a":1}', '{"b":2}']

    (tmp_path / "bad.out").write_text("1 2\n")
    with pytest.raises(ValueError):
        load_expected(str(tmp_path / "bad.out"))


# ============================================================================
# Scripts
# ============================================================================

def test_solve_script(tmp_path, capsys):
    solve_script = _load_script("solve")
    case_path = tmp_path / "c.in"
    case_path.write_text("3 2\n...\n#.#\n#.#\n")
    receipts_path = tmp_path / "out" / "c.jsonl"

    assert solve_script.main([str(case_path), "--receipts", str(receipts_path)]) == 0
    assert capsys.readouterr().out == "2\n"
    record = json.loads(receipts_path.read_text().splitlines()[0])
    assert record["final"]["k"] == 2

    bad = tmp_path / "bad.in"
    bad.write_text("2 1\n.\n")
    assert solve_script.main([str(bad)]) == 1
    assert "Error" in capsys.readouterr().err


def test_run_tasks_over_bundled_cases(tmp_path):
    """Every bundled case passes its oracle deterministically."""
    run_tasks = _load_script("run_tasks")
    output = tmp_path / "run.jsonl"

    summary = run_tasks.run_batch(CASES_DIR, output, self_check=True)

    assert summary["total"] == len(list(CASES_DIR.glob("*.in")))
    assert summary["result_counts"] == {"PASS": summary["total"]}, summary["results"]
    assert len(output.read_text().splitlines()) == summary["total"]


def test_check_receipts_script(tmp_path):
    check = _load_script("check_receipts")
    _, rc = solve(_case(["..", ".."], 2))
    rec = aggregate(rc)
    a, b = tmp_path / "a.jsonl", tmp_path / "b.jsonl"
    write_jsonl(str(a), [rec])
    write_jsonl(str(b), [rec])
    assert check.main([str(a), str(b)]) == 0

    changed = json.loads(json.dumps(rec))
    changed["final"]["k"] = 99
    write_jsonl(str(b), [changed])
    assert check.main([str(a), str(b)]) == 1


def run_tests():
    """Run tests that need no pytest fixtures."""
    print("\n" + "=" * 60)
    print("Runner Tests")
    print("=" * 60 + "\n")

    test_fully_passable_3x3()
    test_checkerboard_isolated_cells()
    test_single_cell()
    test_all_blocked_pair_mode_zero()
    test_mode_dispatch()
    test_line_mode_matches_brute_force()
    test_pair_mode_bounds_and_symmetry()
    test_check_symmetry_detects_wrong_answer()
    test_d4_inverse_poses()
    test_run_receipts_deterministic()
    test_search_receipt_records_every_oracle_call()
    test_parse_case()

    print("\n" + "=" * 60)
    print("✓ All runner tests passed")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    run_tests()
