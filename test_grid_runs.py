#!/usr/bin/env python3
"""Grid + Run Scanner Tests"""

import itertools
import random

import numpy as np
import pytest

from gridrun.op.grid import Grid
from gridrun.op.runs import ROWS, COLS, scan_line, scan_axis, scan_rows, scan_cols


def _naive_runs(line):
    out, cur = [], 0
    for cell in line:
        cur = cur + 1 if cell else 0
        out.append(cur)
    return out


def _random_grid(rng, n, p=0.6):
    return Grid(np.array([[rng.random() < p for _ in range(n)] for _ in range(n)], dtype=np.bool_))


def test_from_rows_markers():
    """Grid.from_rows maps '.' to passable and '#' to blocked."""
    print("Testing from_rows markers...")

    g = Grid.from_rows(["#.#", ".#.", "#.#"])

    assert g.n == 3
    assert g.passable(0, 1) and not g.passable(0, 0), "row 0 should be #.#"
    assert g.passable_count() == 4, f"Expected 4 passable cells, got {g.passable_count()}"
    assert g.to_rows() == ["#.#", ".#.", "#.#"], "to_rows should reproduce the input"

    print("  ✓ from_rows works")


def test_from_rows_rejects_bad_input():
    """Ragged rows and unknown markers are rejected."""
    with pytest.raises(ValueError):
        Grid.from_rows(["..", "..."])
    with pytest.raises(ValueError):
        Grid.from_rows([".x", ".."])
    with pytest.raises(ValueError):
        Grid.from_rows([])


def test_non_square_rejected():
    with pytest.raises(ValueError):
        Grid(np.ones((2, 3), dtype=np.bool_))


def test_grid_is_immutable():
    """Grid keeps a read-only private copy of its cells."""
    print("Testing grid immutability...")

    src = np.ones((2, 2), dtype=np.bool_)
    g = Grid(src)
    src[0, 0] = False

    assert g.passable(0, 0), "Mutating the source array must not leak into the grid"
    with pytest.raises(ValueError):
        g.cells[0, 0] = False

    print("  ✓ Grid is immutable")


def test_passable_out_of_range():
    """Out-of-range coordinates raise IndexError, negatives included."""
    g = Grid.from_rows([".."] * 2)
    for i, j in [(2, 0), (0, 2), (-1, 0), (0, -1)]:
        with pytest.raises(IndexError):
            g.passable(i, j)


def test_line_views():
    g = Grid.from_rows(["..#", "#..", "..."])
    assert g.line(0, 0).tolist() == [True, True, False]
    assert g.line(1, 0).tolist() == [True, False, True]
    with pytest.raises(ValueError):
        g.line(2, 0)
    with pytest.raises(IndexError):
        g.line(0, 3)


def test_scan_line_basic():
    """r[t] = 0 on blocked, r[t-1] + 1 on passable."""
    print("Testing scan_line...")

    line = np.array([True, True, False, True, True, True, False], dtype=np.bool_)
    r = scan_line(line)

    assert r.tolist() == [1, 2, 0, 1, 2, 3, 0], f"Unexpected runs {r.tolist()}"
    assert scan_line(np.zeros(0, dtype=np.bool_)).tolist() == []
    with pytest.raises(ValueError):
        scan_line(np.ones((2, 2), dtype=np.bool_))

    print("  ✓ scan_line works")


def test_scan_axis_matches_lines():
    """Row / column scans equal per-line scans of the grid."""
    print("Testing scan_axis vs per-line scans...")

    rng = random.Random(7)
    for n in range(1, 9):
        g = _random_grid(rng, n)
        R = scan_rows(g)
        C = scan_cols(g)
        for idx in range(n):
            assert R[idx, :].tolist() == _naive_runs(g.line(ROWS, idx)), f"row {idx} mismatch, n={n}"
            assert C[:, idx].tolist() == _naive_runs(g.line(COLS, idx)), f"col {idx} mismatch, n={n}"

    print("  ✓ scan_axis matches per-line scans")


def test_scan_axis_all_small_grids():
    """Exhaustive check on every 3×3 grid."""
    for bits in itertools.product([False, True], repeat=9):
        g = Grid(np.array(bits, dtype=np.bool_).reshape(3, 3))
        assert np.array_equal(scan_axis(g, COLS), scan_axis(Grid(g.cells.T), ROWS).T)


def test_scan_axis_invalid():
    with pytest.raises(ValueError):
        scan_axis(Grid.from_rows(["."]), 2)


def run_tests():
    """Run all grid/run scanner tests."""
    print("\n" + "=" * 60)
    print("Grid + Run Scanner Tests")
    print("=" * 60 + "\n")

    test_from_rows_markers()
    test_from_rows_rejects_bad_input()
    test_non_square_rejected()
    test_grid_is_immutable()
    test_passable_out_of_range()
    test_line_views()
    test_scan_line_basic()
    test_scan_axis_matches_lines()
    test_scan_axis_all_small_grids()
    test_scan_axis_invalid()

    print("\n" + "=" * 60)
    print("✓ All grid/run scanner tests passed")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    run_tests()
