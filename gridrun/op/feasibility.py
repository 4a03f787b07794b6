# gridrun/op/feasibility.py
# Feasibility oracle for pair mode: two-phase sweep over rows then columns

"""
Decides, for a threshold k, whether the passable region holds two
cell-disjoint straight runs of length k.

Phase 1 (rows, row-major):
  Every horizontal run reaching length >= k at (i, j) is a placement of the
  segment [j-k+1, j] in row i. The witness is the smallest such end cell
  seen so far. If witness <= (i, j-k) the witness placement and the current
  one do not share a cell, so two horizontal placements fit.
  Otherwise the placement is counted and its interval registered in the
  overlap counter.

Phase 2 (columns, column-major):
  After materializing the counter, every vertical placement ending at row j
  of column i meets exactly window_sums(cover, k)[j, i] horizontal
  placements. It is feasible if two vertical placements are disjoint
  (same witness test with (col, row) coordinates) or if fewer horizontal
  placements meet it than were counted in Phase 1.

All scratch state (counter, witnesses, run matrices) lives inside one call.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np
from .grid import Grid
from .runs import scan_rows, scan_cols
from .diff2d import RowIntervalCounter, window_sums
from .hash import hash_grid

Coord = Tuple[int, int]

# Certificate codes (frozen)
CERT_HORIZONTAL_PAIR = "horizontal_pair"
CERT_VERTICAL_PAIR = "vertical_pair"
CERT_UNCLAIMED_HORIZONTAL = "unclaimed_horizontal"


@dataclass
class FeasibilityRc:
    """
    Receipt for one oracle call.

    certificate: which predicate accepted k (None if infeasible)
    at:          [row, col] of the run end where it fired (None if infeasible)
    horizontal_count: horizontal placements registered before exit
    cover_hash:  BLAKE3 of the materialized coverage matrix (None if
                 Phase 1 exited early)
    """
    k: int
    feasible: bool
    certificate: Optional[str]
    at: Optional[list[int]]
    horizontal_count: int
    cover_hash: Optional[str]


def _lex_min(witness: Optional[Coord], cell: Coord) -> Coord:
    if witness is None or cell < witness:
        return cell
    return witness


def _witness_certifies(witness: Coord, line: int, end: int, k: int) -> bool:
    """
    Same-axis pair test: the earliest placement ends before the current
    placement starts (or lies on an earlier line).
    """
    return witness <= (line, end - k)


def _has_unclaimed_run(meeting: int, horizontal_count: int) -> bool:
    """
    Cross-axis test: some registered horizontal placement does not meet
    the current vertical placement.
    """
    return meeting < horizontal_count


def feasibility_rc(grid: Grid, k: int) -> Tuple[bool, FeasibilityRc]:
    """
    Run the two-phase sweep for threshold k.

    Args:
        grid: Grid
        k: threshold (k >= 0)

    Returns:
        (feasible, FeasibilityRc)

    Raises:
        ValueError: if k < 0
    """
    if k < 0:
        raise ValueError(f"k must be >= 0, got {k}")

    n = grid.n
    counter = RowIntervalCounter(n)

    def _rc(ok: bool, cert: Optional[str], at: Optional[Coord], cover_hash: Optional[str]):
        return ok, FeasibilityRc(
            k=k,
            feasible=ok,
            certificate=cert,
            at=list(at) if at is not None else None,
            horizontal_count=counter.count,
            cover_hash=cover_hash,
        )

    # Phase 1: rows
    R = scan_rows(grid)
    witness = None
    for i, j in np.argwhere(R >= k):
        i, j = int(i), int(j)
        witness = _lex_min(witness, (i, j))
        if _witness_certifies(witness, i, j, k):
            return _rc(True, CERT_HORIZONTAL_PAIR, (i, j), None)
        counter.add(i, j - k + 1, j + 1)

    cover = counter.materialize()
    cover_hash = hash_grid(cover)

    # Phase 2: columns
    meets = window_sums(cover, k)
    C = scan_cols(grid)
    witness = None
    # argwhere on the transpose yields (col, row) in column-major order
    for i, j in np.argwhere(C.T >= k):
        i, j = int(i), int(j)
        witness = _lex_min(witness, (i, j))
        if _witness_certifies(witness, i, j, k):
            return _rc(True, CERT_VERTICAL_PAIR, (j, i), cover_hash)
        if _has_unclaimed_run(int(meets[j, i]), counter.count):
            return _rc(True, CERT_UNCLAIMED_HORIZONTAL, (j, i), cover_hash)

    return _rc(False, None, None, cover_hash)


def feasibility(grid: Grid, k: int) -> bool:
    """Boolean projection of feasibility_rc."""
    ok, _ = feasibility_rc(grid, k)
    return ok
