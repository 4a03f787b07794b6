# gridrun/op/runs.py
# Run scanner: length of the passable run ending at each cell along one axis

from __future__ import annotations
import numpy as np
from .grid import Grid

# Axis ids (frozen)
ROWS = 0
COLS = 1


def scan_line(cells: np.ndarray) -> np.ndarray:
    """
    Run lengths along a single line.

    r[t] = 0 if cells[t] is blocked, else r[t-1] + 1 (with r[-1] = 0).

    Algorithm:
        The run ending at t starts right after the last blocked position
        at or before t, so r[t] = t - last_blocked[t] where last_blocked
        is a running maximum of blocked positions (-1 if none yet).

    Args:
        cells: 1-D boolean array, True = passable

    Returns:
        1-D int64 array of run lengths
    """
    cells = np.asarray(cells, dtype=np.bool_)
    if cells.ndim != 1:
        raise ValueError(f"scan_line expects a 1-D line, got shape {cells.shape}")

    t = np.arange(cells.shape[0], dtype=np.int64)
    last_blocked = np.maximum.accumulate(np.where(cells, -1, t))
    return t - last_blocked


def scan_axis(grid: Grid, axis: int) -> np.ndarray:
    """
    Run lengths for every line of the grid along one axis.

    Args:
        grid: Grid
        axis: ROWS (runs grow left to right) or COLS (runs grow top to bottom)

    Returns:
        n×n int64 array R where R[i, j] is the run ending at cell (i, j)
        along the chosen axis
    """
    if axis not in (ROWS, COLS):
        raise ValueError(f"Invalid axis {axis}, must be ROWS=0 or COLS=1")

    G = grid.cells
    n = grid.n
    # Position of each cell along the scan direction
    if axis == ROWS:
        t = np.broadcast_to(np.arange(n, dtype=np.int64)[None, :], (n, n))
        along = 1
    else:
        t = np.broadcast_to(np.arange(n, dtype=np.int64)[:, None], (n, n))
        along = 0

    last_blocked = np.maximum.accumulate(np.where(G, -1, t), axis=along)
    return t - last_blocked


def scan_rows(grid: Grid) -> np.ndarray:
    """Horizontal run lengths (left to right)."""
    return scan_axis(grid, ROWS)


def scan_cols(grid: Grid) -> np.ndarray:
    """Vertical run lengths (top to bottom)."""
    return scan_axis(grid, COLS)
