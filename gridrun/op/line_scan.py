# gridrun/op/line_scan.py
# Line mode: longest passable run in any single row or column

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np
from .grid import Grid
from .runs import scan_rows, scan_cols


@dataclass
class LineScanRc:
    """
    Line scan receipt.

    best_row / best_col: longest horizontal / vertical run
    row_end / col_end: [row, col] of the first cell (row-major) where that
                       run ends, None when the grid is fully blocked
    """
    k: int
    best_row: int
    best_col: int
    row_end: Optional[list[int]]
    col_end: Optional[list[int]]


def _argmax_cell(R: np.ndarray) -> Tuple[int, Optional[list[int]]]:
    best = int(R.max())
    if best == 0:
        return 0, None
    r, c = np.unravel_index(int(np.argmax(R)), R.shape)
    return best, [int(r), int(c)]


def longest_line_run(grid: Grid) -> Tuple[int, LineScanRc]:
    """
    Max run length over every row and every column.

    Args:
        grid: Grid

    Returns:
        (k, LineScanRc)
    """
    best_row, row_end = _argmax_cell(scan_rows(grid))
    best_col, col_end = _argmax_cell(scan_cols(grid))
    k = max(best_row, best_col)
    return k, LineScanRc(k=k, best_row=best_row, best_col=best_col,
                         row_end=row_end, col_end=col_end)
