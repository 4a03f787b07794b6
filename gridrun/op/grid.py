# gridrun/op/grid.py
# Immutable n×n passability grid

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable
import numpy as np

# Frozen cell markers
PASSABLE = "."
BLOCKED = "#"


@dataclass(frozen=True, eq=False)
class Grid:
    """
    n×n table of booleans, True = passable.

    The backing array is a private read-only copy; nothing downstream can
    mutate the grid once it is built.
    """
    cells: np.ndarray

    def __post_init__(self):
        cells = np.array(self.cells, dtype=np.bool_, copy=True)
        if cells.ndim != 2 or cells.shape[0] != cells.shape[1]:
            raise ValueError(f"Grid must be square, got shape {cells.shape}")
        if cells.shape[0] < 1:
            raise ValueError("Grid must have n >= 1")
        cells.setflags(write=False)
        object.__setattr__(self, "cells", cells)

    @classmethod
    def from_rows(cls, rows: Iterable[str]) -> "Grid":
        """
        Build a grid from marker strings (PASSABLE / BLOCKED).

        Raises:
            ValueError: if a row holds an unknown marker or rows are ragged
        """
        rows = list(rows)
        n = len(rows)
        for i, row in enumerate(rows):
            if len(row) != n:
                raise ValueError(f"row {i}: expected {n} cells, got {len(row)}")
            bad = set(row) - {PASSABLE, BLOCKED}
            if bad:
                raise ValueError(f"row {i}: unknown markers {sorted(bad)}")
        return cls(np.array([[ch == PASSABLE for ch in row] for row in rows], dtype=np.bool_).reshape(n, n))

    @property
    def n(self) -> int:
        return int(self.cells.shape[0])

    def passable(self, i: int, j: int) -> bool:
        """
        Cell lookup for 0 <= i, j < n.

        Raises:
            IndexError: on any out-of-range coordinate (negatives included)
        """
        n = self.n
        if not (0 <= i < n and 0 <= j < n):
            raise IndexError(f"cell_oob: req=({i},{j}) vs grid=({n},{n})")
        return bool(self.cells[i, j])

    def line(self, axis: int, index: int) -> np.ndarray:
        """
        Read-only view of row `index` (axis=0) or column `index` (axis=1).
        """
        if axis not in (0, 1):
            raise ValueError(f"Invalid axis {axis}, must be 0 (rows) or 1 (cols)")
        if not (0 <= index < self.n):
            raise IndexError(f"line_oob: req={index} vs n={self.n}")
        return self.cells[index, :] if axis == 0 else self.cells[:, index]

    def to_rows(self) -> list[str]:
        return ["".join(PASSABLE if c else BLOCKED for c in row) for row in self.cells]

    def passable_count(self) -> int:
        return int(self.cells.sum())
