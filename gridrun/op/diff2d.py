# gridrun/op/diff2d.py
# Overlap counter: per-row range-add / point-query via difference arrays

from __future__ import annotations
import numpy as np


class RowIntervalCounter:
    """
    Difference array V of shape n×(n+1) over column intervals, one per row.

    add(row, lo, hi) registers the half-open interval [lo, hi) in `row`
    in O(1). materialize() prefix-sums every row independently so that
    cover[row, col] is the number of registered intervals of that row
    containing col.

    A counter is scratch state for one evaluation; build a fresh one per
    call instead of resetting a shared instance.
    """

    def __init__(self, n: int):
        if n < 1:
            raise ValueError(f"RowIntervalCounter needs n >= 1, got {n}")
        self.n = n
        self.V = np.zeros((n, n + 1), dtype=np.int64)
        self.count = 0

    def add(self, row: int, lo: int, hi: int) -> None:
        """
        Register [lo, hi) in `row`.

        Raises:
            IndexError: if the interval leaves [0, n] or row is out of range
        """
        n = self.n
        if not (0 <= row < n and 0 <= lo < hi <= n):
            raise IndexError(f"interval_oob: row={row} [{lo},{hi}) vs n={n}")
        self.V[row, lo] += 1
        self.V[row, hi] -= 1
        self.count += 1

    def materialize(self) -> np.ndarray:
        """
        Per-row prefix sum of V, trimmed to n×n.

        Returns:
            cover: int64 array, cover[row, col] = #intervals covering (row, col)
        """
        return np.cumsum(self.V, axis=1)[:, :self.n]


def window_sums(cover: np.ndarray, k: int) -> np.ndarray:
    """
    Sliding sum down each column over the last k rows.

    out[j, i] = sum(cover[r, i] for r in range(max(0, j-k+1), j+1))

    Equivalent to the running update
        running += cover[j, i] - (cover[j-k, i] if j >= k else 0)
    along each column, done for all columns at once.

    Args:
        cover: materialized n×n coverage matrix
        k: window height (k >= 1)

    Returns:
        int64 array of the same shape as cover
    """
    if k < 1:
        raise ValueError(f"window height must be >= 1, got {k}")

    csum = np.cumsum(cover, axis=0)
    out = csum.copy()
    if k < cover.shape[0]:
        out[k:, :] -= csum[:-k, :]
    return out
