# gridrun/io/load_data.py
# Case loader: "n m" header followed by n rows of n markers

from __future__ import annotations
from dataclasses import dataclass
from gridrun.op.grid import Grid, PASSABLE, BLOCKED

# Mode ids (frozen): 1 selects line mode, anything else pair mode
MODE_LINE = 1


@dataclass
class Case:
    n: int
    m: int
    grid: Grid


def _parse_int(token: str, name: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise ValueError(f"header: {name} must be an integer, got {token!r}") from None


def parse_case(text: str) -> Case:
    """
    Parse a case from text.

    Expected format (whitespace separated tokens):
        n m
        row_0
        ...
        row_{n-1}

    Each row has exactly n characters, PASSABLE ('.') or BLOCKED ('#').

    Args:
        text: case text

    Returns:
        Case

    Raises:
        ValueError: on any malformed input (fail-closed)
    """
    tokens = text.split()
    if len(tokens) < 2:
        raise ValueError("header: expected 'n m'")

    n = _parse_int(tokens[0], "n")
    m = _parse_int(tokens[1], "m")
    if n < 1:
        raise ValueError(f"header: n must be >= 1, got {n}")

    rows = tokens[2:]
    if len(rows) != n:
        raise ValueError(f"expected {n} rows, got {len(rows)}")

    for i, row in enumerate(rows):
        if len(row) != n:
            raise ValueError(f"row {i}: expected {n} cells, got {len(row)}")
        for j, ch in enumerate(row):
            if ch != PASSABLE and ch != BLOCKED:
                raise ValueError(
                    f"row {i} col {j}: unknown marker {ch!r} "
                    f"(expected {PASSABLE!r} or {BLOCKED!r})"
                )

    return Case(n=n, m=m, grid=Grid.from_rows(rows))


def load_case(path: str) -> Case:
    """
    Load a case file.

    Args:
        path: path to case file

    Returns:
        Case
    """
    with open(path, "r") as f:
        return parse_case(f.read())


def load_expected(path: str) -> int:
    """
    Load an oracle answer file holding a single integer.

    Raises:
        ValueError: if the file does not hold exactly one integer
    """
    with open(path, "r") as f:
        tokens = f.read().split()
    if len(tokens) != 1:
        raise ValueError(f"{path}: expected a single integer, got {len(tokens)} tokens")
    return int(tokens[0])
